"""Release note collection and server-tree patching."""

from .errors import ReleaseError
from .model import CATEGORIES, LANGUAGES, ReleaseNote, ReleaseRequest

__all__ = ["CATEGORIES", "LANGUAGES", "ReleaseError", "ReleaseNote", "ReleaseRequest"]
