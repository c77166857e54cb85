from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_input",
    "not_found",
    "invalid_manifest",
    "manifest_failed",
    "archive_failed",
    "config_invalid",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Failure of a release stage, rendered by the CLI as message + hint."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
