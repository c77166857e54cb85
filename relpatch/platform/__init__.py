"""Filesystem helpers."""

from .files import atomic_write_text, sibling_temp_path

__all__ = ["atomic_write_text", "sibling_temp_path"]
