"""Error presentation for release failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from relpatch.core.errors import ErrorCode
from relpatch.output.console import Style
from relpatch.release.errors import ReleaseError

if TYPE_CHECKING:
    from relpatch.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "invalid_input":
            return int(ErrorCode.USER_ERROR)
        case "not_found" | "config_invalid":
            return int(ErrorCode.ENV_ERROR)
        case "invalid_manifest" | "manifest_failed" | "archive_failed":
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.USER_ERROR)
