"""Validation for operator-supplied release fields.

Version numbers are 10-digit build numbers (``2007001064``). Version names
follow the distribution naming scheme::

    DFNPRO11_SA_RETAIL_X_2.007.00.2
    <product>_<region>_<edition>_<flavour>_<major>.<minor>.<patch>.<build>
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from relpatch.core.result import Err, Ok, Result
from relpatch.release.errors import ReleaseError

VERSION_NUMBER_DIGITS = 10
VERSION_NUMBER_MIN = 1_000_000_000
VERSION_NUMBER_MAX = 9_999_999_999

NAME_COMPONENTS = 5
VERSION_PARTS = 4

type VersionConform = Callable[[int], bool]


def accept_any_version(_version: int) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class VersionName:
    raw: str
    components: tuple[str, ...]
    version: tuple[int, ...]

    @property
    def dotted(self) -> str:
        return self.raw.rsplit("_", 1)[-1]


def _invalid(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_input", message=message, hint=hint))


def validate_version_number(
    value: int | str, *, conform: VersionConform = accept_any_version
) -> Result[int, ReleaseError]:
    """Accept exactly 10 digits within the supported range, then run ``conform``."""
    if isinstance(value, bool):
        return _invalid("version number must be an integer")

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return _invalid("version number is required")
        if not (text.isascii() and text.isdigit()):
            return _invalid(f"version number must be numeric: {text!r}")
        number = int(text)
    else:
        number = value

    if len(str(abs(number))) != VERSION_NUMBER_DIGITS:
        return _invalid(
            f"version number must have exactly {VERSION_NUMBER_DIGITS} digits: {number}",
            hint="e.g. 2007001064",
        )
    if not VERSION_NUMBER_MIN <= number <= VERSION_NUMBER_MAX:
        return _invalid(
            f"version number out of range: {number}",
            hint=f"{VERSION_NUMBER_MIN}..{VERSION_NUMBER_MAX}",
        )
    if not conform(number):
        return _invalid(f"version number rejected: {number}")
    return Ok(number)


def validate_version_name(value: str) -> Result[VersionName, ReleaseError]:
    """Check the 5-component / 4-part naming scheme."""
    raw = value.strip()
    if not raw:
        return _invalid("version name is required")

    hint = "e.g. DFNPRO11_SA_RETAIL_X_2.007.00.2"
    components = raw.split("_")
    if len(components) != NAME_COMPONENTS:
        return _invalid(
            f"version name must have {NAME_COMPONENTS} '_' separated components: {raw}",
            hint=hint,
        )

    parts = components[-1].split(".")
    if len(parts) != VERSION_PARTS:
        return _invalid(
            f"version name must end with {VERSION_PARTS} '.' separated parts: {raw}",
            hint=hint,
        )
    if not all(p.isascii() and p.isdigit() for p in parts):
        return _invalid(f"version name parts must be numeric: {components[-1]}", hint=hint)

    return Ok(
        VersionName(
            raw=raw,
            components=tuple(components),
            version=tuple(int(p) for p in parts),
        )
    )
