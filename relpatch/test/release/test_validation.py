from __future__ import annotations

import pytest

from relpatch.core.result import Err, Ok
from relpatch.release.validation import validate_version_name, validate_version_number


@pytest.mark.parametrize(
    "name",
    [
        "DFNPRO11_SA_RETAIL_X_2.007.00.2",
        "A_B_C_D_1.2.3.4",
        "  DFNPRO11_KW_PRO_Y_10.0.0.125  ",
    ],
)
def test_version_name_accepts_five_components_four_parts(name: str) -> None:
    result = validate_version_name(name)
    assert isinstance(result, Ok)
    assert result.value.raw == name.strip()
    assert len(result.value.components) == 5


def test_version_name_parses_version_tuple() -> None:
    result = validate_version_name("DFNPRO11_SA_RETAIL_X_2.007.00.2")
    assert isinstance(result, Ok)
    assert result.value.version == (2, 7, 0, 2)
    assert result.value.dotted == "2.007.00.2"


@pytest.mark.parametrize(
    "name",
    [
        "",
        "DFNPRO11_SA_RETAIL_2.007.00.2",
        "DFNPRO11_SA_RETAIL_X_Y_2.007.00.2",
        "DFNPRO11_SA_RETAIL_X_2.007.00",
        "DFNPRO11_SA_RETAIL_X_2.007.00.2.1",
        "DFNPRO11_SA_RETAIL_X_2.a07.00.2",
        "DFNPRO11_SA_RETAIL_X_2..00.2",
    ],
)
def test_version_name_rejects_bad_shapes(name: str) -> None:
    result = validate_version_name(name)
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"


@pytest.mark.parametrize("value", [2007001064, "2007001064", " 1000000000 ", 9_999_999_999])
def test_version_number_accepts_ten_digits(value: int | str) -> None:
    result = validate_version_number(value)
    assert isinstance(result, Ok)
    assert 1_000_000_000 <= result.value <= 9_999_999_999


@pytest.mark.parametrize(
    "value",
    [
        "",
        "200700106",
        "20070010641",
        999_999_999,
        10_000_000_000,
        "0123456789",
        "2007-01064",
        -2007001064,
    ],
)
def test_version_number_rejects_wrong_length_or_format(value: int | str) -> None:
    result = validate_version_number(value)
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"


def test_version_number_rejects_bool() -> None:
    assert isinstance(validate_version_number(True), Err)


def test_version_number_conform_hook() -> None:
    seen: list[int] = []

    def conform(version: int) -> bool:
        seen.append(version)
        return version != 2007001064

    assert isinstance(validate_version_number("2007001064", conform=conform), Err)
    assert validate_version_number("2007001065", conform=conform) == Ok(2007001065)
    assert seen == [2007001064, 2007001065]
