from decimal import Decimal

import pytest

from leadquote.services.form_data import MAX_FORM_NUMBER, get_number, is_numeric, is_present, to_decimal


@pytest.mark.parametrize(
    "raw, expected",
    [
        (10, Decimal("10")),
        ("12.5", Decimal("12.5")),
        (" 7 ", Decimal("7")),
        (True, Decimal("1")),
        (False, Decimal("0")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        (None, Decimal("0")),
        (float("nan"), Decimal("0")),
        ("Infinity", Decimal("0")),
        (["3"], Decimal("0")),
        ("1e999999", Decimal("0")),
        (1e30, Decimal("0")),
        ("-2e12", Decimal("0")),
        ("1e12", Decimal("1000000000000")),
    ],
)
def test_to_decimal_never_raises(raw, expected):
    assert to_decimal(raw) == expected


def test_accessors_tolerate_missing_and_wrong_types():
    data = {"feet": "40", "tags": ["a"], "blank": None}
    assert get_number(data, "feet") == Decimal("40")
    assert get_number(data, "missing") == Decimal("0")
    assert get_number(None, "feet") == Decimal("0")
    assert is_present(data, "feet")
    assert not is_present(data, "blank")


def test_oversized_numbers_are_not_numeric():
    assert is_numeric(MAX_FORM_NUMBER)
    assert not is_numeric("1e999999")
    assert not is_numeric(True)
    assert to_decimal("1e999999", default=Decimal("5")) == Decimal("5")
