from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from crud_query.utils import (
    get_param,
    parse_bool,
    parse_date,
    parse_datetime,
    parse_int,
    parse_number,
    split_list,
)


def test_get_param_uses_last_list_value() -> None:
    assert get_param({"a": ["1", "2"]}, "a") == "2"
    assert get_param({"a": []}, "a") is None
    assert get_param({"a": 5}, "a") == "5"
    assert get_param({}, "a") is None


def test_split_list_drops_empty_items() -> None:
    assert split_list(" a, ,b ,", ",") == ["a", "b"]
    assert split_list(None) == []
    assert split_list("") == []


@pytest.mark.parametrize("raw", ["1", "true", "TRUE", "yes", "on", " On "])
def test_parse_bool_truthy(raw: str) -> None:
    assert parse_bool(raw) is True


@pytest.mark.parametrize("raw", ["0", "false", "no", "off", "", "maybe"])
def test_parse_bool_falsy(raw: str) -> None:
    assert parse_bool(raw) is False


def test_parse_number() -> None:
    assert parse_number("42") == 42
    assert isinstance(parse_number("42"), int)
    assert parse_number("-3.5") == -3.5
    assert parse_number("1_000") is None
    assert parse_number("nan") is None
    assert parse_number("inf") is None
    assert parse_number("abc") is None
    assert parse_number("  ") is None


def test_parse_int_accepts_integral_floats_only() -> None:
    assert parse_int("10") == 10
    assert parse_int("10.0") == 10
    assert parse_int("10.5") is None
    assert parse_int(None) is None


def test_parse_date_accepts_timestamps() -> None:
    assert parse_date("2024-02-15") == date(2024, 2, 15)
    assert parse_date("2024-02-15T08:30:00") == date(2024, 2, 15)
    assert parse_date("15/02/2024") is None


def test_parse_datetime_understands_zulu() -> None:
    assert parse_datetime("2024-01-10T12:00:00Z") == datetime(
        2024, 1, 10, 12, 0, tzinfo=timezone.utc
    )
    assert parse_datetime("not-a-date") is None


def test_integers_beyond_64_bits_are_malformed() -> None:
    assert parse_number(str(2**63 - 1)) == 2**63 - 1
    assert parse_number(str(-(2**63))) == -(2**63)
    assert parse_number(str(2**63)) is None
    assert parse_number("99999999999999999999") is None
    assert parse_number("-99999999999999999999") is None
    assert parse_int("99999999999999999999") is None
    assert parse_int("1e30") is None
