from __future__ import annotations

from datetime import date, datetime

from crud_query.decoders import (
    DateDecoder,
    DateTimeDecoder,
    NumericDecoder,
    build_default_decoders,
)
from crud_query.descriptors import SemanticType
from crud_query.predicates import Equals, Range

# ---------------------------------------------------------------------------
# Numeric
# ---------------------------------------------------------------------------


def test_numeric_exact_value() -> None:
    assert NumericDecoder().decode("age", "42") == [Equals("age", 42)]


def test_numeric_closed_range() -> None:
    assert NumericDecoder().decode("age", "18..30") == [Range("age", 18, 30)]


def test_numeric_open_ranges() -> None:
    decoder = NumericDecoder()
    assert decoder.decode("age", "..30") == [Range("age", upper=30)]
    assert decoder.decode("age", "18..") == [Range("age", lower=18)]


def test_numeric_malformed_bound_is_dropped() -> None:
    decoder = NumericDecoder()
    assert decoder.decode("age", "abc..30") == [Range("age", upper=30)]
    assert decoder.decode("age", "abc..xyz") == []
    assert decoder.decode("age", "..") == []
    assert decoder.decode("age", "abc") == []
    assert decoder.decode("age", "") == []


def test_numeric_comparison_prefixes() -> None:
    decoder = NumericDecoder()
    assert decoder.decode("age", ">=18") == [Range("age", lower=18)]
    assert decoder.decode("age", ">18") == [
        Range("age", lower=18, lower_inclusive=False)
    ]
    assert decoder.decode("age", "<=30") == [Range("age", upper=30)]
    assert decoder.decode("age", "<30") == [
        Range("age", upper=30, upper_inclusive=False)
    ]
    assert decoder.decode("age", ">x") == []


def test_custom_range_separator() -> None:
    decoder = NumericDecoder(range_separator="~")
    assert decoder.decode("age", "1~5") == [Range("age", 1, 5)]


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def test_single_date_covers_the_day() -> None:
    day = date(2024, 2, 15)
    assert DateDecoder().decode("on", "2024-02-15") == [Range("on", day, day)]


def test_date_range() -> None:
    assert DateDecoder().decode("on", "2024-01-01..2024-01-31") == [
        Range("on", date(2024, 1, 1), date(2024, 1, 31))
    ]


def test_invalid_date_yields_nothing() -> None:
    assert DateDecoder().decode("on", "yesterday") == []


def test_single_datetime_is_exact() -> None:
    moment = datetime(2024, 1, 10, 12, 0)
    assert DateTimeDecoder().decode("at", "2024-01-10T12:00:00") == [
        Equals("at", moment)
    ]


def test_default_decoder_table() -> None:
    decoders = build_default_decoders()
    assert set(decoders) == {
        SemanticType.INTEGER,
        SemanticType.FLOAT,
        SemanticType.DATE,
        SemanticType.DATETIME,
    }
    assert isinstance(decoders[SemanticType.DATE], DateDecoder)
