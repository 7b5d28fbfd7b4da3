"""
tests/test_periods.py

Period parsing and window membership.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from site_analytics.errors import InvalidQueryParameterError
from site_analytics.normalizer import normalize
from site_analytics.periods import (
    ALL_TIME,
    PeriodKind,
    PeriodSpec,
    date_in_period,
    filter_by_period,
    matches_period,
    normalize_month_key,
    parse_period_spec,
)

NOW = datetime(2025, 11, 15, 23, 30)


def _record(timestamp: str):
    return normalize([["Timestamp"], [timestamp]]).records[0]


class TestParsePeriodSpec:
    @pytest.mark.parametrize("name", ["today", "this_week", "this_month", " THIS_MONTH "])
    def test_named_periods(self, name: str) -> None:
        assert parse_period_spec(name).kind is PeriodKind(name.strip().lower())

    def test_last_n_days(self) -> None:
        spec = parse_period_spec("last_30_days")
        assert spec.kind is PeriodKind.LAST_N_DAYS
        assert spec.days == 30
        assert spec.label == "last_30_days"

    @pytest.mark.parametrize("name", [None, "", "all", "fortnight", "last_x_days"])
    def test_missing_or_unrecognized_selects_all(self, name: str | None) -> None:
        assert parse_period_spec(name) == ALL_TIME

    def test_month_is_zero_padded(self) -> None:
        spec = parse_period_spec(month="2025-3")
        assert spec.kind is PeriodKind.MONTHS
        assert spec.months == ("2025-03",)

    def test_several_months_are_deduplicated(self) -> None:
        spec = parse_period_spec(months="2025-10,2025-11, 2025-10")
        assert spec.months == ("2025-10", "2025-11")

    def test_month_takes_precedence_over_named_period(self) -> None:
        assert parse_period_spec("today", month="2025-11").kind is PeriodKind.MONTHS

    def test_range(self) -> None:
        spec = parse_period_spec(date_from="2025-11-01", date_to="2025-11-10")
        assert spec.kind is PeriodKind.RANGE
        assert spec.start == date(2025, 11, 1)
        assert spec.end == date(2025, 11, 10)
        assert spec.label == "2025-11-01..2025-11-10"

    @pytest.mark.parametrize(
        "kwargs, parameter",
        [
            ({"month": "2025-13"}, "month"),
            ({"month": "Nov 2025"}, "month"),
            ({"months": "2025-11,bad"}, "months"),
            ({"date_from": "2025-11-01"}, "to"),
            ({"date_to": "2025-11-01"}, "from"),
            ({"date_from": "yesterday", "date_to": "2025-11-01"}, "from"),
            ({"date_from": "2025-11-10", "date_to": "2025-11-01"}, "from"),
        ],
    )
    def test_malformed_arguments_raise(self, kwargs: dict, parameter: str) -> None:
        with pytest.raises(InvalidQueryParameterError) as excinfo:
            parse_period_spec(**kwargs)
        assert excinfo.value.parameter == parameter


class TestNormalizeMonthKey:
    def test_valid(self) -> None:
        assert normalize_month_key("2025-11") == "2025-11"

    def test_invalid(self) -> None:
        with pytest.raises(InvalidQueryParameterError):
            normalize_month_key("2025/11")


class TestDateInPeriod:
    def test_today(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.TODAY)
        assert date_in_period(date(2025, 11, 15), spec, NOW)
        assert not date_in_period(date(2025, 11, 14), spec, NOW)

    def test_this_week_boundary_is_inclusive(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.THIS_WEEK)
        assert date_in_period(date(2025, 11, 8), spec, NOW)
        assert not date_in_period(date(2025, 11, 7), spec, NOW)
        assert date_in_period(date(2025, 11, 15), spec, NOW)
        assert not date_in_period(date(2025, 11, 16), spec, NOW)

    def test_this_month(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.THIS_MONTH)
        assert date_in_period(date(2025, 11, 1), spec, NOW)
        assert not date_in_period(date(2024, 11, 1), spec, NOW)
        assert not date_in_period(date(2025, 10, 31), spec, NOW)

    def test_last_n_days(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.LAST_N_DAYS, days=3)
        assert date_in_period(date(2025, 11, 12), spec, NOW)
        assert not date_in_period(date(2025, 11, 11), spec, NOW)

    def test_last_zero_days_is_today_only(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.LAST_N_DAYS, days=0)
        assert date_in_period(date(2025, 11, 15), spec, NOW)
        assert not date_in_period(date(2025, 11, 14), spec, NOW)

    def test_months(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.MONTHS, months=("2025-10",))
        assert date_in_period(date(2025, 10, 31), spec, NOW)
        assert not date_in_period(date(2025, 11, 1), spec, NOW)

    def test_range_is_inclusive(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.RANGE, start=date(2025, 11, 1), end=date(2025, 11, 10))
        assert date_in_period(date(2025, 11, 1), spec, NOW)
        assert date_in_period(date(2025, 11, 10), spec, NOW)
        assert not date_in_period(date(2025, 11, 11), spec, NOW)

    def test_all_accepts_any_date(self) -> None:
        assert date_in_period(date(1999, 1, 1), ALL_TIME, NOW)

    def test_missing_date_never_matches(self) -> None:
        for kind in PeriodKind:
            spec = PeriodSpec(kind=kind, days=1, months=("2025-11",), start=date(2025, 1, 1), end=date(2025, 12, 31))
            assert not date_in_period(None, spec, NOW)

    def test_accepts_plain_date_as_now(self) -> None:
        assert date_in_period(date(2025, 11, 15), PeriodSpec(kind=PeriodKind.TODAY), date(2025, 11, 15))


class TestMatchesPeriod:
    def test_exactly_seven_days_before_is_in_this_week(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.THIS_WEEK)
        assert matches_period(_record("11/08/2025 09:00:00"), spec, now=NOW)

    def test_eight_days_before_is_not_in_this_week(self) -> None:
        spec = PeriodSpec(kind=PeriodKind.THIS_WEEK)
        assert not matches_period(_record("11/07/2025 23:59:59"), spec, now=NOW)

    def test_unparseable_timestamp_matches_nothing(self) -> None:
        assert not matches_period(_record("soon"), ALL_TIME, now=NOW)

    def test_custom_timestamp_column(self) -> None:
        record = normalize([["Visited on"], ["11/15/2025"]]).records[0]
        spec = PeriodSpec(kind=PeriodKind.TODAY)
        assert matches_period(record, spec, now=NOW, timestamp_column="visited on")
        assert not matches_period(record, spec, now=NOW)

    def test_filter_by_period_keeps_order(self, sample_grid) -> None:
        records = normalize(sample_grid).records
        matched = filter_by_period(records, PeriodSpec(kind=PeriodKind.THIS_WEEK), now=NOW)
        assert [record.row_number for record in matched] == [2, 3, 4]
