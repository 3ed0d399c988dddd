"""Tests for the priority ladder and calendar helpers."""

from datetime import date, timezone

import pytest

from knowbase.dailytodos.clock import SystemClock, date_of, days_between
from knowbase.dailytodos.priority import PRIORITIES, is_valid, next_priority, rank


class TestNextPriority:
    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            ("low", "medium"),
            ("medium", "high"),
            ("high", "critical"),
            ("critical", "critical"),
        ],
    )
    def test_ladder(self, current, expected):
        assert next_priority(current) == expected

    def test_unknown_value_falls_back_to_default(self):
        assert next_priority("urgent") == "medium"

    def test_ten_steps_saturate(self):
        p = "low"
        for _ in range(10):
            p = next_priority(p)
        assert p == "critical"


class TestIsValid:
    def test_all_rungs_valid(self):
        assert all(is_valid(p) for p in PRIORITIES)

    def test_rejects_others(self):
        assert not is_valid("urgent")
        assert not is_valid("")
        assert not is_valid(None)
        assert not is_valid("HIGH")

    def test_rank_orders_ladder(self):
        assert rank("low") < rank("medium") < rank("high") < rank("critical")
        assert rank("bogus") < rank("low")


class TestClock:
    def test_days_between_is_absolute(self):
        assert days_between(date(2026, 1, 1), date(2026, 1, 11)) == 10
        assert days_between(date(2026, 1, 11), date(2026, 1, 1)) == 10
        assert days_between(date(2026, 3, 5), date(2026, 3, 5)) == 0

    def test_days_between_crosses_month_and_leap_day(self):
        assert days_between(date(2028, 2, 28), date(2028, 3, 1)) == 2

    def test_date_of_ignores_time_of_day(self):
        assert date_of("2026-01-29T23:59:59.999+00:00") == date(2026, 1, 29)
        assert date_of("2026-01-29T00:00:00.000Z") == date(2026, 1, 29)

    def test_system_clock_today_matches_now(self):
        clock = SystemClock()
        assert clock.now().tzinfo is timezone.utc
        assert clock.today() <= clock.now().date()

    def test_system_clock_from_name(self):
        assert SystemClock.from_name("utc").tz is timezone.utc
        assert SystemClock.from_name("UTC").now().utcoffset().total_seconds() == 0
