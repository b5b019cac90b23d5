"""Tests for day and week key derivation."""

import pytest
from datetime import date, datetime, timedelta, timezone

from jobhunter.engine.calendar_keys import day_key, week_key, week_start


class TestDayKey:
    """day_key() formats the local calendar date."""

    def test_formats_iso_date(self):
        assert day_key(datetime(2024, 1, 1, 23, 59)) == "2024-01-01"

    def test_accepts_plain_date(self):
        assert day_key(date(2024, 2, 29)) == "2024-02-29"

    def test_same_day_is_idempotent(self):
        assert day_key(datetime(2024, 1, 1, 0, 0)) == day_key(datetime(2024, 1, 1, 23, 59, 59))

    def test_defaults_to_now(self):
        assert day_key() == datetime.now().date().isoformat()

    def test_aware_datetime_uses_local_calendar(self):
        aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert day_key(aware) == aware.astimezone().date().isoformat()


class TestWeekKey:
    """week_key() returns the most recent Sunday, inclusive of today."""

    def test_sunday_is_its_own_week_key(self):
        assert week_key(date(2024, 1, 7)) == "2024-01-07"

    def test_saturday_maps_to_previous_sunday(self):
        assert week_key(date(2024, 1, 6)) == "2023-12-31"

    def test_monday_maps_to_day_before(self):
        assert week_key(date(2024, 1, 1)) == "2023-12-31"

    @pytest.mark.parametrize("offset", range(7))
    def test_every_day_of_a_week_shares_a_key(self, offset):
        sunday = date(2024, 3, 10)
        assert week_key(sunday + timedelta(days=offset)) == "2024-03-10"

    def test_week_start_is_always_sunday(self):
        for offset in range(14):
            assert week_start(date(2024, 5, 1) + timedelta(days=offset)).weekday() == 6
