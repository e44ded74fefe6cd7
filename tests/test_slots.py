from datetime import date, datetime, timezone

import pytest

from medibook.domain.appointments.availability import slot_within_windows
from medibook.domain.appointments.slots import (
    appointment_start,
    parse_appointment_date,
    parse_slot,
    weekday_name,
)

WINDOWS = [{"start": "09:00", "end": "09:30"}, {"start": "14:00", "end": "17:00"}]


class TestParseSlot:
    def test_splits_start_and_end(self):
        assert parse_slot("10:00-10:30") == ("10:00", "10:30")

    def test_strips_whitespace(self):
        assert parse_slot(" 09:15-09:45 ") == ("09:15", "09:45")

    @pytest.mark.parametrize("slot", ["9:00-9:30", "10:00", "10:00-", "25:00-25:30", "10:60-11:00", "abc"])
    def test_rejects_malformed(self, slot):
        with pytest.raises(ValueError):
            parse_slot(slot)

    def test_rejects_end_before_start(self):
        with pytest.raises(ValueError, match="must end after it starts"):
            parse_slot("11:00-10:30")

    def test_rejects_empty_interval(self):
        with pytest.raises(ValueError):
            parse_slot("10:00-10:00")

    def test_rejects_non_string(self):
        with pytest.raises(ValueError):
            parse_slot(1000)


class TestParseAppointmentDate:
    def test_plain_date(self):
        assert parse_appointment_date("2030-01-07") == date(2030, 1, 7)

    def test_zulu_datetime(self):
        assert parse_appointment_date("2030-01-07T10:00:00Z") == date(2030, 1, 7)

    def test_offset_is_converted_to_utc(self):
        # 01:00 at +05:30 is still the previous day in UTC
        assert parse_appointment_date("2030-01-08T01:00:00+05:30") == date(2030, 1, 7)

    def test_naive_datetime_is_utc(self):
        assert parse_appointment_date(datetime(2030, 1, 7, 23, 59)) == date(2030, 1, 7)

    def test_date_instance_passes_through(self):
        assert parse_appointment_date(date(2030, 1, 7)) == date(2030, 1, 7)

    @pytest.mark.parametrize("value", ["", "07/01/2030", "not-a-date"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            parse_appointment_date(value)


def test_weekday_name():
    assert weekday_name(date(2030, 1, 7)) == "monday"
    assert weekday_name(date(2030, 1, 12)) == "saturday"


def test_appointment_start_is_utc_instant():
    assert appointment_start(date(2030, 1, 7), "10:15-10:45") == datetime(
        2030, 1, 7, 10, 15, tzinfo=timezone.utc
    )


class TestSlotWithinWindows:
    def test_window_start_is_inclusive(self):
        assert slot_within_windows("09:00", WINDOWS)

    def test_window_end_is_exclusive(self):
        assert not slot_within_windows("09:30", WINDOWS)

    def test_any_window_matches(self):
        assert slot_within_windows("16:59", WINDOWS)

    def test_outside_all_windows(self):
        assert not slot_within_windows("12:00", WINDOWS)

    def test_no_windows(self):
        assert not slot_within_windows("10:00", [])
        assert not slot_within_windows("10:00", None)

    def test_incomplete_windows_are_ignored(self):
        assert not slot_within_windows("10:00", [{"start": "09:00"}])
