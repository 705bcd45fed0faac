"""Tests for the slot grid, weekly availability map and date picker window."""

from datetime import date, timedelta

import pytest

from marketplace.schemas.provider_schema import AvailabilityEntry, Weekday
from marketplace.tools.availability import (
    AvailabilityMap,
    bookable_dates,
    default_time_slots,
    generate_time_slots,
    is_selectable_date,
    normalize_slot_label,
    slot_hour,
)

from tests.conftest import SLOTS, TODAY


class TestGenerateTimeSlots:
    def test_default_business_day(self):
        slots = generate_time_slots(8, 18)
        assert slots[0] == "8:00"
        assert slots[-1] == "17:00"
        assert len(slots) == 10

    def test_closing_hour_not_bookable(self):
        assert "18:00" not in generate_time_slots(8, 18)

    @pytest.mark.parametrize("open_hour,close_hour", [(0, 1), (0, 23), (6, 9), (12, 20)])
    def test_one_slot_per_hour(self, open_hour, close_hour):
        assert len(generate_time_slots(open_hour, close_hour)) == close_hour - open_hour

    def test_empty_range(self):
        assert generate_time_slots(10, 10) == []

    def test_inverted_range(self):
        assert generate_time_slots(18, 8) == []

    def test_out_of_range_hour_rejected(self):
        with pytest.raises(ValueError, match="close_hour"):
            generate_time_slots(8, 24)

    def test_negative_hour_rejected(self):
        with pytest.raises(ValueError, match="open_hour"):
            generate_time_slots(-1, 8)

    def test_default_grid_uses_configured_hours(self):
        assert default_time_slots() == SLOTS


class TestSlotLabels:
    def test_slot_hour_variants(self):
        assert slot_hour("9:00") == 9
        assert slot_hour("09:00") == 9
        assert slot_hour("09:00:00") == 9

    def test_normalize_strips_leading_zero(self):
        assert normalize_slot_label("09:00:00") == "9:00"

    def test_invalid_label(self):
        with pytest.raises(ValueError, match="Invalid time label"):
            slot_hour("noon")


class TestAvailabilityToggle:
    def test_unknown_day_is_empty(self):
        assert AvailabilityMap(SLOTS).get("Saturday") == []

    def test_toggle_adds(self):
        availability = AvailabilityMap(SLOTS)
        assert availability.toggle("Monday", "9:00") == ["9:00"]
        assert availability.contains(Weekday.MONDAY, "9:00")

    def test_toggle_twice_removes(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("Monday", "9:00")
        assert availability.toggle("Monday", "9:00") == []
        assert availability.days() == []

    def test_toggle_is_an_involution(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("Tuesday", "10:00")
        availability.toggle("Tuesday", "14:00")
        before = availability.copy()
        for label in SLOTS:
            availability.toggle("Tuesday", label)
            availability.toggle("Tuesday", label)
        assert availability == before

    def test_slots_stay_sorted_by_hour(self):
        availability = AvailabilityMap(SLOTS)
        for label in ["15:00", "9:00", "11:00", "10:00"]:
            availability.toggle("Friday", label)
        assert availability.get("Friday") == ["9:00", "10:00", "11:00", "15:00"]

    def test_day_name_case_insensitive(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("wednesday", "9:00")
        assert availability.get(Weekday.WEDNESDAY) == ["9:00"]

    def test_padded_label_matches_grid(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("Monday", "09:00")
        assert availability.get("Monday") == ["9:00"]

    def test_off_grid_slot_rejected(self):
        availability = AvailabilityMap(SLOTS)
        with pytest.raises(ValueError, match="not a bookable slot"):
            availability.toggle("Monday", "19:00")
        assert availability.get("Monday") == []

    def test_unknown_weekday_rejected(self):
        with pytest.raises(ValueError, match="Unknown weekday"):
            AvailabilityMap(SLOTS).toggle("Funday", "9:00")

    def test_other_days_untouched(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("Monday", "9:00")
        availability.toggle("Thursday", "13:00")
        availability.toggle("Monday", "9:00")
        assert availability.to_dict() == {"Thursday": ["13:00"]}


class TestAvailabilityPersistence:
    def test_to_entries(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("Monday", "9:00")
        availability.toggle("Monday", "17:00")
        entries = availability.to_entries("prov-1")
        assert [(e.day_of_week, e.start_time, e.end_time) for e in entries] == [
            (Weekday.MONDAY, "9:00", "10:00"),
            (Weekday.MONDAY, "17:00", "18:00"),
        ]
        assert all(e.provider_id == "prov-1" for e in entries)

    def test_from_entries_roundtrip(self):
        availability = AvailabilityMap(SLOTS)
        availability.toggle("Sunday", "8:00")
        availability.toggle("Monday", "12:00")
        assert AvailabilityMap.from_entries(availability.to_entries("p"), SLOTS) == availability

    def test_from_entries_skips_off_grid_rows(self):
        entries = [
            AvailabilityEntry(provider_id="p", day_of_week="Monday",
                              start_time="07:00:00", end_time="08:00:00"),
            AvailabilityEntry(provider_id="p", day_of_week="Monday",
                              start_time="09:00:00", end_time="10:00:00"),
        ]
        assert AvailabilityMap.from_entries(entries, SLOTS).to_dict() == {"Monday": ["9:00"]}

    def test_from_entries_ignores_duplicates(self):
        entry = AvailabilityEntry(provider_id="p", day_of_week="Friday",
                                  start_time="9:00", end_time="10:00")
        assert AvailabilityMap.from_entries([entry, entry], SLOTS).get("Friday") == ["9:00"]

    def test_copy_is_independent(self):
        availability = AvailabilityMap(SLOTS)
        clone = availability.copy()
        clone.toggle("Monday", "9:00")
        assert availability.get("Monday") == []


class TestBookableDates:
    def test_window_starts_on_monday(self):
        dates = bookable_dates(TODAY, 14)
        assert dates[0] == date(2025, 3, 10)
        assert dates[0].weekday() == 0

    def test_window_length(self):
        dates = bookable_dates(TODAY, 14)
        assert len(dates) == 14
        assert dates[-1] == date(2025, 3, 23)

    def test_default_window_from_config(self):
        assert len(bookable_dates(TODAY)) == 14

    def test_past_dates_not_selectable(self):
        assert not is_selectable_date(TODAY - timedelta(days=1), TODAY)
        assert is_selectable_date(TODAY, TODAY)
        assert is_selectable_date(TODAY + timedelta(days=5), TODAY)
