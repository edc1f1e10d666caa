"""Tests for src.core.schedule_grid — slot classification, day normalization, grid."""

import pytest

from src.core.parser import parse_line, parse_schedule
from src.core.schedule_grid import (
    DAYS_OF_WEEK,
    TIME_SLOTS,
    build_weekly_schedule,
    classify_time_slot,
    normalize_days,
    parse_clock_hour,
)


class TestParseClockHour:
    def test_am(self):
        assert parse_clock_hour("9:00 AM") == 9

    def test_pm(self):
        assert parse_clock_hour("2:30 pm") == 14

    def test_compact_pm(self):
        assert parse_clock_hour("7pm") == 19

    def test_noon_stays_twelve(self):
        assert parse_clock_hour("12:00 PM") == 12

    def test_midnight_am(self):
        assert parse_clock_hour("12am") == 0

    def test_24_hour(self):
        assert parse_clock_hour("18:00") == 18

    def test_pm_on_24_hour_value_not_shifted(self):
        assert parse_clock_hour("15:00 pm") == 15

    def test_no_digits(self):
        assert parse_clock_hour("whenever") is None

    def test_long_digit_run_does_not_raise(self):
        assert parse_clock_hour("1" * 5000) == 11


class TestClassifyTimeSlot:
    @pytest.mark.parametrize("text, slot", [
        ("Morning", "Morning"),
        ("early morning", "Morning"),
        ("Afternoon", "Afternoon"),
        ("Evening", "Midnight"),
        ("Night", "Midnight"),
        ("late at NIGHT", "Midnight"),
        ("9:00 AM", "Morning"),
        ("2:00 PM", "Afternoon"),
        ("8:00 PM", "Midnight"),
        ("anytime", "Afternoon"),
        ("", "Afternoon"),
    ])
    def test_examples(self, text, slot):
        assert classify_time_slot(text) == slot

    def test_keyword_beats_clock(self):
        assert classify_time_slot("Morning, around 8pm") == "Morning"

    def test_huge_number_still_classified(self):
        assert classify_time_slot("1" * 5000) == "Morning"

    @pytest.mark.parametrize("text, slot", [
        ("4:59 am", "Midnight"),
        ("5am", "Morning"),
        ("11:59 am", "Morning"),
        ("12pm", "Afternoon"),
        ("5:59 pm", "Afternoon"),
        ("6pm", "Midnight"),
        ("12am", "Midnight"),
    ])
    def test_boundaries(self, text, slot):
        assert classify_time_slot(text) == slot


class TestNormalizeDays:
    def test_daily_returns_all_days(self):
        assert normalize_days(None, "Daily") == list(DAYS_OF_WEEK)

    def test_daily_ignores_days_string(self):
        assert normalize_days("Monday", "daily") == list(DAYS_OF_WEEK)

    def test_every_day(self):
        assert normalize_days(None, "Every day") == list(DAYS_OF_WEEK)

    def test_specific_days(self):
        assert normalize_days("Monday, Friday", "Weekly") == ["Monday", "Friday"]

    def test_case_insensitive(self):
        assert normalize_days("monday, FRIDAY", "Weekly") == ["Monday", "Friday"]

    def test_missing_days_non_daily_is_empty(self):
        assert normalize_days(None, "Weekly") == []
        assert normalize_days("", "Weekly") == []

    def test_unknown_tokens_dropped(self):
        assert normalize_days("Mon, Funday, Friday", "Weekly") == ["Friday"]

    def test_no_recognised_days(self):
        assert normalize_days("Weekends", "Weekly") == []


class TestBuildWeeklySchedule:
    def test_shape(self):
        week = build_weekly_schedule([])
        assert list(week) == list(DAYS_OF_WEEK)
        for day in DAYS_OF_WEEK:
            assert list(week[day]) == list(TIME_SLOTS)
            assert all(week[day][slot] == [] for slot in TIME_SLOTS)

    def test_end_to_end_example(self):
        chores = parse_schedule(
            "- Dishwashing (🧼): Daily, Evening\n- Laundry (🧺): Weekly, Saturday, Morning"
        )
        week = build_weekly_schedule(chores)

        for day in DAYS_OF_WEEK:
            assert [c.icon for c in week[day]["Midnight"]] == ["🧼"]
            assert week[day]["Afternoon"] == []
            if day == "Saturday":
                assert [c.icon for c in week[day]["Morning"]] == ["🧺"]
            else:
                assert week[day]["Morning"] == []

    def test_sentinels_excluded(self):
        chores = parse_schedule("intro text\n- Dusting (🪶): Weekly\n- Dishwashing (🧼): Daily, Evening")
        week = build_weekly_schedule(chores)
        placed = [c for day in week.values() for bucket in day.values() for c in bucket]
        assert {c.name for c in placed} == {"Dishwashing"}
        assert len(placed) == 7

    def test_order_preserved_within_bucket(self):
        chores = parse_schedule(
            "- Cooking (🍳): Daily, Evening\n"
            "- Feed Pets (🐾): Weekly, Monday, 7pm\n"
            "- Dishwashing (🧼): Daily, Night\n"
        )
        week = build_weekly_schedule(chores)
        assert [c.name for c in week["Monday"]["Midnight"]] == ["Cooking", "Feed Pets", "Dishwashing"]
        assert [c.name for c in week["Tuesday"]["Midnight"]] == ["Cooking", "Dishwashing"]

    def test_chore_without_days_is_not_placed(self):
        week = build_weekly_schedule([parse_line("- Ironing (👔): Weekly, Morning")])
        assert all(not bucket for day in week.values() for bucket in day.values())

    def test_idempotent(self, sample_response):
        chores = parse_schedule(sample_response)
        assert build_weekly_schedule(chores) == build_weekly_schedule(chores)

    def test_does_not_mutate_input(self, sample_response):
        chores = parse_schedule(sample_response)
        before = [c.model_dump() for c in chores]
        build_weekly_schedule(chores)
        assert [c.model_dump() for c in chores] == before
