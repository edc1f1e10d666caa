"""Tests for src.core.parser — line-format schedule parsing."""

import pytest
from pydantic import ValidationError

from src.core.parser import (
    UNFORMATTED_LINE,
    UNPARSED_CHORE,
    ScheduledChore,
    count_scheduled,
    is_sentinel,
    parse_line,
    parse_schedule,
)


# ---------------------------------------------------------------------------
# Unit tests for parse_line
# ---------------------------------------------------------------------------


class TestParseLine:
    def test_full_line_with_two_days(self):
        chore = parse_line("- Vacuuming (💨): Twice a week, Wednesday, Friday, Afternoon")
        assert chore.name == "Vacuuming"
        assert chore.icon == "💨"
        assert chore.frequency == "Twice a week"
        assert chore.days == "Wednesday, Friday"
        assert chore.time == "Afternoon"
        assert chore.raw == "- Vacuuming (💨): Twice a week, Wednesday, Friday, Afternoon"

    def test_single_day(self):
        chore = parse_line("- Laundry (🧺): Weekly, Saturday, Morning")
        assert chore.days == "Saturday"
        assert chore.time == "Morning"

    def test_no_days_segment(self):
        chore = parse_line("- Dishwashing (🧼): Daily, Evening")
        assert chore.frequency == "Daily"
        assert chore.days is None
        assert chore.time == "Evening"

    def test_clock_time(self):
        chore = parse_line("- Grocery Shopping (🛒): Weekly, Sunday, 10:00 AM")
        assert chore.name == "Grocery Shopping"
        assert chore.time == "10:00 AM"

    def test_raw_is_trimmed(self):
        chore = parse_line("   - Dishwashing (🧼): Daily, Evening   ")
        assert chore.raw == "- Dishwashing (🧼): Daily, Evening"

    def test_days_segments_are_rejoined_trimmed(self):
        chore = parse_line("- Mop (🧽): Weekly,Monday ,  Thursday,9am")
        assert chore.days == "Monday, Thursday"
        assert chore.time == "9am"

    def test_space_before_icon_not_part_of_name(self):
        chore = parse_line("- Water Plants   (🪴): Daily, Morning")
        assert chore.name == "Water Plants"

    def test_single_segment_is_unparsed(self):
        chore = parse_line("- Dusting (🪶): Weekly")
        assert chore.name == UNPARSED_CHORE
        assert chore.frequency == "N/A"
        assert chore.time == "N/A"
        assert chore.raw == "- Dusting (🪶): Weekly"

    def test_empty_rest_is_unparsed(self):
        assert parse_line("- Dusting (🪶):").name == UNPARSED_CHORE

    def test_missing_dash_is_unformatted(self):
        chore = parse_line("Dishwashing (🧼): Daily, Evening")
        assert chore.name == UNFORMATTED_LINE
        assert chore.frequency == "N/A"
        assert chore.time == "N/A"

    def test_prose_is_unformatted(self):
        chore = parse_line("Here is your schedule:")
        assert chore.name == UNFORMATTED_LINE
        assert chore.raw == "Here is your schedule:"

    def test_sentinel_icons_differ(self):
        unparsed = parse_line("- Dusting (🪶): Weekly")
        unformatted = parse_line("hello")
        assert unparsed.icon != unformatted.icon


# ---------------------------------------------------------------------------
# Tests for parse_schedule
# ---------------------------------------------------------------------------


class TestParseSchedule:
    def test_parses_every_line_in_order(self, sample_response):
        chores = parse_schedule(sample_response)
        assert [c.name for c in chores] == [
            "Dishwashing", "Laundry", "Vacuuming", "Grocery Shopping",
        ]

    def test_blank_lines_skipped(self):
        text = "\n- Dishwashing (🧼): Daily, Evening\n\n   \n- Laundry (🧺): Weekly, Saturday, Morning\n"
        chores = parse_schedule(text)
        assert len(chores) == 2

    def test_one_record_per_non_blank_line(self):
        text = "Sure! Here you go:\n- Dishwashing (🧼): Daily, Evening\n- Dusting (🪶): Weekly\nEnjoy!"
        chores = parse_schedule(text)
        assert [c.name for c in chores] == [
            UNFORMATTED_LINE, "Dishwashing", UNPARSED_CHORE, UNFORMATTED_LINE,
        ]

    def test_windows_line_endings(self):
        chores = parse_schedule("- Dishwashing (🧼): Daily, Evening\r\n- Laundry (🧺): Weekly, Saturday, Morning\r\n")
        assert [c.time for c in chores] == ["Evening", "Morning"]

    def test_empty_text(self):
        assert parse_schedule("") == []
        assert parse_schedule("   \n\n") == []

    def test_end_to_end_example(self):
        chores = parse_schedule(
            "- Dishwashing (🧼): Daily, Evening\n- Laundry (🧺): Weekly, Saturday, Morning"
        )
        assert len(chores) == 2
        assert chores[0].days is None
        assert chores[1].days == "Saturday"


class TestSentinels:
    def test_is_sentinel(self):
        assert is_sentinel(parse_line("garbage")) is True
        assert is_sentinel(parse_line("- Dusting (🪶): Weekly")) is True
        assert is_sentinel(parse_line("- Dishwashing (🧼): Daily, Evening")) is False

    def test_count_scheduled_ignores_sentinels(self):
        chores = parse_schedule("intro\n- Dishwashing (🧼): Daily, Evening\n- Dusting (🪶): Weekly")
        assert count_scheduled(chores) == 1


class TestScheduledChoreModel:
    def test_records_are_immutable(self):
        chore = parse_line("- Dishwashing (🧼): Daily, Evening")
        with pytest.raises(ValidationError):
            chore.name = "Other"

    def test_days_defaults_to_none(self):
        chore = ScheduledChore(name="A", icon="x", frequency="Daily", time="Morning", raw="r")
        assert chore.days is None
