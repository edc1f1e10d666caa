"""Weekly grid builder — pure business logic.

Folds parsed chores into a 7-day × 3-slot grid:

    {"Sunday": {"Morning": [...], "Afternoon": [...], "Midnight": [...]}, ...}

"Midnight" is the evening/night slot. Chores whose days can't be resolved
land in no bucket; they still show up in the detailed list.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import re

from src.core.parser import ScheduledChore, is_sentinel

DAYS_OF_WEEK: tuple[str, ...] = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)
TIME_SLOTS: tuple[str, ...] = ("Morning", "Afternoon", "Midnight")

DaySchedule = dict[str, list[ScheduledChore]]
WeeklySchedule = dict[str, DaySchedule]

_CLOCK_RE = re.compile(r"(\d{1,2})(?::(\d{1,2}))?\s*(am|pm)?")


def parse_clock_hour(text: str) -> int | None:
    """Extract the first clock time in `text` as a 24-hour hour value.

    "9:00 AM" → 9, "2pm" → 14, "12am" → 0, "12 PM" → 12. Returns None when
    no digits are found. The hour is not range-checked.
    """
    match = _CLOCK_RE.search(text.lower())
    if match is None:
        return None
    hour = int(match.group(1))
    ampm = match.group(3)
    if ampm == "pm" and hour < 12:
        hour += 12
    if ampm == "am" and hour == 12:
        hour = 0
    return hour


def is_daily(frequency: str) -> bool:
    freq = frequency.lower()
    return "daily" in freq or "every day" in freq


def classify_time_slot(time_text: str) -> str:
    """Map a free-text time of day to Morning, Afternoon or Midnight.

    Keywords win over clock times; anything unrecognised is Afternoon.
    """
    lower = time_text.lower()
    if "morning" in lower:
        return "Morning"
    if "afternoon" in lower:
        return "Afternoon"
    if "evening" in lower or "night" in lower:
        return "Midnight"

    hour = parse_clock_hour(lower)
    if hour is None:
        return "Afternoon"
    if 5 <= hour < 12:
        return "Morning"
    if 12 <= hour < 18:
        return "Afternoon"
    # 6 PM onwards and before 5 AM
    return "Midnight"


def normalize_days(days: str | None, frequency: str) -> list[str]:
    """Return the weekdays a chore occurs on, in Sunday-first order.

    Daily chores get all seven days regardless of `days`. Otherwise only full
    weekday names (any case) are recognised; other tokens are dropped, and a
    missing `days` yields no days at all.
    """
    if is_daily(frequency):
        return list(DAYS_OF_WEEK)
    if not days:
        return []

    tokens = {token.strip().lower() for token in days.split(",")}
    return [day for day in DAYS_OF_WEEK if day.lower() in tokens]


def empty_week() -> WeeklySchedule:
    return {day: {slot: [] for slot in TIME_SLOTS} for day in DAYS_OF_WEEK}


def build_weekly_schedule(chores: list[ScheduledChore]) -> WeeklySchedule:
    """Place every successfully parsed chore into its day/slot buckets."""
    week = empty_week()
    for chore in chores:
        if is_sentinel(chore):
            continue
        slot = classify_time_slot(chore.time)
        for day in normalize_days(chore.days, chore.frequency):
            week[day][slot].append(chore)
    return week
