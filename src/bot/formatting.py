"""Telegram message formatting for chore plans (HTML parse mode)."""

from __future__ import annotations

from datetime import datetime
from html import escape

from src.core.calendar_link import build_calendar_link
from src.core.parser import ScheduledChore, is_sentinel
from src.core.schedule_grid import DAYS_OF_WEEK, TIME_SLOTS, WeeklySchedule

MAX_MESSAGE_LENGTH = 4000

_SLOT_ICONS = {"Morning": "🌅", "Afternoon": "☀️", "Midnight": "🌙"}


def format_weekly_grid(weekly: WeeklySchedule) -> str:
    """Render the grid as one block per day, listing chore icons per slot."""
    lines = ["<b>🗓 Weekly schedule</b>"]
    for day in DAYS_OF_WEEK:
        lines.append(f"\n<b>{day}</b>")
        slots = weekly[day]
        if not any(slots[slot] for slot in TIME_SLOTS):
            lines.append("  —")
            continue
        for slot in TIME_SLOTS:
            chores = slots[slot]
            if chores:
                icons = " ".join(escape(c.icon) for c in chores)
                lines.append(f"  {_SLOT_ICONS[slot]} {slot}: {icons}")
    return "\n".join(lines)


def format_chore_item(
    chore: ScheduledChore, plan_months: int, now: datetime | None = None,
) -> str:
    """One entry of the detailed list; sentinel records show their raw line."""
    if is_sentinel(chore):
        return f"{escape(chore.icon)} <i>{escape(chore.raw)}</i>"

    details = [chore.frequency]
    if chore.days:
        details.append(chore.days)
    details.append(chore.time)

    link = build_calendar_link(chore, plan_months, now=now)
    return (
        f"{escape(chore.icon)} <b>{escape(chore.name)}</b>\n"
        f"{escape(' · '.join(details))}\n"
        f'<a href="{escape(link)}">📅 Add to Google Calendar</a>'
    )


def format_chore_list(
    chores: list[ScheduledChore], plan_months: int, now: datetime | None = None,
) -> str:
    items = [format_chore_item(c, plan_months, now=now) for c in chores]
    return "<b>📋 Your chore plan</b>\n\n" + "\n\n".join(items)


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split on line boundaries so HTML tags are never cut in half.

    A single line longer than `limit` (e.g. a raw model reply) is hard-cut
    into `limit`-sized pieces.
    """
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit and current:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks
