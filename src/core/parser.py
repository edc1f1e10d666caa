"""
ChorePlan Assistant — Schedule Parser.

Turns the LLM's free-text plan into ScheduledChore records. The LLM is asked
for one chore per line in the form

    - Laundry (🧺): Weekly, Saturday, Morning

but nothing guarantees it complies, so the parser is total: every non-blank
line becomes exactly one record, and lines that don't fit become sentinel
records carrying the raw text for fallback display.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

UNPARSED_CHORE = "Unparsed Chore"
UNFORMATTED_LINE = "Unformatted Line"

_UNPARSED_ICON = "❓"
_UNFORMATTED_ICON = "⚠️"
_NOT_AVAILABLE = "N/A"

# 1. chore name, 2. icon, 3. the rest (frequency, days, time)
_LINE_RE = re.compile(r"^- (.*?)\s*\((.*?)\):\s*(.*)$")


class ScheduledChore(BaseModel):
    """One chore of the plan, as the LLM described it.

    Example line and result:
        "- Laundry (🧺): Weekly, Saturday, Morning"
        → name="Laundry", icon="🧺", frequency="Weekly",
          days="Saturday", time="Morning"
    """
    model_config = ConfigDict(frozen=True)

    name: str
    icon: str
    frequency: str
    days: str | None = None   # only set when the line had a middle segment
    time: str
    raw: str                  # trimmed source line


def is_sentinel(chore: ScheduledChore) -> bool:
    """True for records that failed to parse."""
    return chore.name in (UNPARSED_CHORE, UNFORMATTED_LINE)


def _sentinel(name: str, icon: str, raw: str) -> ScheduledChore:
    return ScheduledChore(
        name=name, icon=icon, frequency=_NOT_AVAILABLE, time=_NOT_AVAILABLE, raw=raw,
    )


def parse_line(line: str) -> ScheduledChore:
    """Parse a single non-blank line into a record (never raises)."""
    line = line.strip()
    match = _LINE_RE.match(line)
    if match is None:
        return _sentinel(UNFORMATTED_LINE, _UNFORMATTED_ICON, line)

    name, icon, rest = match.groups()
    details = [d.strip() for d in rest.split(",")]
    if len(details) < 2:
        return _sentinel(UNPARSED_CHORE, _UNPARSED_ICON, line)

    days = ", ".join(details[1:-1]) if len(details) > 2 else None
    return ScheduledChore(
        name=name,
        icon=icon,
        frequency=details[0],
        days=days,
        time=details[-1],
        raw=line,
    )


def parse_schedule(raw_text: str) -> list[ScheduledChore]:
    """Parse a full LLM response, one record per non-blank line, in order."""
    chores = [parse_line(line) for line in raw_text.splitlines() if line.strip()]
    failed = sum(1 for c in chores if is_sentinel(c))
    if failed:
        logger.warning("%d of %d line(s) did not match the schedule format", failed, len(chores))
    logger.debug("Parsed %d schedule line(s)", len(chores))
    return chores


def count_scheduled(chores: list[ScheduledChore]) -> int:
    """Number of records that parsed successfully."""
    return sum(1 for c in chores if not is_sentinel(c))
