"""Google Calendar link builder — pure business logic.

Projects one ScheduledChore onto a Google Calendar "create event" link:
a one-hour first occurrence plus, for daily and weekly chores, a simple
RRULE bounded by the plan duration.

This is a best-effort heuristic, not a recurrence engine: "Twice a week"
picks the nearest listed day and gets no RRULE, and monthly or bi-weekly
patterns are not modelled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from urllib.parse import quote
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from src.core.parser import ScheduledChore
from src.core.schedule_grid import DAYS_OF_WEEK, parse_clock_hour

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_URL = "https://www.google.com/calendar/render"

_DEFAULT_HOUR = 9
_EVENT_DURATION = timedelta(hours=1)


@dataclass
class CalendarEvent:
    """The calendar event a link will pre-fill."""

    title: str
    description: str
    start: datetime            # timezone-aware
    end: datetime              # timezone-aware
    rrule: str | None = None   # e.g. "FREQ=WEEKLY;BYDAY=MO,FR;UNTIL=20261118"


def _event_hour(time_text: str) -> int:
    hour = parse_clock_hour(time_text)
    if hour is None or not 0 <= hour <= 23:
        return _DEFAULT_HOUR
    return hour


def _target_weekdays(days: str | None) -> list[int]:
    """Indices into DAYS_OF_WEEK (Sunday = 0) named by `days`.

    Accepts full names or three-letter abbreviations, any case.
    """
    if not days:
        return []
    tokens = {token.strip().lower() for token in days.split(",")}
    return [
        i for i, name in enumerate(DAYS_OF_WEEK)
        if name.lower() in tokens or name[:3].lower() in tokens
    ]


def format_utc(dt: datetime) -> str:
    """Format an aware datetime as a compact UTC stamp, e.g. 20261018T090000Z."""
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _build_description(chore: ScheduledChore) -> str:
    lines = [f"Chore: {chore.name}", f"Frequency: {chore.frequency}"]
    if chore.days:
        lines.append(f"Day(s): {chore.days}")
    lines.append(f"Time: {chore.time}")
    return "\n".join(lines)


def _build_rrule(frequency: str, weekdays: list[int], plan_months: int, today: date) -> str | None:
    freq = frequency.lower()
    if "daily" in freq:
        rrule = "FREQ=DAILY"
    elif "weekly" in freq and weekdays:
        by_day = ",".join(DAYS_OF_WEEK[i][:2].upper() for i in weekdays)
        rrule = f"FREQ=WEEKLY;BYDAY={by_day}"
    else:
        return None

    if plan_months > 0:
        until = today + relativedelta(months=plan_months)
        rrule += f";UNTIL={until:%Y%m%d}"
    return rrule


def project_event(
    chore: ScheduledChore,
    plan_months: int,
    now: datetime | None = None,
) -> CalendarEvent:
    """Compute the first occurrence and recurrence rule for a chore.

    Args:
        chore: A successfully parsed chore.
        plan_months: Plan duration; bounds the RRULE when > 0.
        now: Current time (timezone-aware). Defaults to the current time in
             the configured TIMEZONE.
    """
    if now is None:
        from src.config import settings
        now = datetime.now(ZoneInfo(settings.TIMEZONE))

    daily = "daily" in chore.frequency.lower()
    hour = _event_hour(chore.time)
    weekdays = _target_weekdays(chore.days)

    day_offset = 0
    day_found = False
    if chore.days and not daily:
        if weekdays:
            today_index = (now.weekday() + 1) % 7  # Python weeks start on Monday
            day_offset = min((wd - today_index) % 7 for wd in weekdays)
            day_found = True
    elif daily:
        day_found = True

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start = (midnight + timedelta(days=day_offset)).replace(hour=hour)

    if start < now and day_found:
        start += timedelta(days=1 if daily else 7)

    return CalendarEvent(
        title=f"{chore.icon} {chore.name}",
        description=_build_description(chore),
        start=start,
        end=start + _EVENT_DURATION,
        rrule=_build_rrule(chore.frequency, weekdays, plan_months, now.date()),
    )


def build_calendar_link(
    chore: ScheduledChore,
    plan_months: int,
    now: datetime | None = None,
) -> str:
    """Return a Google Calendar URL that opens a pre-filled event for `chore`."""
    event = project_event(chore, plan_months, now=now)

    url = (
        f"{GOOGLE_CALENDAR_URL}?action=TEMPLATE"
        f"&text={quote(event.title, safe='')}"
        f"&dates={format_utc(event.start)}/{format_utc(event.end)}"
        f"&details={quote(event.description, safe='')}"
    )
    if event.rrule:
        url += f"&recur=RRULE:{event.rrule}"

    logger.debug("Calendar link for '%s' starting %s", chore.name, event.start.isoformat())
    return url
