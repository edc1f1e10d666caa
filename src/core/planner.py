"""
ChorePlan Assistant — Plan Generation.

Sends the user's chore selection to the LLM and turns the reply into a
parsed list plus a weekly grid. Every failure mode is converted into a
user-facing message on PlanResult; generate_plan() never raises, so the
caller can always re-enable the "generate" affordance afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.core.llm import CompletionError, complete
from src.core.parser import ScheduledChore, count_scheduled, parse_schedule
from src.core.schedule_grid import WeeklySchedule, build_weekly_schedule
from src.data.models import ChoreCatalogEntry

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 3

SYSTEM_PROMPT = (
    "You are a helpful assistant that specializes in creating clear, concise, "
    "and practical chore schedules. Output only the requested list in the "
    "specified format."
)

_USER_PROMPT = """\
I need to create a cleaning schedule for the following chores over the next {months} month(s):
{chores}

Please generate a schedule for these chores.
For each chore, suggest:
1. Frequency (e.g., Daily, Twice a week, Weekly, Bi-weekly, Monthly).
2. Specific day(s) of the week if applicable (e.g., Monday, Wednesday, Saturday).
3. Time of day if relevant (e.g., Morning, Afternoon, Evening, or a specific time like 9:00 AM).

Present the schedule **only as a list**, with each chore and its schedule on a new line.
Use the following format for each item:
- [Chore Name] ([Icon]): [Frequency], [Day(s) if not daily], [Time of Day]

For example:
- Dishwashing (🧼): Daily, Evening
- Laundry (🧺): Weekly, Saturday, Morning
- Vacuuming (💨): Twice a week, Wednesday, Friday, Afternoon
- Grocery Shopping (🛒): Weekly, Sunday, 10:00 AM

Please only provide the list of chores and their schedules in this format. \
Do not include any introductory or concluding sentences.
"""

MISSING_KEY_MESSAGE = "Error: API key is missing. Set one with /apikey <key>."
NO_TEXT_MESSAGE = "No text content received from the completion service."
NO_SELECTION_MESSAGE = "Select at least one chore first."


@dataclass
class PlanResult:
    """Outcome of one plan request: a schedule, or an error message."""

    chores: list[ScheduledChore] | None = None
    weekly: WeeklySchedule | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Catalog selection helpers
# ---------------------------------------------------------------------------


def filter_catalog(
    entries: list[ChoreCatalogEntry], search_term: str,
) -> list[ChoreCatalogEntry]:
    """Case-insensitive name search; terms shorter than 3 chars show everything."""
    term = search_term.strip().lower()
    if len(term) < MIN_SEARCH_LENGTH:
        return list(entries)
    return [e for e in entries if term in e.name.lower()]


def toggle_selection(
    selected: list[ChoreCatalogEntry], entry: ChoreCatalogEntry,
) -> list[ChoreCatalogEntry]:
    """Return a new selection with `entry` added, or removed if already present."""
    if any(s.id == entry.id for s in selected):
        return [s for s in selected if s.id != entry.id]
    return [*selected, entry]


def build_user_prompt(selected: list[ChoreCatalogEntry], plan_months: int) -> str:
    chores = "\n".join(f"- {c.name} ({c.icon})" for c in selected)
    return _USER_PROMPT.format(months=plan_months, chores=chores)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


async def generate_plan(
    selected: list[ChoreCatalogEntry],
    plan_months: int,
    api_key: str | None,
    max_tokens: int = 1500,
) -> PlanResult:
    """Ask the LLM for a schedule and parse it.

    Returns a PlanResult with `chores` and `weekly` on success, or `error`
    (and no grid) on any failure.
    """
    if not selected:
        return PlanResult(error=NO_SELECTION_MESSAGE)

    if not api_key:
        logger.error("No API key configured; plan generation aborted")
        return PlanResult(error=MISSING_KEY_MESSAGE)

    try:
        raw_text = await complete(
            system=SYSTEM_PROMPT,
            user_message=build_user_prompt(selected, plan_months),
            max_tokens=max_tokens,
            api_key=api_key,
        )
        if not raw_text or not raw_text.strip():
            logger.error("Completion service returned no text")
            return PlanResult(error=NO_TEXT_MESSAGE)

        logger.debug("LLM raw response: %s", raw_text)
        chores = parse_schedule(raw_text)
        if count_scheduled(chores) == 0:
            logger.warning("No schedule lines could be parsed from the response")
            return PlanResult(
                error="Could not parse the AI's response into a schedule. Raw output:\n" + raw_text,
            )

        logger.info(
            "Plan generated: %d of %d line(s) scheduled for %d month(s)",
            count_scheduled(chores), len(chores), plan_months,
        )
        return PlanResult(chores=chores, weekly=build_weekly_schedule(chores))

    except CompletionError as exc:
        logger.error("%s API error: %s", exc.provider, exc)
        return PlanResult(
            error=f"{exc.provider} API Error: {exc.status} {exc.status_text} - {exc.message}",
        )
    except Exception as exc:
        logger.error("Failed to process chore organization: %s", exc)
        return PlanResult(error=f"Failed to get organization plan: {exc}")
