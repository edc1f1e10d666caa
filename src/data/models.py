"""
ChorePlan Assistant — Data Models.

The catalog is the menu of chores a user picks from before asking the LLM
for a plan. Entries are read-only once fetched.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChoreCatalogEntry:
    """A chore the user can select for planning."""

    id: int
    name: str     # e.g. "Dishwashing"
    icon: str     # emoji token, e.g. "🧼"
