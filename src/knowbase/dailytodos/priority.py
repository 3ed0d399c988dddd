"""Priority ladder: low < medium < high < critical."""

from __future__ import annotations

from typing import Literal

Priority = Literal["low", "medium", "high", "critical"]

# Lowest to highest
PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "critical")
DEFAULT_PRIORITY: Priority = "medium"


def is_valid(priority: object) -> bool:
    """Membership test against the four rungs."""
    return isinstance(priority, str) and priority in PRIORITIES


def next_priority(priority: str) -> str:
    """One rung up, saturating at the ceiling.

    Values outside the ladder fall back to the default rung.
    """
    if not is_valid(priority):
        return DEFAULT_PRIORITY
    index = PRIORITIES.index(priority)
    return PRIORITIES[min(index + 1, len(PRIORITIES) - 1)]


def rank(priority: str) -> int:
    """Position on the ladder; unknown values sort below ``low``."""
    try:
        return PRIORITIES.index(priority)
    except ValueError:
        return -1
