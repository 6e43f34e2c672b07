"""Table view helpers: display filtering, goal highlighting, sorting and frames."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal, Optional

import pandas as pd

from .data import DISPLAY_THRESHOLD
from .goal import goal_matches
from .models import GoalQuery, ProbabilityResult
from .presentation import format_percentage, modal_outcomes

SortColumn = Literal["outcome", "percentage"]

FRAME_COLUMNS: tuple[str, ...] = (
    "outcome",
    "probability",
    "percentage",
    "display",
    "is_mode",
    "meets_goal",
)


def visible_results(
    results: Sequence[ProbabilityResult],
    threshold: float = DISPLAY_THRESHOLD,
) -> list[ProbabilityResult]:
    """Drop rows whose probability is strictly below ``threshold``.

    Display only: goal aggregation and mass checks always use the full rows.
    """

    return [result for result in results if result.probability >= threshold]


def highlighted_outcomes(
    results: Sequence[ProbabilityResult],
    goal: Optional[GoalQuery],
) -> set[int]:
    """Return the outcomes that satisfy ``goal``; empty when no goal is set."""

    if goal is None:
        return set()
    return {
        result.outcome
        for result in results
        if goal_matches(result.outcome, goal.threshold, goal.comparison)
    }


def sort_results(
    results: Sequence[ProbabilityResult],
    column: SortColumn = "outcome",
    descending: bool = False,
) -> list[ProbabilityResult]:
    """Return a new list ordered by outcome or by rounded percentage."""

    if column == "outcome":
        return sorted(results, key=lambda result: result.outcome, reverse=descending)
    if column == "percentage":
        return sorted(results, key=lambda result: result.percentage, reverse=descending)
    raise ValueError(f"Unknown sort column '{column}'")


def results_to_frame(
    results: Sequence[ProbabilityResult],
    goal: Optional[GoalQuery] = None,
    hide_below_threshold: bool = True,
) -> pd.DataFrame:
    """Build the table shown to users.

    Modal emphasis is computed on the unfiltered rows before any hiding, so a
    hidden tail never changes which outcomes are bolded.
    """

    modes = modal_outcomes(results)
    goal_hits = highlighted_outcomes(results, goal)
    rows = visible_results(results) if hide_below_threshold else list(results)
    frame = pd.DataFrame(
        {
            "outcome": [row.outcome for row in rows],
            "probability": [row.probability for row in rows],
            "percentage": [row.percentage for row in rows],
            "display": [format_percentage(row.probability, row.percentage) for row in rows],
            "is_mode": [row.outcome in modes for row in rows],
            "meets_goal": [row.outcome in goal_hits for row in rows],
        },
        columns=list(FRAME_COLUMNS),
    )
    return frame
