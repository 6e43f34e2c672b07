"""Goal-threshold aggregation over a probability distribution."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Union

from .exceptions import InvalidParameterError
from .models import GoalComparison, GoalResult, ProbabilityResult, RollMode
from .presentation import round_percentage
from .roll_mode import parse_roll_mode

logger = logging.getLogger(__name__)

_COMPARISON_ALIASES: dict[str, GoalComparison] = {
    "exactly": GoalComparison.EXACTLY,
    "orhigher": GoalComparison.AT_LEAST,
    "orbetter": GoalComparison.AT_LEAST,
    "atleast": GoalComparison.AT_LEAST,
    "at_least": GoalComparison.AT_LEAST,
    "orlower": GoalComparison.AT_MOST,
    "orworse": GoalComparison.AT_MOST,
    "atmost": GoalComparison.AT_MOST,
    "at_most": GoalComparison.AT_MOST,
}

DistributionLike = Union[Mapping[int, float], Iterable[ProbabilityResult]]


def parse_goal_comparison(comparison: Union[GoalComparison, str]) -> GoalComparison:
    """Map an operator or one of its spellings onto ``GoalComparison``.

    Raises
    ------
    InvalidParameterError
        If the operator is not recognised.
    """

    if isinstance(comparison, GoalComparison):
        return comparison
    key = str(comparison).strip().lower()
    try:
        return _COMPARISON_ALIASES[key]
    except KeyError as exc:
        raise InvalidParameterError(
            f"Unknown goal comparison '{comparison}'", field="comparison"
        ) from exc


def validate_threshold(threshold: int) -> None:
    """Reject thresholds that are not plain integers."""

    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise InvalidParameterError(
            f"goal threshold must be an integer, received {threshold!r}", field="threshold"
        )


def goal_matches(
    outcome: int,
    threshold: int,
    comparison: Union[GoalComparison, str],
) -> bool:
    """Return True when ``outcome`` satisfies the goal. Bounds are inclusive."""

    operator = parse_goal_comparison(comparison)
    if operator is GoalComparison.EXACTLY:
        return outcome == threshold
    if operator is GoalComparison.AT_LEAST:
        return outcome >= threshold
    return outcome <= threshold


def _iter_masses(distribution: DistributionLike) -> Iterable[tuple[int, float]]:
    if isinstance(distribution, Mapping):
        return distribution.items()
    return ((row.outcome, row.probability) for row in distribution)


def goal_probability(
    distribution: DistributionLike,
    threshold: int,
    comparison: Union[GoalComparison, str],
) -> float:
    """Sum the probability of every outcome that meets the goal.

    Parameters
    ----------
    distribution:
        Full, unfiltered PMF or result rows. Display filtering must not be
        applied beforehand.
    threshold:
        Goal number. Values outside the achievable range yield ``0.0``.
    comparison:
        Exactly, at least or at most.

    Returns
    -------
    float
        Raw probability on ``[0, 1]``.
    """

    validate_threshold(threshold)
    operator = parse_goal_comparison(comparison)
    total = 0.0
    for outcome, probability in _iter_masses(distribution):
        if goal_matches(outcome, threshold, operator):
            total += probability
    return total


def goal_display_text(threshold: int, comparison: Union[GoalComparison, str]) -> str:
    """Return the phrase describing the goal, e.g. ``"8 or higher"``."""

    operator = parse_goal_comparison(comparison)
    if operator is GoalComparison.EXACTLY:
        return f"{threshold} exactly"
    if operator is GoalComparison.AT_LEAST:
        return f"{threshold} or higher"
    return f"{threshold} or lower"


def roll_mode_suffix(mode: Union[RollMode, str]) -> str:
    """Return the suffix appended to goal text for non-normal rolls."""

    roll_mode = parse_roll_mode(mode)
    if roll_mode is RollMode.ADVANTAGE:
        return " with advantage"
    if roll_mode is RollMode.DISADVANTAGE:
        return " with disadvantage"
    return ""


def compute_goal_result(
    distribution: DistributionLike,
    threshold: int,
    comparison: Union[GoalComparison, str],
    roll_mode: Union[RollMode, str] = RollMode.NORMAL,
) -> GoalResult:
    """Bundle the goal probability with its rounded percentage and text."""

    operator = parse_goal_comparison(comparison)
    probability = goal_probability(distribution, threshold, operator)
    logger.debug("Goal %s %s -> %.6f", operator.value, threshold, probability)
    return GoalResult(
        goal_number=threshold,
        comparison=operator,
        probability=probability,
        percentage=round_percentage(probability),
        display_text=goal_display_text(threshold, operator),
        roll_mode=parse_roll_mode(roll_mode),
    )
