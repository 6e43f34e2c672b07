"""High-level entry points used by the UI and callers."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional, Union

from .data import (
    MAX_DICE_COUNT,
    MAX_GOAL_NUMBER,
    MAX_MODIFIER,
    MIN_DICE_COUNT,
    MIN_GOAL_NUMBER,
    MIN_MODIFIER,
    ProbabilityMassFunction,
    parse_dice_type,
)
from .distribution import (
    build_distribution,
    calculate_distribution,
    to_results,
    validate_build_parameters,
)
from .exceptions import InvalidParameterError
from .goal import compute_goal_result, parse_goal_comparison, validate_threshold
from .models import (
    CalculationResult,
    CancellationToken,
    GoalComparison,
    GoalQuery,
    ProbabilityResult,
    RollMode,
)
from .presentation import modal_outcomes
from .roll_mode import apply_roll_mode, parse_roll_mode

logger = logging.getLogger(__name__)


def make_goal_query(
    threshold: Optional[int],
    comparison: Union[GoalComparison, str] = GoalComparison.AT_LEAST,
) -> Optional[GoalQuery]:
    """Return a ``GoalQuery`` or ``None`` when no goal number was entered."""

    if threshold is None:
        return None
    validate_threshold(threshold)
    return GoalQuery(threshold=threshold, comparison=parse_goal_comparison(comparison))


def _check_goal(goal: Optional[GoalQuery]) -> Optional[GoalComparison]:
    """Validate a goal's threshold and operator, returning the parsed operator."""

    if goal is None:
        return None
    validate_threshold(goal.threshold)
    return parse_goal_comparison(goal.comparison)


def validate_request(
    dice_count: int,
    sides: int,
    modifier: int = 0,
    goal: Optional[GoalQuery] = None,
) -> None:
    """Apply the calculator's input bounds on top of the engine preconditions.

    Parameters
    ----------
    dice_count:
        Must lie within ``MIN_DICE_COUNT..MAX_DICE_COUNT``.
    sides:
        Must be at least two.
    modifier:
        Must lie within ``MIN_MODIFIER..MAX_MODIFIER``.
    goal:
        Optional goal whose threshold must lie within
        ``MIN_GOAL_NUMBER..MAX_GOAL_NUMBER`` and whose operator must be known.

    Raises
    ------
    InvalidParameterError
        If any input falls outside its bound or the goal operator is unknown.
    """

    validate_build_parameters(dice_count, sides, modifier)
    if not MIN_DICE_COUNT <= dice_count <= MAX_DICE_COUNT:
        raise InvalidParameterError(
            f"dice_count must be between {MIN_DICE_COUNT} and {MAX_DICE_COUNT}",
            field="dice_count",
        )
    if not MIN_MODIFIER <= modifier <= MAX_MODIFIER:
        raise InvalidParameterError(
            f"modifier must be between {MIN_MODIFIER} and {MAX_MODIFIER}", field="modifier"
        )
    if _check_goal(goal) is not None:
        if not MIN_GOAL_NUMBER <= goal.threshold <= MAX_GOAL_NUMBER:
            raise InvalidParameterError(
                f"goal must be between {MIN_GOAL_NUMBER} and {MAX_GOAL_NUMBER}",
                field="threshold",
            )


def _prepare_request(
    dice_count: int,
    sides: Union[int, str],
    modifier: int,
    roll_mode: Union[RollMode, str],
    goal: Optional[GoalQuery],
) -> tuple[int, RollMode, Optional[GoalComparison]]:
    """Resolve labels and reject bad input before any work starts."""

    if isinstance(sides, str):
        try:
            sides = parse_dice_type(sides)
        except ValueError as exc:
            raise InvalidParameterError(str(exc), field="sides") from exc
    mode = parse_roll_mode(roll_mode)
    validate_build_parameters(dice_count, sides, modifier)
    return sides, mode, _check_goal(goal)


def _bundle(
    dice_count: int,
    sides: int,
    modifier: int,
    mode: RollMode,
    pmf: ProbabilityMassFunction,
    results: list[ProbabilityResult],
    goal: Optional[GoalQuery],
    comparison: Optional[GoalComparison],
    compute_seconds: float,
) -> CalculationResult:
    goal_result = (
        compute_goal_result(pmf, goal.threshold, comparison, mode) if goal is not None else None
    )
    return CalculationResult(
        dice_count=dice_count,
        sides=sides,
        modifier=modifier,
        roll_mode=mode,
        pmf=pmf,
        results=results,
        goal=goal_result,
        modal_outcomes=modal_outcomes(results),
        compute_seconds=compute_seconds,
    )


def calculate(
    dice_count: int,
    sides: Union[int, str],
    modifier: int = 0,
    roll_mode: Union[RollMode, str] = RollMode.NORMAL,
    goal: Optional[GoalQuery] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> Optional[CalculationResult]:
    """Compute the distribution and optional goal answer for one request.

    Parameters
    ----------
    dice_count:
        Number of identical dice.
    sides:
        Side count, or a dice label such as ``"d20"``.
    modifier:
        Constant added to every total.
    roll_mode:
        Normal, advantage or disadvantage.
    goal:
        Optional goal evaluated on the final distribution.
    cancel_token:
        Caller-owned flag; a cancelled request returns ``None``.

    Returns
    -------
    CalculationResult or None
        Bundle with the PMF, result rows, goal answer and timing.

    Raises
    ------
    InvalidParameterError
        If any parameter, the goal threshold or the goal operator is malformed.
        Nothing is computed in that case.
    """

    sides, mode, comparison = _prepare_request(dice_count, sides, modifier, roll_mode, goal)

    compute_start = perf_counter()
    base = build_distribution(dice_count, sides, modifier, cancel_token)
    if base is None:
        return None
    pmf = apply_roll_mode(base, mode, cancel_token)
    if pmf is None:
        return None
    results = to_results(pmf)
    compute_seconds = perf_counter() - compute_start
    logger.debug(
        "Calculated %sd%s%+d (%s) in %.4fs", dice_count, sides, modifier, mode.value, compute_seconds
    )
    return _bundle(
        dice_count, sides, modifier, mode, pmf, results, goal, comparison, compute_seconds
    )


class CalculationSession:
    """Keeps only the most recent request of one caller alive.

    Every new request cancels the token handed to the previous one, so a slow
    build that has been superseded stops at its next check and its result is
    discarded.
    """

    def __init__(self) -> None:
        self._token = CancellationToken()

    @property
    def token(self) -> CancellationToken:
        """Return the token of the current request."""

        return self._token

    def supersede(self) -> CancellationToken:
        """Cancel the in-flight request and return a fresh token."""

        self._token.cancel()
        self._token = CancellationToken()
        return self._token

    def cancel(self) -> None:
        """Cancel the current request without starting a new one."""

        self._token.cancel()

    def calculate(
        self,
        dice_count: int,
        sides: Union[int, str],
        modifier: int = 0,
        roll_mode: Union[RollMode, str] = RollMode.NORMAL,
        goal: Optional[GoalQuery] = None,
    ) -> Optional[CalculationResult]:
        """Run ``calculate`` as the session's new current request."""

        token = self.supersede()
        return calculate(dice_count, sides, modifier, roll_mode, goal, cancel_token=token)

    async def calculate_async(
        self,
        dice_count: int,
        sides: Union[int, str],
        modifier: int = 0,
        roll_mode: Union[RollMode, str] = RollMode.NORMAL,
        goal: Optional[GoalQuery] = None,
    ) -> Optional[CalculationResult]:
        """Async counterpart of ``calculate`` built on ``calculate_distribution``.

        Input is checked before the previous request is superseded. Returns
        ``None`` when a later request superseded this one.
        """

        sides, mode, comparison = _prepare_request(dice_count, sides, modifier, roll_mode, goal)
        token = self.supersede()
        compute_start = perf_counter()
        results = await calculate_distribution(dice_count, sides, modifier, mode, token)
        if token.cancelled:
            return None
        pmf: ProbabilityMassFunction = {row.outcome: row.probability for row in results}
        return _bundle(
            dice_count,
            sides,
            modifier,
            mode,
            pmf,
            results,
            goal,
            comparison,
            perf_counter() - compute_start,
        )
