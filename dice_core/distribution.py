"""Exact sum-of-dice distributions built by iterated convolution."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Mapping
from time import perf_counter
from typing import Optional, Union

from .data import MIN_DICE_COUNT, MIN_SIDES, ProbabilityMassFunction, get_yield_interval
from .exceptions import CalculationCancelled, InvalidParameterError
from .models import CancellationToken, ProbabilityResult, RollMode
from .presentation import round_percentage
from .roll_mode import apply_roll_mode, parse_roll_mode

logger = logging.getLogger(__name__)


def validate_build_parameters(dice_count: int, sides: int, modifier: int) -> None:
    """Reject parameters the convolution cannot work with.

    Raises
    ------
    InvalidParameterError
        If any value is not an integer, ``dice_count < 1`` or ``sides < 2``.
    """

    for name, value in (("dice_count", dice_count), ("sides", sides), ("modifier", modifier)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterError(
                f"{name} must be an integer, received {value!r}", field=name
            )
    if dice_count < MIN_DICE_COUNT:
        raise InvalidParameterError(
            f"dice_count must be at least {MIN_DICE_COUNT}, received {dice_count}",
            field="dice_count",
        )
    if sides < MIN_SIDES:
        raise InvalidParameterError(
            f"sides must be at least {MIN_SIDES}, received {sides}", field="sides"
        )


def single_die_pmf(sides: int) -> ProbabilityMassFunction:
    """Return the uniform PMF of one die numbered ``1..sides``."""

    face_probability = 1 / sides
    return {face: face_probability for face in range(1, sides + 1)}


def convolve_die(pmf: Mapping[int, float], sides: int) -> ProbabilityMassFunction:
    """Add one more ``sides``-sided die to the running distribution.

    Parameters
    ----------
    pmf:
        Distribution of the sum of the dice combined so far.
    sides:
        Side count of the die being added.

    Returns
    -------
    ProbabilityMassFunction
        New distribution in ascending outcome order; ``pmf`` is left untouched.
    """

    face_probability = 1 / sides
    combined: ProbabilityMassFunction = {}
    for existing_sum, existing_mass in pmf.items():
        for face in range(1, sides + 1):
            total = existing_sum + face
            combined[total] = combined.get(total, 0.0) + existing_mass * face_probability
    return dict(sorted(combined.items()))


def shift_pmf(pmf: Mapping[int, float], modifier: int) -> ProbabilityMassFunction:
    """Move every outcome by ``modifier`` without touching the masses."""

    return {outcome + modifier: mass for outcome, mass in pmf.items()}


def iter_convolution(dice_count: int, sides: int) -> Iterator[tuple[int, ProbabilityMassFunction]]:
    """Yield ``(dice_so_far, pmf)`` after the first die and after every added die."""

    pmf = single_die_pmf(sides)
    yield 1, pmf
    for die in range(2, dice_count + 1):
        pmf = convolve_die(pmf, sides)
        yield die, pmf


def _check_cancelled(cancel_token: Optional[CancellationToken], stage: str) -> None:
    if cancel_token is not None and cancel_token.cancelled:
        raise CalculationCancelled(stage)


def _build(
    dice_count: int,
    sides: int,
    modifier: int,
    cancel_token: Optional[CancellationToken],
) -> ProbabilityMassFunction:
    pmf: ProbabilityMassFunction = {}
    for die, pmf in iter_convolution(dice_count, sides):
        if die < dice_count:
            _check_cancelled(cancel_token, f"build step {die + 1}/{dice_count}")
    _check_cancelled(cancel_token, "modifier shift")
    return shift_pmf(pmf, modifier)


def build_distribution(
    dice_count: int,
    sides: int,
    modifier: int = 0,
    cancel_token: Optional[CancellationToken] = None,
) -> Optional[ProbabilityMassFunction]:
    """Return the exact PMF of ``dice_count`` d``sides`` plus ``modifier``.

    Parameters
    ----------
    dice_count:
        Number of identical dice, at least one.
    sides:
        Faces per die, at least two.
    modifier:
        Constant added to every total.
    cancel_token:
        Optional caller-owned flag checked between convolution steps.

    Returns
    -------
    ProbabilityMassFunction or None
        Outcome-to-mass mapping in ascending outcome order, or ``None`` when the
        token was cancelled before the build finished.

    Raises
    ------
    InvalidParameterError
        If the parameters are rejected by ``validate_build_parameters``.
    """

    validate_build_parameters(dice_count, sides, modifier)
    start = perf_counter()
    try:
        pmf = _build(dice_count, sides, modifier, cancel_token)
    except CalculationCancelled as exc:
        logger.debug("Distribution %sd%s%+d abandoned: %s", dice_count, sides, modifier, exc)
        return None
    logger.debug(
        "Built %sd%s%+d with %d outcomes in %.4fs",
        dice_count,
        sides,
        modifier,
        len(pmf),
        perf_counter() - start,
    )
    return pmf


def to_results(pmf: Mapping[int, float]) -> list[ProbabilityResult]:
    """Convert a PMF into the ordered result rows consumed by callers."""

    return [
        ProbabilityResult(
            outcome=outcome,
            probability=probability,
            percentage=round_percentage(probability),
        )
        for outcome, probability in sorted(pmf.items())
    ]


def build_results(
    dice_count: int,
    sides: int,
    modifier: int = 0,
    roll_mode: Union[RollMode, str] = RollMode.NORMAL,
    cancel_token: Optional[CancellationToken] = None,
) -> list[ProbabilityResult]:
    """Synchronous counterpart of ``calculate_distribution``."""

    mode = parse_roll_mode(roll_mode)
    base = build_distribution(dice_count, sides, modifier, cancel_token)
    if base is None:
        return []
    adjusted = apply_roll_mode(base, mode, cancel_token)
    if adjusted is None:
        return []
    return to_results(adjusted)


async def calculate_distribution(
    dice_count: int,
    sides: int,
    modifier: int = 0,
    roll_mode: Union[RollMode, str] = RollMode.NORMAL,
    cancel_token: Optional[CancellationToken] = None,
) -> list[ProbabilityResult]:
    """Build the distribution while periodically handing control back to the loop.

    The event loop gets a turn every ``get_yield_interval()`` dice, and the
    token is re-checked after every step so a superseded request stops early.
    A cancelled request returns an empty list.
    """

    validate_build_parameters(dice_count, sides, modifier)
    mode = parse_roll_mode(roll_mode)
    interval = get_yield_interval()
    start = perf_counter()
    pmf: ProbabilityMassFunction = {}
    try:
        for die, pmf in iter_convolution(dice_count, sides):
            if die % interval == 0:
                await asyncio.sleep(0)
            if die < dice_count:
                _check_cancelled(cancel_token, f"build step {die + 1}/{dice_count}")
        _check_cancelled(cancel_token, "modifier shift")
    except CalculationCancelled as exc:
        logger.debug("Async distribution %sd%s%+d abandoned: %s", dice_count, sides, modifier, exc)
        return []

    adjusted = apply_roll_mode(shift_pmf(pmf, modifier), mode, cancel_token)
    if adjusted is None:
        return []
    logger.debug(
        "Async build %sd%s%+d (%s) finished in %.4fs",
        dice_count,
        sides,
        modifier,
        mode.value,
        perf_counter() - start,
    )
    return to_results(adjusted)
