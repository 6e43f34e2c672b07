"""Advantage and disadvantage transforms over an already summed distribution."""

from __future__ import annotations

import logging
from typing import Optional, Union

from .data import ProbabilityMassFunction
from .exceptions import InvalidParameterError
from .models import CancellationToken, RollMode

logger = logging.getLogger(__name__)


def parse_roll_mode(mode: Union[RollMode, str]) -> RollMode:
    """Return ``mode`` as a ``RollMode``, accepting its value or member name."""

    if isinstance(mode, RollMode):
        return mode
    try:
        return RollMode(mode)
    except ValueError:
        pass
    try:
        return RollMode[str(mode).upper()]
    except KeyError as exc:
        raise InvalidParameterError(f"Unknown roll mode '{mode}'", field="roll_mode") from exc


def apply_roll_mode(
    pmf: ProbabilityMassFunction,
    mode: Union[RollMode, str],
    cancel_token: Optional[CancellationToken] = None,
) -> Optional[ProbabilityMassFunction]:
    """Return the distribution of the better or worse of two independent rolls.

    The whole pool is rolled twice and the totals compared, so the transform is
    applied to the fully convolved PMF rather than per die.

    Parameters
    ----------
    pmf:
        Distribution of a single roll of the pool.
    mode:
        ``NORMAL`` returns ``pmf`` itself; ``ADVANTAGE`` keeps the higher total
        and ``DISADVANTAGE`` the lower one.
    cancel_token:
        Optional flag checked once per first-roll outcome.

    Returns
    -------
    ProbabilityMassFunction or None
        New mapping in ascending outcome order, or ``None`` if cancelled.
    """

    roll_mode = parse_roll_mode(mode)
    if roll_mode is RollMode.NORMAL:
        return pmf

    pick = max if roll_mode is RollMode.ADVANTAGE else min
    items = list(pmf.items())
    combined: ProbabilityMassFunction = {}
    for first_outcome, first_mass in items:
        if cancel_token is not None and cancel_token.cancelled:
            logger.debug("%s transform abandoned after partial pass", roll_mode.value)
            return None
        for second_outcome, second_mass in items:
            taken = pick(first_outcome, second_outcome)
            combined[taken] = combined.get(taken, 0.0) + first_mass * second_mass

    logger.debug("Applied %s to %d outcomes", roll_mode.value, len(items))
    return dict(sorted(combined.items()))
