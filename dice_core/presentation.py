"""Percentage rounding and the display rules layered over result rows."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .data import DISPLAY_THRESHOLD, MAX_HIGHLIGHTED_MODES, SUB_THRESHOLD_LABEL
from .models import ProbabilityResult


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity.

    Compares the exact fractional part against one half instead of computing
    ``floor(value + 0.5)``, whose addition rounds ``0.49999999999999994`` up
    to one.
    """

    whole = math.floor(value)
    if value - whole >= 0.5:
        whole += 1
    return whole


def round_percentage(probability: float) -> float:
    """Return ``probability`` as a percentage rounded half-up to one decimal."""

    return round_half_up(probability * 1000) / 10


def format_percentage(probability: float, percentage: float) -> str:
    """Return the percentage label, keeping rare but possible outcomes visible.

    Parameters
    ----------
    probability:
        Raw probability on ``[0, 1]``; decides whether the ``<0.1`` label applies.
    percentage:
        Rounded percentage shown for everything else.
    """

    if 0.0 < probability < DISPLAY_THRESHOLD:
        return SUB_THRESHOLD_LABEL
    return f"{percentage:.1f}"


def modal_outcomes(results: Sequence[ProbabilityResult]) -> set[int]:
    """Return the outcomes sharing the highest rounded percentage.

    Emphasis is only meaningful for a handful of ties; when more than
    ``MAX_HIGHLIGHTED_MODES`` outcomes share the maximum an empty set is returned.
    """

    if not results:
        return set()
    top = max(result.percentage for result in results)
    tied = {result.outcome for result in results if result.percentage == top}
    if 1 <= len(tied) <= MAX_HIGHLIGHTED_MODES:
        return tied
    return set()
