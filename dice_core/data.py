"""Domain constants, runtime tunables, and shared type aliases."""

from __future__ import annotations

from typing import Final

from .models import DiceOption, GoalComparison, RollMode

DICE_OPTIONS: Final[list[DiceOption]] = [
    DiceOption(value="d2", label="D2 / Coin", sides=2),
    DiceOption(value="d4", label="D4", sides=4),
    DiceOption(value="d6", label="D6", sides=6),
    DiceOption(value="d8", label="D8", sides=8),
    DiceOption(value="d10", label="D10", sides=10),
    DiceOption(value="d12", label="D12", sides=12),
    DiceOption(value="d20", label="D20", sides=20),
    DiceOption(value="d100", label="D100", sides=100),
]

DICE_TYPE_TO_SIDES: Final[dict[str, int]] = {option.value: option.sides for option in DICE_OPTIONS}

GOAL_COMPARISON_OPTIONS: Final[dict[GoalComparison, str]] = {
    GoalComparison.AT_LEAST: "Or Higher",
    GoalComparison.AT_MOST: "Or Lower",
    GoalComparison.EXACTLY: "Exactly",
}

ROLL_MODE_OPTIONS: Final[dict[RollMode, str]] = {
    RollMode.NORMAL: "Normal",
    RollMode.ADVANTAGE: "Advantage",
    RollMode.DISADVANTAGE: "Disadvantage",
}

MIN_DICE_COUNT: Final[int] = 1
MAX_DICE_COUNT: Final[int] = 100
DICE_COUNT_OPTIONS: Final[list[int]] = list(range(MIN_DICE_COUNT, MAX_DICE_COUNT + 1))
MIN_SIDES: Final[int] = 2

MIN_MODIFIER: Final[int] = -1000
MAX_MODIFIER: Final[int] = 1000
MIN_GOAL_NUMBER: Final[int] = 1
MAX_GOAL_NUMBER: Final[int] = 10000

# Rows below 0.1% are hidden from tables and rendered as "<0.1".
DISPLAY_THRESHOLD: Final[float] = 0.001
SUB_THRESHOLD_LABEL: Final[str] = "<0.1"
MAX_HIGHLIGHTED_MODES: Final[int] = 3

YIELD_INTERVAL_DEFAULT: Final[int] = 5
_YIELD_INTERVAL: int = YIELD_INTERVAL_DEFAULT

ProbabilityMassFunction = dict[int, float]


def set_yield_interval(interval: int) -> None:
    """Update how many dice the async builder convolves between yields.

    Parameters
    ----------
    interval:
        Number of convolution steps between two cooperative yields.

    Raises
    ------
    ValueError
        If the interval is smaller than one die.
    """

    if interval < 1:
        raise ValueError("Yield interval must be at least 1.")
    global _YIELD_INTERVAL
    _YIELD_INTERVAL = interval


def get_yield_interval() -> int:
    """Return the currently configured yield interval."""

    return _YIELD_INTERVAL


def parse_dice_type(dice_type: str) -> int:
    """Return the side count for a dice label such as ``"d20"``.

    Labels outside ``DICE_OPTIONS`` are still accepted as long as they follow the
    ``d<sides>`` shape, so callers can experiment with unusual dice.
    """

    key = dice_type.strip().lower()
    if key in DICE_TYPE_TO_SIDES:
        return DICE_TYPE_TO_SIDES[key]
    if not key.startswith("d") or not key[1:].isdigit():
        raise ValueError(f"Unknown dice type '{dice_type}'")
    return int(key[1:])
