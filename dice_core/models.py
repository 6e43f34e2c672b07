"""Dataclasses and enums shared across the distribution, goal and view modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RollMode(str, Enum):
    """How a single roll of the pool is resolved."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


class GoalComparison(str, Enum):
    """Comparison applied between an outcome and a goal threshold."""

    EXACTLY = "exactly"
    AT_LEAST = "orHigher"
    AT_MOST = "orLower"


@dataclass(frozen=True)
class DiceOption:
    """Selectable die in the calculator catalogue."""

    value: str
    label: str
    sides: int


@dataclass(frozen=True)
class ProbabilityResult:
    """Probability of a single outcome, with its rounded percentage."""

    outcome: int
    probability: float
    percentage: float


@dataclass(frozen=True)
class GoalQuery:
    """Goal threshold plus the comparison used against it."""

    threshold: int
    comparison: GoalComparison = GoalComparison.AT_LEAST


@dataclass(frozen=True)
class GoalResult:
    """Probability of reaching a goal on the current distribution."""

    goal_number: int
    comparison: GoalComparison
    probability: float
    percentage: float
    display_text: str
    roll_mode: RollMode = RollMode.NORMAL


@dataclass
class CancellationToken:
    """Cooperative cancellation flag owned by the caller of a calculation."""

    cancelled: bool = False

    def cancel(self) -> None:
        """Ask any computation holding this token to stop at its next check."""

        self.cancelled = True


@dataclass
class CalculationResult:
    """Bundle returned by ``calculate`` for a single request."""

    dice_count: int
    sides: int
    modifier: int
    roll_mode: RollMode
    pmf: dict[int, float]
    results: list[ProbabilityResult]
    goal: Optional[GoalResult] = None
    modal_outcomes: set[int] = field(default_factory=set)
    compute_seconds: float = 0.0
