"""Exceptions raised by the probability engine."""

from __future__ import annotations

from typing import Optional


class DiceCalculatorError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str = "An error occurred") -> None:
        self.message = message
        super().__init__(self.message)


class InvalidParameterError(DiceCalculatorError, ValueError):
    """A calculation parameter failed validation before any work started."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """Initialise the error.

        Parameters
        ----------
        message:
            Human readable reason.
        field:
            Name of the offending parameter, when known.
        """

        self.field = field
        super().__init__(message)


class CalculationCancelled(DiceCalculatorError):
    """The caller flipped its cancellation token while work was in progress.

    Only raised inside the engine; public entry points turn it into an absent
    result.
    """

    def __init__(self, stage: str = "calculation") -> None:
        self.stage = stage
        super().__init__(f"{stage} cancelled")
