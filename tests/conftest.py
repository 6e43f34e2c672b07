"""Shared fixtures for the dice probability tests."""

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from dice_core import build_distribution, set_yield_interval  # noqa: E402
from dice_core.data import YIELD_INTERVAL_DEFAULT  # noqa: E402


class CountdownToken:
    """Token that reports cancellation once it has been checked ``limit`` times."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.checks = 0

    @property
    def cancelled(self) -> bool:
        self.checks += 1
        return self.checks > self.limit


@pytest.fixture(autouse=True)
def reset_yield_interval():
    """Restore the default yield interval after every test."""
    yield
    set_yield_interval(YIELD_INTERVAL_DEFAULT)


@pytest.fixture
def two_d6():
    """PMF of 2d6."""
    return build_distribution(2, 6, 0)


@pytest.fixture
def countdown_token():
    """Factory for tokens that flip to cancelled after a number of checks."""
    return CountdownToken
