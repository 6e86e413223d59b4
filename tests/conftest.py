"""Shared fixtures for the simulation tests."""

from __future__ import annotations

import numpy as np
import pytest

from deffdred.game import Game


class StubRng:
    """Deterministic stand-in for numpy's Generator.

    ``integers`` hands out queued values (0 once the queue runs dry),
    ``permutation`` returns the identity order.
    """

    def __init__(self, values=()):
        self.values = list(values)

    def integers(self, low, high=None):
        return self.values.pop(0) if self.values else 0

    def permutation(self, n):
        return np.arange(n)


@pytest.fixture
def stub_rng():
    return StubRng()


@pytest.fixture
def empty_game():
    """A game with no starting enemies and no scripted bullets."""
    return Game(seed=0, initial_enemies=False)
