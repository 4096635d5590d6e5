"""
Shared fixtures for PyHazard tests.
"""

import numpy as np
import pytest

from pyhazard.core.params import EcologyParams


class ScriptedRandom:
    """Random source returning a fixed sequence of uniforms."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        if not self.values:
            raise AssertionError("random() called more often than scripted")
        self.calls += 1
        return self.values.pop(0)


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def isolated_params():
    """Two non-interacting species with r=0.1."""
    return EcologyParams(
        Y_mut=np.zeros((2, 2)),
        Y_comp=np.zeros((2, 2)),
        r=np.array([0.1, 0.1]),
        h=np.array([0.5, 0.5]),
    )


@pytest.fixture
def pair_params():
    """Plant-animal pairs from B=[[1,0],[0,1]] with m=1, c=0, r=0.2, h=0.5."""
    Y_mut = np.zeros((4, 4))
    Y_mut[0, 2] = Y_mut[2, 0] = 1.0
    Y_mut[1, 3] = Y_mut[3, 1] = 1.0
    return EcologyParams(
        Y_mut=Y_mut,
        Y_comp=np.zeros((4, 4)),
        r=np.full(4, 0.2),
        h=np.full(4, 0.5),
    )
