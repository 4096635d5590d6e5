"""
Stochastic hurricane generator.

Hurricanes arrive as a Poisson process with rate ``lambda``; the waiting
time to the next event is exponential. Each event falls in one category
drawn from a probability mass function over an ordered category table.

All draws take an explicit random source so that runs are reproducible.
Any object with a ``random()`` method returning a float in [0, 1) works,
``numpy.random.Generator`` included.
"""

from __future__ import annotations

from typing import Iterable, List, Protocol, Sequence, Tuple

import numpy as np

from pyhazard.core.constants import DEFAULT_HURRICANE_CATEGORIES
from pyhazard.core.params import CategoryLike, HurricaneCategory, as_category


class RandomSource(Protocol):
    def random(self) -> float: ...


def draw_waiting_time(rate: float, rng: RandomSource) -> float:
    """Exponential waiting time ``-ln(1 - U) / rate``.

    Raises
    ------
    ValueError
        If ``rate <= 0`` (no events can be scheduled)
    """
    if rate <= 0:
        raise ValueError(f"rate must be > 0 to draw a waiting time, got {rate}")
    u = float(rng.random())
    return -np.log1p(-u) / rate


def draw_category(
    categories: Sequence[CategoryLike], rng: RandomSource
) -> HurricaneCategory:
    """Draw a category from the ordered table.

    Returns the first category whose cumulative probability is ``>= U``.
    If rounding leaves the cumulative sum short of ``U`` the last category
    is returned.
    """
    if len(categories) == 0:
        raise ValueError("categories must not be empty")

    u = float(rng.random())
    cum_prob = 0.0
    for cat in categories:
        cat = as_category(cat)
        cum_prob += cat.probability
        if u <= cum_prob:
            return cat

    return as_category(categories[-1])


def normalize_categories(
    categories: Iterable[CategoryLike],
) -> Tuple[HurricaneCategory, ...]:
    """Rescale probabilities so they sum to 1.

    When every probability is zero, each category gets an equal share.
    """
    cats = [as_category(c) for c in categories]
    if not cats:
        return ()
    total = sum(c.probability for c in cats)
    if total <= 0:
        share = 1.0 / len(cats)
        return tuple(HurricaneCategory(c.label, share, c.damage) for c in cats)
    return tuple(
        HurricaneCategory(c.label, c.probability / total, c.damage) for c in cats
    )


def default_categories() -> List[HurricaneCategory]:
    """Saffir-Simpson style default table (Category 1-3)."""
    return [HurricaneCategory(*c) for c in DEFAULT_HURRICANE_CATEGORIES]
