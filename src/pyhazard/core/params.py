"""
Parameter data structures for PyHazard.

This module contains the configuration containers shared by the network
builder, the ecological model and the simulation engine, together with
the validation helpers that guard them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from pyhazard.core.constants import (
    DEFAULT_COMPETITION_STRENGTH,
    DEFAULT_DISPERSAL_STRENGTH,
    DEFAULT_EXTINCTION_THRESHOLD,
    DEFAULT_HALF_SATURATION,
    DEFAULT_HURRICANE_CATEGORIES,
    DEFAULT_HURRICANE_RATE,
    DEFAULT_MUTUALISTIC_STRENGTH,
    DEFAULT_TIME_STEP,
)


class ConfigurationError(ValueError):
    """Raised when a network or simulation configuration cannot be used."""


@dataclass(frozen=True)
class HurricaneCategory:
    """A single hurricane category.

    Attributes
    ----------
    label : str
        Display name (e.g. "Category 1")
    probability : float
        Probability that a hurricane falls in this category
    damage : float
        Fraction of every population destroyed (0-1)
    """

    label: str
    probability: float
    damage: float


CategoryLike = Union[HurricaneCategory, Tuple[str, float, float]]


def as_category(category: CategoryLike) -> HurricaneCategory:
    """Coerce a ``(label, probability, damage)`` tuple to HurricaneCategory."""
    if isinstance(category, HurricaneCategory):
        return category
    label, probability, damage = category
    return HurricaneCategory(str(label), float(probability), float(damage))


def check_categories(categories: Iterable[CategoryLike]) -> Tuple[HurricaneCategory, ...]:
    """Validate a category table.

    Parameters
    ----------
    categories : iterable
        HurricaneCategory objects or ``(label, probability, damage)`` tuples

    Returns
    -------
    tuple of HurricaneCategory

    Raises
    ------
    ConfigurationError
        If a probability is negative or a damage fraction lies outside [0, 1]
    """
    checked = tuple(as_category(c) for c in categories)
    for cat in checked:
        if not np.isfinite(cat.probability) or cat.probability < 0:
            raise ConfigurationError(
                f"Category '{cat.label}' has invalid probability {cat.probability}"
            )
        if not 0.0 <= cat.damage <= 1.0:
            raise ConfigurationError(
                f"Category '{cat.label}' damage must be in [0, 1], got {cat.damage}"
            )
    return checked


@dataclass(frozen=True)
class NetworkParams:
    """Interaction strengths for the bipartite network builder.

    Attributes
    ----------
    m : float
        Mutualistic strength of pollination links (B layer)
    d : float
        Mutualistic strength of seed dispersal links (S layer)
    c : float
        Competition strength (negative)
    """

    m: float = DEFAULT_MUTUALISTIC_STRENGTH
    d: float = DEFAULT_DISPERSAL_STRENGTH
    c: float = DEFAULT_COMPETITION_STRENGTH


@dataclass
class ModelConfig:
    """Configuration for building ecological parameters."""

    n_species: int
    mutualistic_strength: float = DEFAULT_MUTUALISTIC_STRENGTH
    dispersal_strength: float = DEFAULT_DISPERSAL_STRENGTH
    competition_strength: float = DEFAULT_COMPETITION_STRENGTH
    half_saturation: float = DEFAULT_HALF_SATURATION

    def __post_init__(self):
        if self.n_species < 1:
            raise ConfigurationError(f"n_species must be >= 1, got {self.n_species}")
        if self.half_saturation < 0:
            raise ConfigurationError(
                f"half_saturation must be >= 0, got {self.half_saturation}"
            )


def _frozen_array(values, name: str, ndim: int) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.ndim != ndim:
        raise ConfigurationError(f"{name} must be {ndim}D, got {arr.ndim}D")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True)
class EcologyParams:
    """Parameter bundle consumed by the vector field.

    Attributes
    ----------
    Y_mut : np.ndarray
        Mutualistic interaction matrix [n_species, n_species], >= 0
    Y_comp : np.ndarray
        Competitive interaction matrix [n_species, n_species], <= 0
    r : np.ndarray
        Intrinsic growth rates [n_species]
    h : np.ndarray
        Half-saturation constants [n_species]

    All arrays are copied on construction and marked read-only.
    """

    Y_mut: np.ndarray
    Y_comp: np.ndarray
    r: np.ndarray
    h: np.ndarray

    def __post_init__(self):
        """Coerce to read-only float arrays and validate shapes."""
        Y_mut = _frozen_array(self.Y_mut, "Y_mut", 2)
        Y_comp = _frozen_array(self.Y_comp, "Y_comp", 2)
        r = _frozen_array(self.r, "r", 1)
        h = _frozen_array(self.h, "h", 1)

        n = r.shape[0]
        if Y_mut.shape != (n, n):
            raise ConfigurationError(f"Y_mut shape {Y_mut.shape} != ({n}, {n})")
        if Y_comp.shape != (n, n):
            raise ConfigurationError(f"Y_comp shape {Y_comp.shape} != ({n}, {n})")
        if h.shape != (n,):
            raise ConfigurationError(f"h length ({h.shape[0]}) != n_species ({n})")

        object.__setattr__(self, "Y_mut", Y_mut)
        object.__setattr__(self, "Y_comp", Y_comp)
        object.__setattr__(self, "r", r)
        object.__setattr__(self, "h", h)

    @property
    def n_species(self) -> int:
        return self.r.shape[0]


# Accepted aliases for update_config(); maps UI-style names onto fields
CONFIG_ALIASES = {
    "hurricaneRate": "hurricane_rate",
    "hurricaneCategories": "hurricane_categories",
    "extinctionThreshold": "extinction_threshold",
    "extinctionThresholdFraction": "extinction_threshold",
    "extinction_threshold_fraction": "extinction_threshold",
    "timeStep": "time_step",
}


@dataclass(frozen=True)
class SimulationConfig:
    """Engine configuration.

    Attributes
    ----------
    hurricane_rate : float
        Mean number of hurricanes per time unit (lambda), >= 0
    hurricane_categories : tuple of HurricaneCategory
        Ordered category table; probabilities expected to sum to 1
    extinction_threshold : float
        Fraction of the initial population below which a species is extinct
    time_step : float
        RK4 step size, > 0
    """

    hurricane_rate: float = DEFAULT_HURRICANE_RATE
    hurricane_categories: Sequence[CategoryLike] = field(
        default_factory=lambda: tuple(
            HurricaneCategory(*c) for c in DEFAULT_HURRICANE_CATEGORIES
        )
    )
    extinction_threshold: float = DEFAULT_EXTINCTION_THRESHOLD
    time_step: float = DEFAULT_TIME_STEP

    def __post_init__(self):
        object.__setattr__(
            self, "hurricane_categories", check_categories(self.hurricane_categories)
        )
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError for out-of-range values."""
        if not np.isfinite(self.time_step) or self.time_step <= 0:
            raise ConfigurationError(f"time_step must be > 0, got {self.time_step}")
        if not np.isfinite(self.hurricane_rate) or self.hurricane_rate < 0:
            raise ConfigurationError(
                f"hurricane_rate must be >= 0, got {self.hurricane_rate}"
            )
        if not 0.0 <= self.extinction_threshold <= 1.0:
            raise ConfigurationError(
                f"extinction_threshold must be in [0, 1], got {self.extinction_threshold}"
            )
        if self.hurricane_rate > 0 and not self.hurricane_categories:
            raise ConfigurationError(
                "hurricane_categories must not be empty when hurricane_rate > 0"
            )

    def merged(self, **changes) -> SimulationConfig:
        """Return a new validated config with ``changes`` applied.

        Keys may use either the field names or their camelCase aliases
        (``hurricaneRate``, ``timeStep``...).
        """
        known = {f.name for f in fields(self)}
        resolved = {}
        for key, value in changes.items():
            name = CONFIG_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown configuration option '{key}'")
            resolved[name] = value
        return replace(self, **resolved)


def check_populations(populations, n_species: Optional[int] = None) -> np.ndarray:
    """Validate an initial population vector and return a float copy."""
    arr = np.array(populations, dtype=float)
    if arr.ndim != 1:
        raise ConfigurationError(f"populations must be 1D, got {arr.ndim}D")
    if n_species is not None and arr.shape[0] != n_species:
        raise ConfigurationError(
            f"populations length ({arr.shape[0]}) != n_species ({n_species})"
        )
    if np.any(arr < 0) or not np.all(np.isfinite(arr)):
        raise ConfigurationError("populations must be finite and non-negative")
    return arr

