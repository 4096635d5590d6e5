"""
Event-driven simulation engine with hurricane perturbations.

Continuous RK4 integration of the ecological model is interleaved with
discrete hurricane events. Each call to :func:`advance` (or
:meth:`SimulationEngine.step`) covers one window of time:

1. draw an exponential waiting time; keep the event only if it falls
   inside the window
2. integrate up to the event (or to the end of the window)
3. if an event occurred, draw its category, damage every population and
   mark species that drop below their extinction threshold

State is held in a :class:`SimulationState` record. :func:`advance` is a
pure transition that returns a new record. :class:`SimulationEngine` owns
its record and advances it in place, so a step costs the same however
long the history is; its accessors return copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from pyhazard.core.ecology import eco_dynamics_type2
from pyhazard.core.hurricanes import RandomSource, draw_category, draw_waiting_time
from pyhazard.core.ode import solve_ode
from pyhazard.core.params import (
    ConfigurationError,
    EcologyParams,
    SimulationConfig,
    check_populations,
)
from pyhazard.logger import get_logger

logger = get_logger(__name__)

# Leftovers shorter than this fraction of a window are not stepped
_SNAP = 1e-9


@dataclass(frozen=True)
class HurricaneEvent:
    """A hurricane that struck the community."""

    time: float
    category: str
    damage: float


@dataclass
class SimulationState:
    """Mutable simulation state.

    Attributes
    ----------
    time : float
        Current simulation time
    populations : np.ndarray
        Current abundances [n_species]
    history_t : list of float
        Sample times starting at 0. Increasing, except that a hurricane
        arriving with zero waiting time is appended at the current time
        so the sample before it is kept.
    history_y : list of np.ndarray
        Population snapshots matching ``history_t``
    hurricanes : list of HurricaneEvent
        Applied hurricanes in time order
    extinct : frozenset of int
        Indices of species that went extinct
    """

    time: float
    populations: np.ndarray
    history_t: List[float] = field(default_factory=list)
    history_y: List[np.ndarray] = field(default_factory=list)
    hurricanes: List[HurricaneEvent] = field(default_factory=list)
    extinct: FrozenSet[int] = frozenset()

    @classmethod
    def initial(cls, populations: np.ndarray) -> SimulationState:
        """State at t=0 with a single history sample."""
        pop = np.array(populations, dtype=float)
        return cls(
            time=0.0,
            populations=pop,
            history_t=[0.0],
            history_y=[pop.copy()],
        )

    def copy(self) -> SimulationState:
        """Deep copy; no arrays or lists are shared with ``self``."""
        return SimulationState(
            time=self.time,
            populations=self.populations.copy(),
            history_t=list(self.history_t),
            history_y=[y.copy() for y in self.history_y],
            hurricanes=list(self.hurricanes),
            extinct=frozenset(self.extinct),
        )


@dataclass
class SimulationSummary:
    """Snapshot of headline numbers for status displays."""

    time: float
    n_hurricanes: int
    n_extinct: int
    n_species: int
    total_population: float

    @property
    def n_surviving(self) -> int:
        return self.n_species - self.n_extinct


def extinction_thresholds(initial_populations: np.ndarray, fraction: float) -> np.ndarray:
    """Per-species absolute extinction thresholds."""
    return np.asarray(initial_populations, dtype=float) * fraction


def apply_hurricane(
    populations: np.ndarray,
    damage: float,
    thresholds: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Apply hurricane damage to every species.

    Parameters
    ----------
    populations : np.ndarray
        Pre-hurricane abundances
    damage : float
        Fraction of each population destroyed
    thresholds : np.ndarray
        Absolute extinction thresholds

    Returns
    -------
    new_populations : np.ndarray
        Post-hurricane abundances; values below threshold are set to 0
    extinct_idx : np.ndarray
        Indices of species that fell below their threshold
    """
    new_pop = np.asarray(populations, dtype=float) * (1.0 - damage)
    below = new_pop < thresholds
    new_pop[below] = 0.0
    return new_pop, np.flatnonzero(below)


def advance(
    state: SimulationState,
    duration: float,
    params: EcologyParams,
    config: SimulationConfig,
    thresholds: np.ndarray,
    rng: RandomSource,
    deriv: Callable[..., np.ndarray] = eco_dynamics_type2,
) -> Tuple[SimulationState, Optional[float]]:
    """Advance the simulation by ``duration``.

    ``state`` is not modified.

    Parameters
    ----------
    state : SimulationState
        Current state
    duration : float
        Length of the window; ``<= 0`` integrates nothing
    params : EcologyParams
        Model parameters
    config : SimulationConfig
        Hurricane regime, extinction threshold and time step
    thresholds : np.ndarray
        Absolute extinction thresholds
    rng : RandomSource
        Random source for waiting times and categories
    deriv : callable
        Vector field ``deriv(t, N, params)``

    Returns
    -------
    new_state : SimulationState
    event_time : float or None
        Time of the hurricane applied in this window, if any
    """
    new_state = state.copy()
    event_time = _advance_in_place(
        new_state, duration, params, config, thresholds, rng, deriv
    )
    return new_state, event_time


def _advance_in_place(
    state: SimulationState,
    duration: float,
    params: EcologyParams,
    config: SimulationConfig,
    thresholds: np.ndarray,
    rng: RandomSource,
    deriv: Callable[..., np.ndarray],
) -> Optional[float]:
    """Body of :func:`advance`; appends to ``state`` instead of copying it.

    When the waiting time is zero no integration happens and the
    post-shock sample is appended at the current time, after the sample
    already recorded there.
    """
    start_time = state.time
    end_time = start_time + duration

    event_time = None
    if config.hurricane_rate > 0:
        event_time = start_time + draw_waiting_time(config.hurricane_rate, rng)
        if event_time > end_time:
            event_time = None

    actual_end = event_time if event_time is not None else end_time

    integrated = actual_end > start_time
    if integrated:
        times, states = solve_ode(
            deriv,
            state.populations,
            start_time,
            actual_end,
            config.time_step,
            args=(params,),
        )
        # First sample duplicates the current state
        state.history_t.extend(float(t) for t in times[1:])
        state.history_y.extend(y.copy() for y in states[1:])
        state.time = float(actual_end)
        state.populations = states[-1].copy()

        if not np.all(np.isfinite(state.populations)):
            logger.warning(
                f"Non-finite populations at t={state.time:.4f}; "
                "check interaction strengths and half-saturation"
            )

    if event_time is not None:
        category = draw_category(config.hurricane_categories, rng)
        new_pop, below = apply_hurricane(
            state.populations, category.damage, thresholds
        )
        newly_extinct = sorted(set(below.tolist()) - state.extinct)

        state.populations = new_pop
        state.extinct = state.extinct | frozenset(below.tolist())
        state.time = float(event_time)
        state.hurricanes.append(
            HurricaneEvent(float(event_time), category.label, category.damage)
        )
        # The integration segment ends on the event time; replace that
        # sample with the post-shock one
        if integrated:
            state.history_y[-1] = new_pop.copy()
        else:
            state.history_t.append(float(event_time))
            state.history_y.append(new_pop.copy())

        logger.info(
            f"{category.label} hurricane at t={event_time:.3f} "
            f"(damage {category.damage:.0%})"
        )
        for idx in newly_extinct:
            logger.info(f"Species {idx} went extinct at t={event_time:.3f}")

    return event_time


class SimulationEngine:
    """Stateful driver around :func:`advance`.

    Parameters
    ----------
    params : EcologyParams
        Model parameters
    initial_populations : array-like
        Abundances at t=0
    config : SimulationConfig, optional
        Hurricane regime and integration settings
    rng : numpy.random.Generator, optional
        Random source. Takes precedence over ``seed``.
    seed : int, optional
        Seed for a new ``numpy.random.default_rng``
    deriv : callable, optional
        Vector field, defaults to :func:`eco_dynamics_type2`

    Examples
    --------
    >>> engine = SimulationEngine(params, N0, SimulationConfig(), seed=1)
    >>> while engine.time < 50:
    ...     engine.step(0.01)
    >>> engine.hurricanes
    """

    def __init__(
        self,
        params: EcologyParams,
        initial_populations: Sequence[float],
        config: Optional[SimulationConfig] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        deriv: Callable[..., np.ndarray] = eco_dynamics_type2,
    ):
        self._params = params
        self._config = config if config is not None else SimulationConfig()
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._deriv = deriv

        self._initial = check_populations(initial_populations, params.n_species)
        self._thresholds = extinction_thresholds(
            self._initial, self._config.extinction_threshold
        )
        self._state = SimulationState.initial(self._initial)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def step(self, duration: float) -> Optional[float]:
        """Advance by ``duration``; return the hurricane time or None."""
        if not np.isfinite(duration):
            raise ConfigurationError(f"duration must be finite, got {duration}")
        return _advance_in_place(
            self._state,
            duration,
            self._params,
            self._config,
            self._thresholds,
            self._rng,
            self._deriv,
        )

    def run(self, duration: float, step_size: Optional[float] = None) -> List[float]:
        """Call :meth:`step` repeatedly until ``duration`` has elapsed.

        Parameters
        ----------
        duration : float
            Total time to simulate from the current time
        step_size : float, optional
            Window passed to each :meth:`step` call. Defaults to the
            configured time step.

        Returns
        -------
        list of float
            Hurricane times that occurred during the run
        """
        if step_size is None:
            step_size = self._config.time_step
        if not step_size > 0:
            raise ConfigurationError(f"step_size must be > 0, got {step_size}")
        if not np.isfinite(duration):
            raise ConfigurationError(f"duration must be finite, got {duration}")

        target = self._state.time + duration
        tol = _SNAP * step_size
        events = []
        while target - self._state.time > tol:
            remaining = target - self._state.time
            # Fold rounding leftovers into the last window
            window = remaining if remaining < step_size + tol else step_size
            event_time = self.step(window)
            if event_time is not None:
                events.append(event_time)
        return events

    def reset(self, initial_populations: Optional[Sequence[float]] = None) -> None:
        """Return to t=0, optionally with new initial populations.

        Thresholds are recomputed from the initial populations and the
        current extinction threshold fraction.
        """
        if initial_populations is not None:
            self._initial = check_populations(
                initial_populations, self._params.n_species
            )
        self._thresholds = extinction_thresholds(
            self._initial, self._config.extinction_threshold
        )
        self._state = SimulationState.initial(self._initial)

    def update_params(self, params: EcologyParams) -> None:
        """Swap model parameters without touching time or populations."""
        if params.n_species != self._params.n_species:
            raise ConfigurationError(
                f"params have {params.n_species} species, "
                f"engine has {self._params.n_species}"
            )
        self._params = params

    def update_config(self, **changes) -> SimulationConfig:
        """Merge configuration changes; effective from the next step.

        Extinction thresholds already computed are kept until
        :meth:`reset`.
        """
        self._config = self._config.merged(**changes)
        return self._config

    # ------------------------------------------------------------------
    # Accessors (all return copies)
    # ------------------------------------------------------------------

    @property
    def time(self) -> float:
        return self._state.time

    @property
    def populations(self) -> np.ndarray:
        return self._state.populations.copy()

    @property
    def history(self) -> Tuple[np.ndarray, np.ndarray]:
        """Sample times [n_samples] and populations [n_samples, n_species]."""
        return (
            np.array(self._state.history_t),
            np.array(self._state.history_y),
        )

    @property
    def hurricanes(self) -> List[HurricaneEvent]:
        return list(self._state.hurricanes)

    @property
    def extinct_species(self) -> FrozenSet[int]:
        return frozenset(self._state.extinct)

    @property
    def initial_populations(self) -> np.ndarray:
        return self._initial.copy()

    @property
    def thresholds(self) -> np.ndarray:
        return self._thresholds.copy()

    @property
    def params(self) -> EcologyParams:
        return self._params

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def n_species(self) -> int:
        return self._params.n_species

    def get_state(self) -> SimulationState:
        """Full copy of the current state."""
        return self._state.copy()

    def summary(self) -> SimulationSummary:
        return SimulationSummary(
            time=self._state.time,
            n_hurricanes=len(self._state.hurricanes),
            n_extinct=len(self._state.extinct),
            n_species=self.n_species,
            total_population=float(np.sum(self._state.populations)),
        )

    def history_frame(self, labels: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """History as a DataFrame with a ``Time`` column plus one per species."""
        if labels is None:
            labels = [f"Species{i + 1}" for i in range(self.n_species)]
        times, pops = self.history
        df = pd.DataFrame(pops, columns=list(labels))
        df.insert(0, "Time", times)
        return df

    def hurricane_frame(self) -> pd.DataFrame:
        """Hurricane log as a DataFrame (Time, Category, Damage)."""
        return pd.DataFrame(
            [(h.time, h.category, h.damage) for h in self._state.hurricanes],
            columns=["Time", "Category", "Damage"],
        )

    def __repr__(self) -> str:
        s = self.summary()
        return (
            f"SimulationEngine(t={s.time:.3f}, species={s.n_species}, "
            f"hurricanes={s.n_hurricanes}, extinct={s.n_extinct})"
        )
