"""
Lotka-Volterra mutualistic model with Type II functional response.

For each species i with N_i > 0:

    dN_i/dt = N_i * (r_i - N_i + sum_j Yc_ij N_j + M_i)

    M_i = m_i / (1 + h_i * m_i),   m_i = sum_j Ym_ij N_j

Species with N_i <= 0 have zero derivative, so extinction is absorbing.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from pyhazard.core.constants import (
    GROWTH_RATE_MAX,
    GROWTH_RATE_MIN,
    INITIAL_POP_MAX,
    INITIAL_POP_MIN,
)
from pyhazard.core.network import InteractionMatrices, generate_interaction_matrices
from pyhazard.core.params import ConfigurationError, EcologyParams, ModelConfig


def type2_response(mut_raw: np.ndarray, h: np.ndarray) -> np.ndarray:
    """Saturating (Monod) response ``x / (1 + h x)``."""
    return mut_raw / (1.0 + h * mut_raw)


def eco_dynamics_type2(t: float, N: np.ndarray, params: EcologyParams) -> np.ndarray:
    """Derivative of the population vector.

    Parameters
    ----------
    t : float
        Time (unused; kept for integrator compatibility)
    N : np.ndarray
        Population vector [n_species]
    params : EcologyParams
        Interaction matrices, growth rates and half-saturation constants

    Returns
    -------
    np.ndarray
        dN/dt [n_species]
    """
    N = np.asarray(N, dtype=float)
    M = type2_response(params.Y_mut @ N, params.h)
    comp_sum = params.Y_comp @ N
    dN = N * (params.r - N + comp_sum + M)
    return np.where(N > 0, dN, 0.0)


def initialize_growth_rates(n_species: int, rng: np.random.Generator) -> np.ndarray:
    """Growth rates drawn uniformly from [GROWTH_RATE_MIN, GROWTH_RATE_MAX)."""
    return GROWTH_RATE_MIN + rng.random(n_species) * (GROWTH_RATE_MAX - GROWTH_RATE_MIN)


def initialize_populations(n_species: int, rng: np.random.Generator) -> np.ndarray:
    """Initial abundances drawn uniformly from [INITIAL_POP_MIN, INITIAL_POP_MAX)."""
    return INITIAL_POP_MIN + rng.random(n_species) * (INITIAL_POP_MAX - INITIAL_POP_MIN)


def create_ecology_params(
    config: ModelConfig,
    rng: Optional[np.random.Generator] = None,
    interactions: Optional[InteractionMatrices] = None,
) -> Tuple[EcologyParams, np.ndarray]:
    """Create model parameters and a random initial population.

    Parameters
    ----------
    config : ModelConfig
        Species count and interaction strengths
    rng : np.random.Generator, optional
        Random source for growth rates and initial populations
    interactions : InteractionMatrices, optional
        Matrices from a custom network. When omitted a ring network is
        generated from ``config``.

    Returns
    -------
    params : EcologyParams
    initial_population : np.ndarray
    """
    if rng is None:
        rng = np.random.default_rng()

    if interactions is None:
        interactions = generate_interaction_matrices(
            config.n_species,
            config.mutualistic_strength,
            config.competition_strength,
        )
    elif interactions.n_species != config.n_species:
        raise ConfigurationError(
            f"Network has {interactions.n_species} species but config "
            f"expects {config.n_species}"
        )

    n = config.n_species
    r = initialize_growth_rates(n, rng)
    h = np.full(n, float(config.half_saturation))
    initial_population = initialize_populations(n, rng)

    params = EcologyParams(
        Y_mut=interactions.Y_mut,
        Y_comp=interactions.Y_comp,
        r=r,
        h=h,
    )
    return params, initial_population
