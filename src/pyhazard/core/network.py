"""
Interaction matrix construction for mutualistic networks.

Converts plant-animal biadjacency matrices (pollination layer ``B`` and
seed-dispersal layer ``S``) into the signed interaction matrices used by
the ecological model. Species are indexed plants first, then animals:

    [0, n_plants)                     plants
    [n_plants, n_plants + n_animals)  animals

Competition acts within each type and within each layer, among entities
that have at least one link in that layer. Mutualism acts across types
along every positive edge, scaled by the square root of the entity's
degree in that layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from pyhazard.core.constants import (
    DEFAULT_N_DISPERSERS,
    DEFAULT_N_PLANTS,
    DEFAULT_N_POLLINATORS,
)
from pyhazard.core.params import ConfigurationError, NetworkParams
from pyhazard.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BipartiteNetwork:
    """Two-layer plant-animal network.

    Attributes
    ----------
    B : np.ndarray, optional
        Pollination biadjacency matrix [plants, animals]
    S : np.ndarray, optional
        Seed dispersal biadjacency matrix [plants, animals]
    """

    B: Optional[np.ndarray] = None
    S: Optional[np.ndarray] = None

    def __post_init__(self):
        self.B = _as_biadjacency(self.B, "B")
        self.S = _as_biadjacency(self.S, "S")

    @property
    def layers(self) -> List[np.ndarray]:
        return [m for m in (self.B, self.S) if m is not None]

    @property
    def n_plants(self) -> int:
        return max((m.shape[0] for m in self.layers), default=0)

    @property
    def n_animals(self) -> int:
        return max((m.shape[1] for m in self.layers), default=0)


@dataclass
class InteractionMatrices:
    """Signed interaction matrices over the flattened species index."""

    Y_mut: np.ndarray
    Y_comp: np.ndarray
    n_species: int
    n_plants: int = 0
    n_animals: int = 0


@dataclass
class NetworkStats:
    """Summary counts for display."""

    n_plants: int
    n_animals: int
    n_total: int
    n_pollination_links: int
    n_dispersal_links: int


def _as_biadjacency(matrix, name: str) -> Optional[np.ndarray]:
    if matrix is None:
        return None
    try:
        arr = np.array(matrix, dtype=float)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a rectangular numeric matrix: {e}") from e
    if arr.ndim != 2:
        raise ConfigurationError(f"{name} must be 2D, got {arr.ndim}D")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ConfigurationError(f"{name} must not be empty, got shape {arr.shape}")
    return arr


def pad_matrix(
    matrix: Optional[np.ndarray], n_rows: int, n_cols: int
) -> Optional[np.ndarray]:
    """Zero-pad ``matrix`` to ``(n_rows, n_cols)``.

    Returns None when ``matrix`` is None. Entries outside the target shape
    are dropped.
    """
    if matrix is None:
        return None
    padded = np.zeros((n_rows, n_cols))
    r = min(n_rows, matrix.shape[0])
    c = min(n_cols, matrix.shape[1])
    padded[:r, :c] = matrix[:r, :c]
    return padded


def _add_competition(Y: np.ndarray, active: np.ndarray, offset: int, c: float) -> None:
    """Add ``c / max(n_active - 1, 1)`` between every pair of active entities."""
    n_active = int(active.sum())
    if n_active < 2:
        return
    strength = c / max(n_active - 1, 1)
    idx = np.flatnonzero(active) + offset
    block = np.full((n_active, n_active), strength)
    np.fill_diagonal(block, 0.0)
    Y[np.ix_(idx, idx)] += block


def _add_mutualism(Y: np.ndarray, layer: np.ndarray, n_plants: int, strength: float) -> None:
    """Add square-root degree normalised mutualism for every positive edge."""
    row_sum = layer.sum(axis=1)
    col_sum = layer.sum(axis=0)
    plants, animals = np.nonzero(layer > 0)
    for i, j in zip(plants, animals):
        w = layer[i, j]
        # Plant i benefits from animal j
        if row_sum[i] > 0:
            Y[i, n_plants + j] += strength * w / np.sqrt(row_sum[i])
        # Animal j benefits from plant i
        if col_sum[j] > 0:
            Y[n_plants + j, i] += strength * w / np.sqrt(col_sum[j])


def split_signed(Y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split a signed matrix into its positive and negative parts."""
    return np.maximum(Y, 0.0), np.minimum(Y, 0.0)


def build_interaction_matrix(
    network: BipartiteNetwork,
    params: Optional[NetworkParams] = None,
) -> InteractionMatrices:
    """Build interaction matrices from a two-layer bipartite network.

    Parameters
    ----------
    network : BipartiteNetwork
        Pollination (B) and/or seed dispersal (S) biadjacency matrices
    params : NetworkParams, optional
        Interaction strengths ``m`` (B), ``d`` (S) and ``c`` (competition)

    Returns
    -------
    InteractionMatrices
        ``Y_mut`` (>= 0), ``Y_comp`` (<= 0) and the species counts

    Raises
    ------
    ConfigurationError
        If neither B nor S is supplied

    Examples
    --------
    >>> net = BipartiteNetwork(B=[[1, 0], [0, 1]])
    >>> mats = build_interaction_matrix(net, NetworkParams(m=1.0, c=0.0))
    >>> mats.n_species
    4
    """
    if params is None:
        params = NetworkParams()
    if network.B is None and network.S is None:
        raise ConfigurationError(
            "At least one biadjacency matrix (B or S) must be provided"
        )

    n_plants = network.n_plants
    n_animals = network.n_animals
    n_total = n_plants + n_animals

    Y = np.zeros((n_total, n_total))
    competition_cells = np.zeros((n_total, n_total), dtype=bool)
    mutualism_cells = np.zeros((n_total, n_total), dtype=bool)

    layers = [
        (pad_matrix(network.B, n_plants, n_animals), params.m),
        (pad_matrix(network.S, n_plants, n_animals), params.d),
    ]

    for layer, strength in layers:
        if layer is None:
            continue
        edges = layer > 0
        plant_active = edges.any(axis=1)
        animal_active = edges.any(axis=0)

        before = Y.copy()
        _add_competition(Y, plant_active, 0, params.c)
        _add_competition(Y, animal_active, n_plants, params.c)
        competition_cells |= Y != before

        before = Y.copy()
        _add_mutualism(Y, layer, n_plants, strength)
        mutualism_cells |= Y != before

    mixed = int(np.count_nonzero(competition_cells & mutualism_cells))
    if mixed:
        logger.warning(
            f"{mixed} interaction cells received both competition and mutualism; "
            "keeping their net sign"
        )

    Y_mut, Y_comp = split_signed(Y)
    logger.debug(
        f"Built interaction matrix: {n_plants} plants, {n_animals} animals, "
        f"{np.count_nonzero(Y_mut)} mutualistic and "
        f"{np.count_nonzero(Y_comp)} competitive links"
    )

    return InteractionMatrices(
        Y_mut=Y_mut,
        Y_comp=Y_comp,
        n_species=n_total,
        n_plants=n_plants,
        n_animals=n_animals,
    )


def generate_interaction_matrices(
    n_species: int,
    mutualistic_strength: float,
    competition_strength: float,
) -> InteractionMatrices:
    """Synthetic ring network.

    Species ``i`` and ``i+1 (mod n)`` are mutualists with strength
    ``mutualistic_strength``; every other off-diagonal pair competes with
    ``competition_strength``. No degree normalisation is applied.
    """
    if n_species < 1:
        raise ConfigurationError(f"n_species must be >= 1, got {n_species}")

    idx = np.arange(n_species)
    ring = np.zeros((n_species, n_species), dtype=bool)
    ring[idx, (idx + 1) % n_species] = True
    ring |= ring.T

    Y = np.where(ring, mutualistic_strength, competition_strength).astype(float)
    np.fill_diagonal(Y, 0.0)

    Y_mut, Y_comp = split_signed(Y)
    return InteractionMatrices(Y_mut=Y_mut, Y_comp=Y_comp, n_species=n_species)


def default_network() -> BipartiteNetwork:
    """Built-in three-plant network with separate pollinators and dispersers.

    Animals 0-2 are pollinators (B layer), animals 3-5 are seed dispersers
    (S layer). Each plant has two partners in each layer.
    """
    n_plants = DEFAULT_N_PLANTS
    n_animals = DEFAULT_N_POLLINATORS + DEFAULT_N_DISPERSERS

    B = np.zeros((n_plants, n_animals))
    S = np.zeros((n_plants, n_animals))

    for p, (a1, a2) in enumerate([(0, 1), (1, 2), (0, 2)]):
        B[p, a1] = B[p, a2] = 1.0
        S[p, DEFAULT_N_POLLINATORS + a1] = 1.0
        S[p, DEFAULT_N_POLLINATORS + a2] = 1.0

    return BipartiteNetwork(B=B, S=S)


def network_stats(network: BipartiteNetwork) -> NetworkStats:
    """Count species and links in each layer."""
    n_pollination = int(np.count_nonzero(network.B > 0)) if network.B is not None else 0
    n_dispersal = int(np.count_nonzero(network.S > 0)) if network.S is not None else 0
    return NetworkStats(
        n_plants=network.n_plants,
        n_animals=network.n_animals,
        n_total=network.n_plants + network.n_animals,
        n_pollination_links=n_pollination,
        n_dispersal_links=n_dispersal,
    )


def species_labels(n_plants: int, n_animals: int) -> List[str]:
    """Display labels: P1..Pn for plants, A1..An for animals."""
    return [f"P{i + 1}" for i in range(n_plants)] + [
        f"A{j + 1}" for j in range(n_animals)
    ]
