"""
Tests for interaction matrix construction.
"""

import logging

import numpy as np
import pytest

from pyhazard.core.network import (
    BipartiteNetwork,
    build_interaction_matrix,
    default_network,
    generate_interaction_matrices,
    network_stats,
    pad_matrix,
    species_labels,
)
from pyhazard.core.params import ConfigurationError, NetworkParams


def assert_sign_partition(Y_mut, Y_comp):
    assert np.all(Y_mut >= 0)
    assert np.all(Y_comp <= 0)
    assert not np.any((Y_mut != 0) & (Y_comp != 0))


class TestBipartiteNetwork:
    """Test network container."""

    def test_dimensions_from_largest_layer(self):
        """Plant and animal counts are the max over layers."""
        net = BipartiteNetwork(B=np.ones((2, 3)), S=np.ones((3, 1)))
        assert net.n_plants == 3
        assert net.n_animals == 3

    def test_accepts_nested_lists(self):
        net = BipartiteNetwork(B=[[1, 0], [0, 1]])
        assert isinstance(net.B, np.ndarray)
        assert net.S is None

    def test_ragged_rejected(self):
        with pytest.raises(ConfigurationError):
            BipartiteNetwork(B=[[1, 0], [1]])

    def test_empty_rejected(self):
        with pytest.raises(ConfigurationError, match="empty"):
            BipartiteNetwork(B=np.zeros((0, 3)))


class TestPadMatrix:
    """Test zero padding."""

    def test_pads_with_zeros(self):
        padded = pad_matrix(np.array([[1.0, 2.0]]), 2, 3)
        assert padded.shape == (2, 3)
        assert np.array_equal(padded, [[1, 2, 0], [0, 0, 0]])

    def test_none_passthrough(self):
        assert pad_matrix(None, 2, 2) is None


class TestBuildInteractionMatrix:
    """Test the bipartite builder."""

    def test_requires_a_layer(self):
        """Neither B nor S is a configuration error."""
        with pytest.raises(ConfigurationError, match="At least one"):
            build_interaction_matrix(BipartiteNetwork(), NetworkParams())

    def test_diagonal_pairs(self):
        """B = I gives two isolated plant-animal pairs."""
        net = BipartiteNetwork(B=[[1, 0], [0, 1]])
        mats = build_interaction_matrix(net, NetworkParams(m=1.0, d=0.0, c=0.0))

        assert mats.n_species == 4
        assert mats.n_plants == 2
        assert mats.n_animals == 2

        expected = np.zeros((4, 4))
        expected[0, 2] = expected[2, 0] = 1.0
        expected[1, 3] = expected[3, 1] = 1.0
        assert np.allclose(mats.Y_mut, expected)
        assert np.allclose(mats.Y_comp, 0.0)

    def test_competition_within_type(self):
        """Active plants compete with each other; so do active animals."""
        net = BipartiteNetwork(B=[[1, 0], [0, 1]])
        mats = build_interaction_matrix(net, NetworkParams(m=1.0, c=-0.1))

        assert mats.Y_comp[0, 1] == pytest.approx(-0.1)
        assert mats.Y_comp[1, 0] == pytest.approx(-0.1)
        assert mats.Y_comp[2, 3] == pytest.approx(-0.1)
        # No competition across types
        assert mats.Y_comp[0, 2] == 0.0
        assert np.all(np.diag(mats.Y_comp) == 0)

    def test_competition_scaled_by_active_count(self):
        """Strength is c / (n_active - 1)."""
        B = np.array([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
        mats = build_interaction_matrix(BipartiteNetwork(B=B), NetworkParams(c=-0.2))
        assert mats.Y_comp[0, 1] == pytest.approx(-0.1)
        assert mats.Y_comp[0, 2] == pytest.approx(-0.1)

    def test_inactive_species_do_not_compete(self):
        """A plant without links is excluded from competition."""
        B = np.array([[1, 1], [0, 0], [1, 0]])
        mats = build_interaction_matrix(BipartiteNetwork(B=B), NetworkParams(c=-0.1))
        assert mats.Y_comp[0, 2] == pytest.approx(-0.1)
        assert np.all(mats.Y_comp[1, :] == 0)
        assert np.all(mats.Y_comp[:, 1] == 0)

    def test_competition_accumulates_across_layers(self):
        """Plants active in both layers compete once per layer."""
        B = np.array([[1, 0], [0, 1]])
        S = np.array([[1, 0], [0, 1]])
        mats = build_interaction_matrix(
            BipartiteNetwork(B=B, S=S), NetworkParams(m=0.5, d=0.5, c=-0.1)
        )
        assert mats.Y_comp[0, 1] == pytest.approx(-0.2)

    def test_sqrt_degree_normalisation(self):
        """A generalist plant gets m * w / sqrt(degree) from each partner."""
        B = np.array([[1.0, 1.0, 1.0, 1.0]])
        mats = build_interaction_matrix(BipartiteNetwork(B=B), NetworkParams(m=1.0, c=0.0))

        assert np.allclose(mats.Y_mut[0, 1:], 0.5)
        # Each animal has a single partner
        assert np.allclose(mats.Y_mut[1:, 0], 1.0)
        # Total input to the plant is m * sqrt(k), not m
        assert mats.Y_mut[0].sum() == pytest.approx(2.0)

    def test_weighted_edges(self):
        B = np.array([[4.0, 0.0]])
        mats = build_interaction_matrix(BipartiteNetwork(B=B), NetworkParams(m=1.0, c=0.0))
        assert mats.Y_mut[0, 1] == pytest.approx(4.0 / 2.0)
        assert mats.Y_mut[1, 0] == pytest.approx(4.0 / 2.0)

    def test_layers_use_their_own_strength(self):
        """Dispersal links use d, pollination links use m."""
        B = np.array([[1.0, 0.0]])
        S = np.array([[0.0, 1.0]])
        mats = build_interaction_matrix(
            BipartiteNetwork(B=B, S=S), NetworkParams(m=0.3, d=0.7, c=0.0)
        )
        assert mats.Y_mut[0, 1] == pytest.approx(0.3)
        assert mats.Y_mut[0, 2] == pytest.approx(0.7)

    def test_undersized_layer_padded(self):
        """Layers of different shapes are padded to a common size."""
        B = np.array([[1.0, 1.0]])
        S = np.array([[1.0], [1.0], [1.0]])
        mats = build_interaction_matrix(BipartiteNetwork(B=B, S=S))
        assert mats.n_plants == 3
        assert mats.n_animals == 2
        assert mats.Y_mut.shape == (5, 5)

    def test_sign_partition_default_network(self):
        mats = build_interaction_matrix(default_network(), NetworkParams())
        assert_sign_partition(mats.Y_mut, mats.Y_comp)

    def test_sign_partition_random_networks(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            B = (rng.random((4, 5)) > 0.5) * rng.random((4, 5))
            S = (rng.random((3, 6)) > 0.6) * rng.random((3, 6))
            if not B.any() and not S.any():
                continue
            mats = build_interaction_matrix(
                BipartiteNetwork(B=B, S=S),
                NetworkParams(m=rng.random(), d=rng.random(), c=-rng.random()),
            )
            assert_sign_partition(mats.Y_mut, mats.Y_comp)

    def test_logs_summary(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pyhazard"):
            build_interaction_matrix(default_network())
        assert any("Built interaction matrix" in r.message for r in caplog.records)


class TestDefaultNetwork:
    """Test the built-in network."""

    def test_shape(self):
        net = default_network()
        assert net.B.shape == (3, 6)
        assert net.S.shape == (3, 6)

    def test_layers_use_separate_animals(self):
        net = default_network()
        assert not net.B[:, 3:].any()
        assert not net.S[:, :3].any()

    def test_two_links_per_plant_per_layer(self):
        net = default_network()
        assert np.all(net.B.sum(axis=1) == 2)
        assert np.all(net.S.sum(axis=1) == 2)

    def test_interaction_values(self):
        """Plants compete in both layers; animals only within their layer."""
        mats = build_interaction_matrix(default_network(), NetworkParams(m=0.5, d=0.5, c=-0.1))
        assert mats.n_species == 9
        assert mats.Y_comp[0, 1] == pytest.approx(-0.1)
        assert mats.Y_comp[3, 4] == pytest.approx(-0.05)
        assert mats.Y_comp[3, 6] == 0.0
        assert mats.Y_mut[0, 3] == pytest.approx(0.5 / np.sqrt(2))


class TestRingNetwork:
    """Test the synthetic ring generator."""

    def test_ring_structure(self):
        mats = generate_interaction_matrices(4, 0.5, -0.1)
        assert mats.Y_mut[0, 1] == 0.5
        assert mats.Y_mut[0, 3] == 0.5
        assert mats.Y_mut[1, 0] == 0.5
        assert mats.Y_comp[0, 2] == -0.1
        assert mats.Y_comp[1, 3] == -0.1
        assert np.all(np.diag(mats.Y_mut) == 0)
        assert np.all(np.diag(mats.Y_comp) == 0)
        assert_sign_partition(mats.Y_mut, mats.Y_comp)

    def test_two_species(self):
        mats = generate_interaction_matrices(2, 0.5, -0.1)
        assert np.array_equal(mats.Y_mut, [[0, 0.5], [0.5, 0]])
        assert np.all(mats.Y_comp == 0)

    def test_no_normalisation(self):
        mats = generate_interaction_matrices(10, 0.3, -0.05)
        assert set(np.unique(mats.Y_mut)) == {0.0, 0.3}
        assert set(np.unique(mats.Y_comp)) == {-0.05, 0.0}

    def test_invalid_size(self):
        with pytest.raises(ConfigurationError):
            generate_interaction_matrices(0, 0.5, -0.1)


class TestNetworkStats:
    """Test summary statistics."""

    def test_default_network(self):
        stats = network_stats(default_network())
        assert stats.n_plants == 3
        assert stats.n_animals == 6
        assert stats.n_total == 9
        assert stats.n_pollination_links == 6
        assert stats.n_dispersal_links == 6

    def test_single_layer(self):
        stats = network_stats(BipartiteNetwork(S=[[1, 0, 2]]))
        assert stats.n_pollination_links == 0
        assert stats.n_dispersal_links == 2

    def test_labels(self):
        assert species_labels(2, 3) == ["P1", "P2", "A1", "A2", "A3"]
