"""
Tests for parameter containers and validation.
"""

import numpy as np
import pytest

from pyhazard.core.params import (
    ConfigurationError,
    EcologyParams,
    HurricaneCategory,
    ModelConfig,
    SimulationConfig,
    check_categories,
    check_populations,
)


class TestEcologyParams:
    """Test the model parameter bundle."""

    def test_coerces_and_freezes(self):
        Y = [[0.0, 1.0], [1.0, 0.0]]
        params = EcologyParams(Y, np.zeros((2, 2)), [0.1, 0.2], [0.5, 0.5])
        assert params.n_species == 2
        assert params.Y_mut.dtype == float
        assert not params.Y_mut.flags.writeable
        assert not params.r.flags.writeable

    def test_copies_inputs(self):
        r = np.array([0.1, 0.2])
        params = EcologyParams(np.zeros((2, 2)), np.zeros((2, 2)), r, [0.5, 0.5])
        r[0] = 5.0
        assert params.r[0] == 0.1

    def test_matrix_shape_mismatch(self):
        with pytest.raises(ConfigurationError, match="Y_mut"):
            EcologyParams(np.zeros((3, 3)), np.zeros((2, 2)), [0.1, 0.2], [0.5, 0.5])

    def test_h_length_mismatch(self):
        with pytest.raises(ConfigurationError, match="h length"):
            EcologyParams(np.zeros((2, 2)), np.zeros((2, 2)), [0.1, 0.2], [0.5])

    def test_wrong_ndim(self):
        with pytest.raises(ConfigurationError):
            EcologyParams(np.zeros(4), np.zeros((2, 2)), [0.1, 0.2], [0.5, 0.5])


class TestModelConfig:
    """Test model configuration checks."""

    def test_defaults(self):
        config = ModelConfig(n_species=4)
        assert config.half_saturation == 0.5

    def test_rejects_no_species(self):
        with pytest.raises(ConfigurationError):
            ModelConfig(n_species=0)

    def test_rejects_negative_half_saturation(self):
        with pytest.raises(ConfigurationError):
            ModelConfig(n_species=2, half_saturation=-1.0)


class TestSimulationConfig:
    """Test engine configuration."""

    def test_defaults(self):
        config = SimulationConfig()
        assert config.time_step == 0.01
        assert config.extinction_threshold == 0.01
        assert len(config.hurricane_categories) == 3
        assert all(isinstance(c, HurricaneCategory) for c in config.hurricane_categories)

    def test_tuples_coerced(self):
        config = SimulationConfig(hurricane_categories=[("A", 1.0, 0.3)])
        assert config.hurricane_categories == (HurricaneCategory("A", 1.0, 0.3),)

    @pytest.mark.parametrize("kwargs", [
        {"time_step": 0.0},
        {"time_step": -0.01},
        {"hurricane_rate": -1.0},
        {"extinction_threshold": 1.5},
        {"extinction_threshold": -0.1},
        {"hurricane_rate": 0.1, "hurricane_categories": []},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            SimulationConfig(**kwargs)

    def test_empty_categories_allowed_without_hurricanes(self):
        config = SimulationConfig(hurricane_rate=0.0, hurricane_categories=[])
        assert config.hurricane_categories == ()

    def test_merged_returns_new_config(self):
        base = SimulationConfig()
        merged = base.merged(hurricane_rate=0.3)
        assert merged.hurricane_rate == 0.3
        assert base.hurricane_rate != 0.3
        assert merged.time_step == base.time_step

    def test_merged_aliases(self):
        merged = SimulationConfig().merged(
            hurricaneRate=0.2,
            timeStep=0.05,
            extinctionThresholdFraction=0.1,
            hurricaneCategories=[("Only", 1.0, 0.2)],
        )
        assert merged.hurricane_rate == 0.2
        assert merged.time_step == 0.05
        assert merged.extinction_threshold == 0.1
        assert merged.hurricane_categories[0].label == "Only"

    def test_merged_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration option"):
            SimulationConfig().merged(speed=1)


class TestChecks:
    """Test validation helpers."""

    def test_categories_negative_probability(self):
        with pytest.raises(ConfigurationError, match="probability"):
            check_categories([("A", -0.1, 0.5)])

    def test_categories_damage_range(self):
        with pytest.raises(ConfigurationError, match="damage"):
            check_categories([("A", 1.0, 1.2)])

    def test_populations(self):
        pops = check_populations([0.5, 1], n_species=2)
        assert pops.dtype == float

    def test_populations_invalid(self):
        with pytest.raises(ConfigurationError):
            check_populations([0.5, np.nan])
        with pytest.raises(ConfigurationError):
            check_populations([[0.5]])
        with pytest.raises(ConfigurationError):
            check_populations([0.5], n_species=2)
