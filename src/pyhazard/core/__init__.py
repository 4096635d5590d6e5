"""
Core module for PyHazard.

Contains the network builder, the ecological model, the RK4 integrator,
the hurricane generator and the simulation engine.
"""

from pyhazard.core.params import (
    ConfigurationError,
    HurricaneCategory,
    NetworkParams,
    ModelConfig,
    EcologyParams,
    SimulationConfig,
)
from pyhazard.core.network import (
    BipartiteNetwork,
    InteractionMatrices,
    build_interaction_matrix,
    generate_interaction_matrices,
    default_network,
    network_stats,
)
from pyhazard.core.ecology import eco_dynamics_type2, create_ecology_params
from pyhazard.core.ode import rk4_step, solve_ode
from pyhazard.core.hurricanes import (
    draw_waiting_time,
    draw_category,
    normalize_categories,
)
from pyhazard.core.engine import (
    HurricaneEvent,
    SimulationState,
    SimulationEngine,
    advance,
    apply_hurricane,
)

__all__ = [
    # Parameters
    "ConfigurationError",
    "HurricaneCategory",
    "NetworkParams",
    "ModelConfig",
    "EcologyParams",
    "SimulationConfig",
    # Network
    "BipartiteNetwork",
    "InteractionMatrices",
    "build_interaction_matrix",
    "generate_interaction_matrices",
    "default_network",
    "network_stats",
    # Model and integration
    "eco_dynamics_type2",
    "create_ecology_params",
    "rk4_step",
    "solve_ode",
    # Hurricanes
    "draw_waiting_time",
    "draw_category",
    "normalize_categories",
    # Engine
    "HurricaneEvent",
    "SimulationState",
    "SimulationEngine",
    "advance",
    "apply_hurricane",
]
