"""
PyHazard - Mutualistic communities under hurricane disturbance

Lotka-Volterra dynamics with a Type II mutualistic response on bipartite
plant-animal networks, perturbed by stochastic hurricanes.
"""

__version__ = "0.1.0"
__author__ = "PyHazard Development Team"

# Core imports
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
    build_interaction_matrix,
    generate_interaction_matrices,
    default_network,
)
from pyhazard.core.ecology import eco_dynamics_type2, create_ecology_params
from pyhazard.core.ode import rk4_step, solve_ode
from pyhazard.core.engine import HurricaneEvent, SimulationEngine
from pyhazard.io.network_csv import FormatError, read_network

__all__ = [
    # Version
    "__version__",
    "__author__",
    # Parameters
    "ConfigurationError",
    "FormatError",
    "HurricaneCategory",
    "NetworkParams",
    "ModelConfig",
    "EcologyParams",
    "SimulationConfig",
    # Network
    "BipartiteNetwork",
    "build_interaction_matrix",
    "generate_interaction_matrices",
    "default_network",
    "read_network",
    # Simulation
    "eco_dynamics_type2",
    "create_ecology_params",
    "rk4_step",
    "solve_ode",
    "HurricaneEvent",
    "SimulationEngine",
]
