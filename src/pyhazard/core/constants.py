"""Numerical and biological constants for the hurricane-perturbed mutualistic model.

This module centralizes magic numbers used throughout PyHazard.
"""

# ============================================================================
# RANDOM INITIALISATION RANGES
# ============================================================================

# Intrinsic growth rates r_i ~ U[GROWTH_RATE_MIN, GROWTH_RATE_MAX)
GROWTH_RATE_MIN = 0.1
GROWTH_RATE_MAX = 0.5

# Initial abundances N_i(0) ~ U[INITIAL_POP_MIN, INITIAL_POP_MAX)
INITIAL_POP_MIN = 0.3
INITIAL_POP_MAX = 1.0

# ============================================================================
# SIMULATION PARAMETERS
# ============================================================================

DEFAULT_TIME_STEP = 0.01  # RK4 step size (years)
DEFAULT_EXTINCTION_THRESHOLD = 0.01  # Fraction of initial population
DEFAULT_HURRICANE_RATE = 0.05  # Events per year

# ============================================================================
# NETWORK DEFAULTS
# ============================================================================

DEFAULT_MUTUALISTIC_STRENGTH = 0.5  # m (pollination)
DEFAULT_DISPERSAL_STRENGTH = 0.5  # d (seed dispersal)
DEFAULT_COMPETITION_STRENGTH = -0.1  # c
DEFAULT_HALF_SATURATION = 0.5  # h

# Layout of the built-in network: 3 plants, 3 pollinators, 3 seed dispersers
DEFAULT_N_PLANTS = 3
DEFAULT_N_POLLINATORS = 3
DEFAULT_N_DISPERSERS = 3

# ============================================================================
# HURRICANE CATEGORIES
# ============================================================================

# (label, probability, damage fraction)
DEFAULT_HURRICANE_CATEGORIES = (
    ("Category 1", 0.6, 0.1),
    ("Category 2", 0.3, 0.5),
    ("Category 3", 0.1, 0.8),
)
