"""PyHazard Application Configuration.

Centralized configuration constants used by the command-line driver and
the plotting helpers.
"""
from dataclasses import dataclass
from typing import Dict

from pyhazard.core.constants import (
    DEFAULT_COMPETITION_STRENGTH,
    DEFAULT_DISPERSAL_STRENGTH,
    DEFAULT_EXTINCTION_THRESHOLD,
    DEFAULT_HALF_SATURATION,
    DEFAULT_HURRICANE_RATE,
    DEFAULT_MUTUALISTIC_STRENGTH,
    DEFAULT_TIME_STEP,
)


@dataclass
class ModelDefaults:
    """Default ecological model parameters."""

    mutualistic_strength: float = DEFAULT_MUTUALISTIC_STRENGTH
    dispersal_strength: float = DEFAULT_DISPERSAL_STRENGTH
    competition_strength: float = DEFAULT_COMPETITION_STRENGTH
    half_saturation: float = DEFAULT_HALF_SATURATION


@dataclass
class HurricaneDefaults:
    """Default disturbance regime.

    The category table lives in :func:`pyhazard.core.hurricanes.default_categories`.
    """

    rate: float = DEFAULT_HURRICANE_RATE  # events per year


@dataclass
class SimulationDefaults:
    """Integration and stepping defaults."""

    time_step: float = DEFAULT_TIME_STEP
    frame_step: float = 0.01  # duration advanced per engine step
    duration: float = 100.0
    extinction_threshold: float = DEFAULT_EXTINCTION_THRESHOLD


@dataclass
class PlotConfig:
    """Matplotlib plot configuration."""

    default_width: int = 12
    default_height: int = 6
    dpi: int = 100
    line_width: float = 1.5


@dataclass
class ColorScheme:
    """Color scheme for visualizations."""

    plant: str = '#10b981'    # Green
    animal: str = '#3b82f6'   # Blue
    extinct: str = '#9ca3af'  # Gray
    link: str = '#6b7280'

    # Hurricane category colors
    categories: Dict[str, str] = None
    category_fallback: str = '#dc3545'

    def __post_init__(self):
        """Initialize category colors."""
        if self.categories is None:
            self.categories = {
                'Category 1': '#facc15',  # Yellow
                'Category 2': '#f97316',  # Orange
                'Category 3': '#dc2626',  # Red
            }


# Singleton instances - import these in other modules
DEFAULTS = ModelDefaults()
HURRICANES = HurricaneDefaults()
SIMULATION = SimulationDefaults()
PLOTS = PlotConfig()
COLORS = ColorScheme()
