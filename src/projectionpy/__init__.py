"""Staggered-grid projection solver for 2D incompressible channel flow."""

from .boundaryConditions import ChannelBoundaries, mirror
from .config import SimulationConfig
from .exceptions import ConfigurationError, PressureNotConvergedWarning
from .grid import Grid2D
from .linearSolver import pressure_coefficients, solve_pressure
from .postProcess import PostProcessor
from .projection import FluidProperties, ProjectionChannelFlow
from .variable import variable

__version__ = "0.1.0"

__all__ = [
    "ChannelBoundaries",
    "ConfigurationError",
    "FluidProperties",
    "Grid2D",
    "PostProcessor",
    "PressureNotConvergedWarning",
    "ProjectionChannelFlow",
    "SimulationConfig",
    "mirror",
    "pressure_coefficients",
    "solve_pressure",
    "variable",
]
