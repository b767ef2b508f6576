from .algorithms import SVGD, FieldSampler, Params, State, make_grid
from .core import GibbsKernel, Kernel, RBFKernel, ScoreFunction, median_heuristic
from .densities import (
    Density,
    GaussianMixture,
    MultivariateNormal,
    Normal,
    Unnormalized,
)
from .engine import SVGDEngine
from .exceptions import ConfigurationError, NumericalError, SteinaxError

__all__ = [
    "SVGD",
    "SVGDEngine",
    "FieldSampler",
    "Params",
    "State",
    "make_grid",
    "Kernel",
    "GibbsKernel",
    "RBFKernel",
    "median_heuristic",
    "ScoreFunction",
    "Density",
    "Normal",
    "MultivariateNormal",
    "GaussianMixture",
    "Unnormalized",
    "SteinaxError",
    "ConfigurationError",
    "NumericalError",
]
