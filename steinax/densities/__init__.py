"""Probability densities module.

Densities serve two roles: the target of SVGD, of which only the score of the
(possibly unnormalized) log-density is used, and the initial distribution from which
particles are drawn.

Each density implements a common interface with `log_prob` and `sample` methods.
"""

from .base import Density
from .gaussian import GaussianMixture, MultivariateNormal, Normal, Unnormalized
from .toy import bimodal_1d, bimodal_2d, bimodal_2d_initial

__all__ = [
    "Density",
    "Normal",
    "MultivariateNormal",
    "GaussianMixture",
    "Unnormalized",
    "bimodal_1d",
    "bimodal_2d",
    "bimodal_2d_initial",
]
