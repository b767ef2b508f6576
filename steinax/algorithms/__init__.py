"""Particle-based inference algorithms.

Algorithms follow a functional interface: `init` draws the initial particle set into a
`State`, `step` returns a new `State` with every particle moved once, and
configuration lives in an immutable `Params` returned by `default_params`.
"""

from .base import ParticleAlgorithm
from .field import FieldSampler, make_grid
from .svgd import FIELD_SCALES, SVGD, Params, State, stein_force, svgd_direction

__all__ = [
    "ParticleAlgorithm",
    "SVGD",
    "Params",
    "State",
    "FIELD_SCALES",
    "stein_force",
    "svgd_direction",
    "FieldSampler",
    "make_grid",
]
