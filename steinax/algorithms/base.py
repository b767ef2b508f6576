"""Base module for particle-based inference algorithms."""

from functools import partial

import jax
from flax import struct

from ..densities.base import Density
from ..exceptions import ConfigurationError
from ..types import Params, Particles, State


@struct.dataclass
class State(State):
    particles: Particles
    step_counter: int


@struct.dataclass
class Params(Params):
    pass


class ParticleAlgorithm:
    """Base class for algorithms that transport a fixed-size set of particles."""

    def __init__(self, num_particles: int, initial: Density):
        """Initialize base class for particle algorithm."""
        if num_particles <= 0:
            raise ConfigurationError(
                f"Number of particles must be greater than 0, got {num_particles}."
            )

        self.num_particles = num_particles
        self.initial = initial
        self.num_dims = initial.num_dims

    @property
    def default_params(self) -> Params:
        """Return default algorithm params."""
        return self._default_params

    @partial(jax.jit, static_argnames=("self",))
    def init(self, key: jax.Array, params: Params) -> State:
        """Initialize particle algorithm."""
        state = self._init(key, params)
        return state

    @partial(jax.jit, static_argnames=("self",))
    def step(self, state: State, params: Params) -> State:
        """Move every particle once, reading only the positions in `state`."""
        state = self._step(state, params)
        state = state.replace(step_counter=state.step_counter + 1)
        return state

    def sample_particles(self, key: jax.Array) -> Particles:
        """Draw the initial particle set."""
        return self.initial.sample(key, self.num_particles)

    def _init(self, key: jax.Array, params: Params) -> State:
        raise NotImplementedError

    def _step(self, state: State, params: Params) -> State:
        raise NotImplementedError
