"""Stateful SVGD engine driven by explicit commands."""

import logging
import math

import jax
import jax.numpy as jnp

from .algorithms.field import FieldSampler
from .algorithms.svgd import FIELD_SCALES, SVGD, Params, State
from .core.kernel import GibbsKernel, Kernel
from .core.score import ScoreFunction, check_finite
from .densities.base import Density
from .exceptions import ConfigurationError, NumericalError
from .types import LogProbFn, Particles

logger = logging.getLogger(__name__)


class SVGDEngine:
    """Own a particle set and move it with SVGD on request.

    The engine is driven through `step`, `reset` and `configure`, and exposes the
    current particles and the induced vector field for rendering. A step either
    replaces the whole particle set or raises without touching it.

    Args:
        target: Target density, score function, or callable log-density.
        initial: Distribution the particles are drawn from.
        num_particles: Number of particles, fixed for the lifetime of the engine.
        kernel: Kernel used for both forces, defaults to `GibbsKernel(1.0)`.
        step_size: Step size of the particle update.
        use_attraction: Enable the score-driven force.
        use_repulsion: Enable the repulsive kernel-gradient force.
        field_scale: "velocity" or "displacement", see `FieldSampler`.
        seed: Seed of the initial draw, reused on every reset.

    """

    def __init__(
        self,
        target: Density | ScoreFunction | LogProbFn,
        initial: Density,
        num_particles: int,
        kernel: Kernel | None = None,
        step_size: float = 0.02,
        use_attraction: bool = True,
        use_repulsion: bool = True,
        field_scale: str = "displacement",
        seed: int = 0,
    ):
        kernel = GibbsKernel(1.0) if kernel is None else kernel
        self.algorithm = SVGD(num_particles, target, initial, kernel=kernel)
        self.field_sampler = FieldSampler(self.algorithm)
        self.seed = seed
        self._key = jax.random.key(seed)

        self._params = validate_params(
            self.algorithm.default_params.replace(
                step_size=step_size,
                use_attraction=use_attraction,
                use_repulsion=use_repulsion,
                field_scale=field_scale,
            )
        )
        self._state = self.algorithm.init(self._key, self._params)
        self.algorithm.kernel.check_lengthscale(self._state.particles)

        logger.info(
            "Initialized SVGD with %d particles in %d dimensions, kernel=%r, seed=%d",
            self.algorithm.num_particles,
            self.algorithm.num_dims,
            self.algorithm.kernel,
            seed,
        )

    @property
    def particles(self) -> Particles:
        """Current particle positions, shape (num_particles, num_dims)."""
        return self._state.particles

    @property
    def state(self) -> State:
        return self._state

    @property
    def params(self) -> Params:
        return self._params

    @property
    def kernel(self) -> Kernel:
        return self.algorithm.kernel

    @property
    def step_counter(self) -> int:
        return int(self._state.step_counter)

    def step(self) -> Particles:
        """Move all particles once and return the new positions."""
        self.algorithm.kernel.check_lengthscale(self._state.particles)
        state = self.algorithm.step(self._state, self._params)

        try:
            check_finite(state.log_probs, "Log-density")
            check_finite(state.scores, "Score")
            check_finite(state.updates, "Particle update")
        except NumericalError as err:
            logger.warning("SVGD step %d aborted: %s", self.step_counter, err)
            raise

        self._state = state
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "SVGD step %d, mean update norm %.4g",
                self.step_counter,
                float(jnp.mean(jnp.linalg.norm(state.updates, axis=-1))),
            )
        return self._state.particles

    def reset(self) -> Particles:
        """Redraw the particles with the original seed and clear the update buffer."""
        self._state = self.algorithm.init(self._key, self._params)
        logger.info("Reset SVGD particles with seed %d", self.seed)
        return self._state.particles

    def configure(
        self,
        use_attraction: bool | None = None,
        use_repulsion: bool | None = None,
        step_size: float | None = None,
        field_scale: str | None = None,
        kernel: Kernel | None = None,
    ) -> Params:
        """Update the configuration used by the next `step` or `field` call.

        Arguments left as None keep their current value. Invalid values raise
        ConfigurationError and leave the configuration unchanged.
        """
        changes = {
            name: value
            for name, value in {
                "use_attraction": use_attraction,
                "use_repulsion": use_repulsion,
                "step_size": step_size,
                "field_scale": field_scale,
            }.items()
            if value is not None
        }
        params = validate_params(self._params.replace(**changes))

        if kernel is not None:
            kernel.check_lengthscale(self._state.particles)
            algorithm = SVGD(
                self.algorithm.num_particles,
                self.algorithm.target,
                self.algorithm.initial,
                kernel=kernel,
            )
            self.algorithm = algorithm
            self.field_sampler = FieldSampler(algorithm)
            changes["kernel"] = kernel

        self._params = params
        logger.debug("Configured SVGD: %s", changes)
        return self._params

    def field(self, grid_points: jax.Array) -> jax.Array:
        """Vector field induced by the current particles at `grid_points`."""
        grid_points = jnp.asarray(grid_points, dtype=float)
        if grid_points.ndim == 1 and self.algorithm.num_dims == 1:
            # A flat grid of a 1-D target is a column of query points
            grid_points = grid_points.reshape(-1, 1)
        grid_points = jnp.atleast_2d(grid_points)
        if grid_points.shape[-1] != self.algorithm.num_dims:
            raise ConfigurationError(
                f"Grid points have {grid_points.shape[-1]} dimensions, expected "
                f"{self.algorithm.num_dims}."
            )
        self.algorithm.kernel.check_lengthscale(grid_points)

        field = self.field_sampler(self._state, self._params, grid_points)
        check_finite(field, "Vector field")
        return field


def validate_params(params: Params) -> Params:
    """Raise ConfigurationError if `params` cannot be used for a step."""
    step_size = float(params.step_size)
    if not math.isfinite(step_size) or step_size <= 0:
        raise ConfigurationError(f"Step size must be positive, got {params.step_size}.")
    if params.field_scale not in FIELD_SCALES:
        raise ConfigurationError(
            f"Field scale must be one of {FIELD_SCALES}, got {params.field_scale!r}."
        )
    flags = {}
    for name in ("use_attraction", "use_repulsion"):
        value = getattr(params, name)
        # numpy and jax boolean scalars are accepted and stored as bool
        is_bool_scalar = getattr(value, "dtype", None) == jnp.bool_
        is_bool_scalar = is_bool_scalar and jnp.ndim(value) == 0
        if not (isinstance(value, bool) or is_bool_scalar):
            raise ConfigurationError(f"{name} must be a bool, got {value!r}.")
        flags[name] = bool(value)
    return params.replace(step_size=step_size, **flags)
