"""Vector field induced by a particle set, for visualization."""

from functools import partial

import jax
import jax.numpy as jnp

from .svgd import SVGD, Params, State, svgd_direction


def make_grid(
    lower: float | tuple[float, float],
    upper: float | tuple[float, float],
    num: int,
) -> jax.Array:
    """Return the points of a regular 2D mesh, shape (num**2, 2), x varying fastest."""
    lower = jnp.broadcast_to(jnp.asarray(lower, dtype=float), (2,))
    upper = jnp.broadcast_to(jnp.asarray(upper, dtype=float), (2,))
    xs = jnp.linspace(lower[0], upper[0], num)
    ys = jnp.linspace(lower[1], upper[1], num)
    mx, my = jnp.meshgrid(xs, ys)
    return jnp.stack([mx.ravel(), my.ravel()], axis=-1)


class FieldSampler:
    """Evaluate the SVGD update direction at arbitrary query points.

    The current particles act as sources exactly as in `SVGD.step`, with the
    updated particle replaced by the query point. With `field_scale="velocity"`
    the raw direction is returned; with `"displacement"` it is multiplied by the
    step size, previewing how far a particle at the query point would move.
    """

    def __init__(self, algorithm: SVGD):
        self.algorithm = algorithm

    @partial(jax.jit, static_argnames=("self",))
    def field(self, state: State, params: Params, grid_points: jax.Array) -> jax.Array:
        """Return the vector field at `grid_points`, shape (num_points, num_dims)."""
        particles = state.particles
        scores = self.algorithm.scores(particles, params)
        direction = svgd_direction(
            grid_points,
            particles,
            scores,
            self.algorithm.kernel,
            use_attraction=params.use_attraction,
            use_repulsion=params.use_repulsion,
        )
        if params.field_scale == "displacement":
            direction = params.step_size * direction
        return direction

    def __call__(
        self, state: State, params: Params, grid_points: jax.Array
    ) -> jax.Array:
        return self.field(state, params, grid_points)
