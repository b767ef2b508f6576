"""Stein Variational Gradient Descent (Liu & Wang, 2016).

[1] https://arxiv.org/abs/1608.04471
[2] https://arxiv.org/abs/1602.03253
"""

import jax
import jax.numpy as jnp
from flax import struct

from ..core.kernel import GibbsKernel, Kernel
from ..core.score import ScoreFunction
from ..densities.base import Density
from ..exceptions import ConfigurationError
from ..types import LogProbFn, Particles, Scores
from .base import Params, ParticleAlgorithm, State

FIELD_SCALES = ("velocity", "displacement")


@struct.dataclass
class State(State):
    updates: Particles
    scores: Scores
    log_probs: jax.Array


@struct.dataclass
class Params(Params):
    step_size: float
    use_attraction: bool = struct.field(pytree_node=False, default=True)
    use_repulsion: bool = struct.field(pytree_node=False, default=True)
    field_scale: str = struct.field(pytree_node=False, default="displacement")


class SVGD(ParticleAlgorithm):
    """Stein Variational Gradient Descent (SVGD)."""

    def __init__(
        self,
        num_particles: int,
        target: Density | ScoreFunction | LogProbFn,
        initial: Density,
        kernel: Kernel | None = None,
    ):
        """Initialize SVGD."""
        super().__init__(num_particles, initial)

        if isinstance(target, Density):
            if target.num_dims != self.num_dims:
                raise ConfigurationError(
                    f"Target has {target.num_dims} dimensions but the initial "
                    f"distribution has {self.num_dims}."
                )
            score_function = target.score_function()
        elif isinstance(target, ScoreFunction):
            score_function = target
        else:
            score_function = ScoreFunction(log_prob=target)

        self.target = target
        self.score_function = score_function
        self.kernel = GibbsKernel(1.0) if kernel is None else kernel

    @property
    def _default_params(self) -> Params:
        return Params(step_size=0.02)

    def _init(self, key: jax.Array, params: Params) -> State:
        particles = self.sample_particles(key)
        state = State(
            particles=particles,
            updates=jnp.zeros_like(particles),
            scores=jnp.zeros_like(particles),
            log_probs=jnp.zeros(self.num_particles),
            step_counter=0,
        )
        return state

    def _step(self, state: State, params: Params) -> State:
        particles = state.particles
        log_probs, scores = self.log_probs_and_scores(particles, params)

        # Every term reads the positions from before the step
        updates = svgd_direction(
            particles,
            particles,
            scores,
            self.kernel,
            use_attraction=params.use_attraction,
            use_repulsion=params.use_repulsion,
        )
        particles = particles + params.step_size * updates

        return state.replace(
            particles=particles, updates=updates, scores=scores, log_probs=log_probs
        )

    def scores(self, particles: Particles, params: Params) -> Scores:
        """Score at every particle, zero when the driving force is disabled."""
        if params.use_attraction:
            return self.score_function.batch(particles)
        return jnp.zeros_like(particles)

    def log_probs_and_scores(
        self, particles: Particles, params: Params
    ) -> tuple[jax.Array, Scores]:
        """Log-density and score at every particle, zero when attraction is off."""
        if params.use_attraction:
            return self.score_function.batch_with_log_prob(particles)
        return jnp.zeros(particles.shape[0]), jnp.zeros_like(particles)


def stein_force(
    x: jax.Array,
    source: jax.Array,
    score: jax.Array,
    kernel: Kernel,
    use_attraction: bool = True,
    use_repulsion: bool = True,
) -> jax.Array:
    """Force exerted on `x` by a single source particle."""
    force = jnp.zeros_like(x)
    if use_attraction:
        # Driving force towards high probability regions
        force = force + score * kernel(x, source)
    if use_repulsion:
        # Repulsive force between particles
        force = force + kernel.grad_first_arg(source, x)
    return force


def svgd_direction(
    x: jax.Array,
    sources: Particles,
    scores: Scores,
    kernel: Kernel,
    use_attraction: bool = True,
    use_repulsion: bool = True,
) -> jax.Array:
    """SVGD update direction at query points `x` induced by `sources`.

    Args:
        x: Query points of shape (num_points, num_dims).
        sources: Particles of shape (num_particles, num_dims).
        scores: Score of the target at each source particle.
        kernel: Kernel with `grad_first_arg`.
        use_attraction: Include the score-weighted kernel term.
        use_repulsion: Include the kernel gradient term.

    Returns:
        Array of shape (num_points, num_dims). Forces are accumulated over the
        sources in ascending order.

    """

    def phi(xi):
        def accumulate(carry, inputs):
            xj, sj = inputs
            force = stein_force(
                xi,
                xj,
                sj,
                kernel,
                use_attraction=use_attraction,
                use_repulsion=use_repulsion,
            )
            return carry + force, None

        direction, _ = jax.lax.scan(accumulate, jnp.zeros_like(xi), (sources, scores))
        return direction

    return jax.vmap(phi)(x)
