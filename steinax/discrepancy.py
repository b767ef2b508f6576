"""Score-based comparison of densities.

These quantities only need the score of the target density, so they are unaffected
by its normalizing constant:

- score difference, delta_{p,q}(x) = s_p(x) - s_q(x)
- Fisher divergence, E_q |delta_{p,q}(x)|^2
- kernelized Stein discrepancy, E_{x, x' ~ q} u_p(x, x')

[1] https://arxiv.org/abs/1602.03253
"""

from collections.abc import Callable

import jax
import jax.numpy as jnp

from .core.kernel import Kernel
from .core.score import ScoreFunction
from .exceptions import ConfigurationError
from .types import Particles, ScoreFn, Scores


def batch_scores(score_fn: ScoreFunction | ScoreFn, samples: Particles) -> Scores:
    """Evaluate a score at every sample."""
    if isinstance(score_fn, ScoreFunction):
        return score_fn.batch(samples)
    return jax.vmap(score_fn)(samples)


def score_difference(
    score_p: ScoreFunction | ScoreFn, score_q: ScoreFunction | ScoreFn, x: jax.Array
) -> jax.Array:
    """Difference of the scores of p and q at a single point."""
    return score_p(x) - score_q(x)


def fisher_divergence(
    score_p: ScoreFunction | ScoreFn,
    score_q: ScoreFunction | ScoreFn,
    samples: Particles,
) -> jax.Array:
    """Monte Carlo estimate of E_q |s_p(x) - s_q(x)|^2 from samples of q."""
    delta = batch_scores(score_p, samples) - batch_scores(score_q, samples)
    return jnp.mean(jnp.sum(jnp.square(delta), axis=-1))


def stein_kernel(
    kernel: Kernel,
    x: jax.Array,
    y: jax.Array,
    score_x: jax.Array,
    score_y: jax.Array,
) -> jax.Array:
    """Stein kernel u_p(x, y) obtained by applying the Stein operator to k twice."""
    k = kernel(x, y)
    grad_x = jax.grad(kernel.__call__, argnums=0)(x, y)
    grad_y = jax.grad(kernel.__call__, argnums=1)(x, y)
    grad_xy = jax.jacfwd(jax.grad(kernel.__call__, argnums=1), argnums=0)(x, y)
    return (
        jnp.dot(score_x, score_y) * k
        + jnp.dot(score_x, grad_y)
        + jnp.dot(grad_x, score_y)
        + jnp.trace(grad_xy)
    )


def kernelized_stein_discrepancy(
    kernel: Kernel,
    score_p: ScoreFunction | ScoreFn,
    samples: Particles,
) -> jax.Array:
    """U-statistic estimate of the kernelized Stein discrepancy S(q, p).

    Args:
        kernel: Positive-definite kernel.
        score_p: Score of the target density p.
        samples: Samples from q of shape (num_samples, num_dims).

    Returns:
        Mean of u_p over all pairs of distinct samples.

    """
    num_samples = samples.shape[0]
    if num_samples < 2:
        raise ConfigurationError(
            f"Kernelized Stein discrepancy needs at least 2 samples, got {num_samples}."
        )

    scores = batch_scores(score_p, samples)
    gram = jax.vmap(
        lambda x, sx: jax.vmap(lambda y, sy: stein_kernel(kernel, x, y, sx, sy))(
            samples, scores
        )
    )(samples, scores)
    off_diagonal = jnp.sum(gram) - jnp.trace(gram)
    return off_diagonal / (num_samples * (num_samples - 1))


def perturb(
    phi: Callable[[jax.Array], jax.Array], epsilon: float
) -> Callable[[jax.Array], jax.Array]:
    """Return the map T(x) = x + epsilon * phi(x)."""

    def transform(x: jax.Array) -> jax.Array:
        return x + epsilon * phi(x)

    return transform
