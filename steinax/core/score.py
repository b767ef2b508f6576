"""Score functions of target densities."""

import jax
import jax.numpy as jnp

from ..exceptions import ConfigurationError, NumericalError
from ..types import LogProbFn, Particle, Particles, ScoreFn, Scores


class ScoreFunction:
    """Gradient of a (possibly unnormalized) log-density.

    The gradient is obtained with `jax.value_and_grad` from `log_prob`, or taken
    from a closed-form `score_fn` when one is known. The normalizing constant of
    the density does not change the score. Only a `log_prob` lets the log-density
    value itself be checked; a closed-form score reports a log-density of zero.
    """

    def __init__(
        self,
        log_prob: LogProbFn | None = None,
        score_fn: ScoreFn | None = None,
    ):
        if (log_prob is None) == (score_fn is None):
            raise ConfigurationError(
                "Provide exactly one of `log_prob` or `score_fn`."
            )
        self.log_prob = log_prob
        if score_fn is None:
            self._value_and_score = jax.value_and_grad(log_prob)
            self._score_fn = jax.grad(log_prob)
        else:
            self._value_and_score = lambda theta: (jnp.zeros(()), score_fn(theta))
            self._score_fn = score_fn

    def __call__(self, theta: Particle) -> jax.Array:
        return self.score(theta)

    def score(self, theta: Particle) -> jax.Array:
        """Evaluate the score at a single point and check it is finite."""
        value, score = self._value_and_score(jnp.asarray(theta, dtype=float))
        if not jnp.isfinite(value):
            raise NumericalError(f"Log-density is not finite at {theta}: {value}.")
        if not jnp.all(jnp.isfinite(score)):
            raise NumericalError(f"Score is not finite at {theta}: {score}.")
        return score

    def batch(self, particles: Particles) -> Scores:
        """Evaluate the score at every particle, without checks."""
        return jax.vmap(self._score_fn)(particles)

    def batch_with_log_prob(self, particles: Particles) -> tuple[jax.Array, Scores]:
        """Evaluate the log-density and the score at every particle, without checks."""
        return jax.vmap(self._value_and_score)(particles)


def check_finite(values: jax.Array, name: str) -> None:
    """Raise NumericalError naming every row of `values` that is not finite."""
    finite = jnp.all(jnp.isfinite(values).reshape(values.shape[0], -1), axis=-1)
    if not jnp.all(finite):
        idx = jnp.flatnonzero(~finite).tolist()
        raise NumericalError(f"{name} is not finite at rows {idx}.")


def check_scores(scores: Scores) -> None:
    """Raise NumericalError naming every particle whose score is not finite."""
    check_finite(scores, "Score")
