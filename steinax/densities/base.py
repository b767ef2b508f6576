"""Abstract class for probability densities."""

from functools import partial

import jax

from ..core.score import ScoreFunction


class Density:
    """Abstract class for probability densities on R^d.

    Each density implements a common interface with `log_prob` and `sample` methods
    to evaluate its (possibly unnormalized) log-density and to draw i.i.d. samples.
    """

    @property
    def num_dims(self) -> int:
        """Number of dimensions of the sample space."""
        raise NotImplementedError

    def log_prob(self, x: jax.Array) -> jax.Array:
        """Log-density at a single point of shape (num_dims,)."""
        raise NotImplementedError

    @partial(jax.jit, static_argnames=("self", "num_samples"))
    def sample(self, key: jax.Array, num_samples: int) -> jax.Array:
        """Draw samples of shape (num_samples, num_dims)."""
        return self._sample(key, num_samples)

    def _sample(self, key: jax.Array, num_samples: int) -> jax.Array:
        raise NotImplementedError

    def score(self, x: jax.Array) -> jax.Array:
        """Gradient of the log-density at a single point."""
        return jax.grad(self.log_prob)(x)

    def score_function(self) -> ScoreFunction:
        """Return the score function of this density."""
        return ScoreFunction(log_prob=self.log_prob)
