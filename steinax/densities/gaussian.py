"""Gaussian densities and mixtures."""

import jax
import jax.numpy as jnp
from jax.scipy.special import logsumexp
from jax.scipy.stats import multivariate_normal, norm

from ..exceptions import ConfigurationError
from .base import Density


class Normal(Density):
    """Normal distribution with independent coordinates."""

    def __init__(self, loc: jax.Array | float = 0.0, scale: jax.Array | float = 1.0):
        loc = jnp.atleast_1d(jnp.asarray(loc, dtype=float))
        scale = jnp.broadcast_to(jnp.asarray(scale, dtype=float), loc.shape)
        if loc.ndim != 1:
            raise ConfigurationError(f"Normal loc must be a vector, got {loc.shape}.")
        if not jnp.all(jnp.isfinite(scale) & (scale > 0)):
            raise ConfigurationError(f"Normal scale must be positive, got {scale}.")

        self.loc = loc
        self.scale = scale

    @property
    def num_dims(self) -> int:
        return self.loc.shape[0]

    def log_prob(self, x: jax.Array) -> jax.Array:
        return jnp.sum(norm.logpdf(x, self.loc, self.scale), axis=-1)

    def _sample(self, key: jax.Array, num_samples: int) -> jax.Array:
        z = jax.random.normal(key, (num_samples, self.num_dims))
        return self.loc + self.scale * z


class MultivariateNormal(Density):
    """Multivariate normal distribution with full covariance."""

    def __init__(self, mean: jax.Array, cov: jax.Array):
        mean = jnp.atleast_1d(jnp.asarray(mean, dtype=float))
        cov = jnp.atleast_2d(jnp.asarray(cov, dtype=float))
        num_dims = mean.shape[0]
        if mean.ndim != 1 or cov.shape != (num_dims, num_dims):
            raise ConfigurationError(
                f"Covariance shape {cov.shape} does not match mean shape {mean.shape}."
            )
        if not jnp.allclose(cov, cov.T):
            raise ConfigurationError("Covariance matrix must be symmetric.")

        # Cholesky returns NaN for matrices that are not positive definite
        chol = jnp.linalg.cholesky(cov)
        if not jnp.all(jnp.isfinite(chol)):
            raise ConfigurationError("Covariance matrix must be positive definite.")

        self.mean = mean
        self.cov = cov
        self.chol = chol

    @property
    def num_dims(self) -> int:
        return self.mean.shape[0]

    def log_prob(self, x: jax.Array) -> jax.Array:
        return multivariate_normal.logpdf(x, self.mean, self.cov)

    def _sample(self, key: jax.Array, num_samples: int) -> jax.Array:
        z = jax.random.normal(key, (num_samples, self.num_dims))
        return self.mean + z @ self.chol.T


class GaussianMixture(Density):
    """Weighted mixture of Gaussian components.

    Args:
        weights: Non-negative mixture weights, normalized internally.
        components: Gaussian components sharing the same number of dimensions.

    """

    def __init__(
        self, weights: jax.Array, components: list[Normal | MultivariateNormal]
    ):
        weights = jnp.asarray(weights, dtype=float)
        if weights.ndim != 1 or weights.shape[0] != len(components):
            raise ConfigurationError(
                f"Got {weights.shape} weights for {len(components)} components."
            )
        if jnp.any(weights < 0) or not jnp.sum(weights) > 0:
            raise ConfigurationError("Mixture weights must be non-negative.")
        if len({component.num_dims for component in components}) != 1:
            raise ConfigurationError("Mixture components must share num_dims.")

        self.weights = weights / jnp.sum(weights)
        self.components = list(components)

    @property
    def num_dims(self) -> int:
        return self.components[0].num_dims

    def log_prob(self, x: jax.Array) -> jax.Array:
        log_probs = jnp.stack([component.log_prob(x) for component in self.components])
        return logsumexp(log_probs, axis=0, b=self.weights)

    def _sample(self, key: jax.Array, num_samples: int) -> jax.Array:
        key_idx, *keys = jax.random.split(key, len(self.components) + 1)
        idx = jax.random.choice(
            key_idx, len(self.components), (num_samples,), p=self.weights
        )
        samples = jnp.stack(
            [
                component._sample(key, num_samples)
                for key, component in zip(keys, self.components)
            ]
        )
        return samples[idx, jnp.arange(num_samples)]


class Unnormalized(Density):
    """Density whose log-density is shifted by an unknown constant, p(x) / C."""

    def __init__(self, density: Density, log_normalizer: float = 0.0):
        self.density = density
        self.log_normalizer = log_normalizer

    @property
    def num_dims(self) -> int:
        return self.density.num_dims

    def log_prob(self, x: jax.Array) -> jax.Array:
        return self.density.log_prob(x) - self.log_normalizer

    def _sample(self, key: jax.Array, num_samples: int) -> jax.Array:
        return self.density._sample(key, num_samples)
