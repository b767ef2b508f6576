"""Tests for Gaussian densities."""

import jax
import jax.numpy as jnp
import pytest
from jax.scipy.stats import norm
from steinax.densities import (
    GaussianMixture,
    MultivariateNormal,
    Normal,
    Unnormalized,
    bimodal_1d,
    bimodal_2d,
    bimodal_2d_initial,
)
from steinax.exceptions import ConfigurationError


def test_normal(key):
    density = Normal(jnp.array([1.0, -1.0]), jnp.array([0.5, 2.0]))
    x = jnp.array([0.0, 0.0])

    expected = norm.logpdf(0.0, 1.0, 0.5) + norm.logpdf(0.0, -1.0, 2.0)
    assert density.num_dims == 2
    assert jnp.isclose(density.log_prob(x), expected)

    samples = density.sample(key, 10_000)
    assert samples.shape == (10_000, 2)
    assert jnp.allclose(jnp.mean(samples, axis=0), density.loc, atol=0.1)
    assert jnp.allclose(jnp.std(samples, axis=0), density.scale, atol=0.1)


def test_normal_scalar_parameters():
    density = Normal(0.0, 1.0)
    assert density.num_dims == 1
    assert jnp.allclose(density.score(jnp.array([2.0])), jnp.array([-2.0]))


def test_normal_invalid_scale():
    with pytest.raises(ConfigurationError):
        Normal(jnp.zeros(2), 0.0)


def test_multivariate_normal(key):
    mean = jnp.array([2.0, 0.0])
    cov = jnp.array([[0.5, -0.1], [-0.1, 0.5]])
    density = MultivariateNormal(mean, cov)

    # Score of a Gaussian is -cov^{-1} (x - mean)
    x = jnp.array([0.5, 0.5])
    expected = -jnp.linalg.solve(cov, x - mean)
    assert jnp.allclose(density.score(x), expected, atol=1e-5)

    samples = density.sample(key, 20_000)
    assert samples.shape == (20_000, 2)
    assert jnp.allclose(jnp.mean(samples, axis=0), mean, atol=0.05)
    assert jnp.allclose(jnp.cov(samples.T), cov, atol=0.05)


def test_multivariate_normal_invalid():
    with pytest.raises(ConfigurationError):
        MultivariateNormal(jnp.zeros(2), jnp.eye(3))

    with pytest.raises(ConfigurationError):
        MultivariateNormal(jnp.zeros(2), jnp.array([[1.0, 0.5], [0.0, 1.0]]))

    with pytest.raises(ConfigurationError):
        MultivariateNormal(jnp.zeros(2), jnp.array([[1.0, 2.0], [2.0, 1.0]]))


def test_gaussian_mixture_log_prob():
    density = bimodal_1d()
    x = jnp.array([1.4])

    expected = jnp.log(0.3 * norm.pdf(1.4, 1.0, 0.2) + 0.7 * norm.pdf(1.4, 2.0, 0.3))
    assert jnp.isclose(density.log_prob(x), expected)


def test_gaussian_mixture_sample(key):
    density = bimodal_2d()
    samples = density.sample(key, 20_000)

    expected_mean = 0.3 * jnp.array([2.0, 0.0]) + 0.7 * jnp.array([0.0, 2.0])
    assert samples.shape == (20_000, 2)
    assert jnp.allclose(jnp.mean(samples, axis=0), expected_mean, atol=0.05)


def test_gaussian_mixture_normalizes_weights():
    density = GaussianMixture(
        weights=jnp.array([1.0, 3.0]),
        components=[Normal(0.0, 1.0), Normal(1.0, 1.0)],
    )
    assert jnp.allclose(density.weights, jnp.array([0.25, 0.75]))


def test_gaussian_mixture_invalid():
    with pytest.raises(ConfigurationError):
        GaussianMixture(jnp.array([1.0]), [Normal(0.0, 1.0), Normal(1.0, 1.0)])

    with pytest.raises(ConfigurationError):
        GaussianMixture(jnp.array([-1.0, 2.0]), [Normal(0.0, 1.0), Normal(1.0, 1.0)])

    with pytest.raises(ConfigurationError):
        GaussianMixture(
            jnp.array([1.0, 1.0]), [Normal(0.0, 1.0), Normal(jnp.zeros(2), 1.0)]
        )


def test_unnormalized():
    density = bimodal_2d()
    unnormalized = Unnormalized(density, log_normalizer=1.5)
    x = jnp.array([0.1, 0.2])

    assert jnp.isclose(unnormalized.log_prob(x), density.log_prob(x) - 1.5)
    assert unnormalized.num_dims == density.num_dims


def test_sample_is_deterministic(key):
    density = bimodal_2d_initial()
    assert jnp.array_equal(density.sample(key, 16), density.sample(key, 16))

    other = density.sample(jax.random.key(1), 16)
    assert not jnp.array_equal(density.sample(key, 16), other)
