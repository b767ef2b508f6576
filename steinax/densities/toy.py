"""Toy densities used in the SVGD walkthrough."""

import jax.numpy as jnp

from .gaussian import GaussianMixture, MultivariateNormal, Normal


def bimodal_1d() -> GaussianMixture:
    """One-dimensional mixture 0.3 N(1, 0.2^2) + 0.7 N(2, 0.3^2)."""
    return GaussianMixture(
        weights=jnp.array([0.3, 0.7]),
        components=[Normal(1.0, 0.2), Normal(2.0, 0.3)],
    )


def bimodal_2d() -> GaussianMixture:
    """Two-dimensional mixture of two correlated Gaussians."""
    return GaussianMixture(
        weights=jnp.array([0.3, 0.7]),
        components=[
            MultivariateNormal(
                mean=jnp.array([2.0, 0.0]),
                cov=jnp.array([[0.5, -0.1], [-0.1, 0.5]]),
            ),
            MultivariateNormal(
                mean=jnp.array([0.0, 2.0]),
                cov=jnp.array([[0.5, 0.2], [0.2, 0.5]]),
            ),
        ],
    )


def bimodal_2d_initial() -> MultivariateNormal:
    """Initial particle distribution for `bimodal_2d`, away from both modes."""
    return MultivariateNormal(mean=jnp.array([-1.0, -1.0]), cov=0.2 * jnp.eye(2))
