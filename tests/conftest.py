"""Pytest configuration file for steinax tests."""

import jax
import jax.numpy as jnp
import pytest
from steinax import GibbsKernel, Normal, RBFKernel, SVGDEngine


# Common test parameters
@pytest.fixture
def num_dims():
    return 2


@pytest.fixture
def num_particles():
    return 8


@pytest.fixture
def key():
    return jax.random.key(0)


@pytest.fixture
def target(num_dims):
    """Standard normal target density."""
    return Normal(jnp.zeros(num_dims), 1.0)


@pytest.fixture
def initial(num_dims):
    """Initial distribution away from the target mode."""
    return Normal(-jnp.ones(num_dims), 0.5)


@pytest.fixture
def engine(target, initial, num_particles):
    return SVGDEngine(
        target=target,
        initial=initial,
        num_particles=num_particles,
        step_size=0.1,
    )


@pytest.fixture(
    params=[
        RBFKernel(1.0),
        GibbsKernel(2.0),
        GibbsKernel(lambda x: 1.0 + 0.1 * jnp.sum(jnp.square(x))),
    ],
    ids=["rbf", "gibbs_constant", "gibbs_pointwise"],
)
def kernel(request):
    return request.param
