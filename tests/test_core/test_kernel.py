"""Tests for kernel functions."""

import jax
import jax.numpy as jnp
import pytest
from steinax.core.kernel import GibbsKernel, RBFKernel, kernel_rbf, median_heuristic
from steinax.exceptions import ConfigurationError


def test_kernel_rbf():
    """Test the radial basis function kernel."""
    x = jnp.array([1.0, 2.0, 3.0])
    y = jnp.array([1.0, 2.0, 3.0])

    # When x and y are identical, the kernel should return 1.0
    assert jnp.isclose(kernel_rbf(x, y, 1.0), 1.0)

    # Test with different vectors
    y = jnp.array([2.0, 3.0, 4.0])
    dist_sq = jnp.sum(jnp.square(x - y))
    assert jnp.isclose(kernel_rbf(x, y, 1.0), jnp.exp(-0.5 * dist_sq))

    # Test with different lengthscale
    assert jnp.isclose(kernel_rbf(x, y, 2.0), jnp.exp(-0.5 * dist_sq / 4.0))


def test_kernel_symmetry(kernel, key):
    """k(x, y) == k(y, x) for sampled x, y."""
    key_x, key_y = jax.random.split(key)
    xs = jax.random.normal(key_x, (16, 3))
    ys = jax.random.normal(key_y, (16, 3))

    k_xy = jax.vmap(kernel.__call__)(xs, ys)
    k_yx = jax.vmap(kernel.__call__)(ys, xs)
    assert jnp.allclose(k_xy, k_yx)
    assert jnp.all(k_xy >= 0)


def test_kernel_gram_positive_semi_definite(kernel, key):
    """The Gram matrix is symmetric with non-negative eigenvalues."""
    xs = jax.random.normal(key, (12, 2))
    gram = kernel.gram(xs)

    assert gram.shape == (12, 12)
    assert jnp.allclose(gram, gram.T)
    assert jnp.all(jnp.linalg.eigvalsh(gram) > -1e-5)


def test_kernel_identical_points(kernel):
    """Every Gibbs kernel equals one at zero separation."""
    x = jnp.array([0.3, -1.2])
    assert jnp.isclose(kernel(x, x), 1.0)


def test_kernel_gradient_vanishes_at_zero_separation(kernel):
    """The gradient of a smooth even kernel is exactly zero at x == y."""
    x = jnp.array([0.3, -1.2])
    grad = kernel.grad_first_arg(x, x)

    if isinstance(kernel.lengthscale, float):
        assert jnp.array_equal(grad, jnp.zeros_like(x))
    else:
        # A pointwise lengthscale still has a stationary point at x == y
        assert jnp.allclose(grad, jnp.zeros_like(x), atol=1e-6)


def test_gibbs_constant_matches_rbf():
    """A constant Gibbs lengthscale reduces to the RBF kernel."""
    x = jnp.array([0.5, 1.0])
    y = jnp.array([-1.0, 2.0])

    assert jnp.isclose(GibbsKernel(1.5)(x, y), RBFKernel(1.5)(x, y))
    assert jnp.isclose(GibbsKernel(lambda x: 1.5)(x, y), RBFKernel(1.5)(x, y))


def test_rbf_gradient_matches_autodiff():
    """The closed-form RBF gradient agrees with jax.grad."""
    kernel = RBFKernel(0.7)
    x = jnp.array([0.5, 1.0, -0.3])
    y = jnp.array([-1.0, 2.0, 0.1])

    expected = jax.grad(kernel_rbf)(x, y, 0.7)
    assert jnp.allclose(kernel.grad_first_arg(x, y), expected)

    # Gradient points away from y
    assert jnp.dot(kernel.grad_first_arg(x, y), x - y) < 0


def test_gibbs_pointwise_lengthscale():
    """Test the prefactor of the Gibbs kernel with different lengthscales."""
    kernel = GibbsKernel(lambda x: jnp.where(x[0] > 0, 2.0, 1.0))
    x = jnp.array([1.0])
    y = jnp.array([-1.0])

    denom = 2.0**2 + 1.0**2
    expected = jnp.sqrt(2 * 2.0 * 1.0 / denom) * jnp.exp(-4.0 / denom)
    assert jnp.isclose(kernel(x, y), expected)


@pytest.mark.parametrize("lengthscale", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_lengthscale(lengthscale):
    with pytest.raises(ConfigurationError):
        GibbsKernel(lengthscale)

    with pytest.raises(ConfigurationError):
        RBFKernel(lengthscale)


def test_rbf_rejects_pointwise_lengthscale():
    with pytest.raises(ConfigurationError):
        RBFKernel(lambda x: 1.0)


def test_check_lengthscale():
    """A pointwise lengthscale is validated where it is evaluated."""
    kernel = GibbsKernel(lambda x: x[0])
    kernel.check_lengthscale(jnp.array([[1.0, 0.0], [2.0, 0.0]]))

    with pytest.raises(ConfigurationError, match=r"\[1\]"):
        kernel.check_lengthscale(jnp.array([[1.0, 0.0], [-2.0, 0.0]]))


def test_median_heuristic():
    particles = jnp.array([[0.0], [2.0]])

    # Squared distances are [0, 4, 4, 0] with median 2
    expected = jnp.sqrt(1.0 / jnp.log(3.0))
    assert jnp.isclose(median_heuristic(particles), expected)
