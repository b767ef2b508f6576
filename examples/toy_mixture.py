"""Transport particles from an isotropic Gaussian to a two-component mixture.

Run with `python examples/toy_mixture.py`, requires matplotlib.
"""

import argparse
import logging

import jax
import jax.numpy as jnp
import matplotlib.pyplot as plt

from steinax import GibbsKernel, SVGDEngine, make_grid
from steinax.densities import bimodal_2d, bimodal_2d_initial


def plot_state(ax, engine, target, grid, title):
    """Plot target density, particles and the induced vector field."""
    xs = jnp.linspace(-1.8, 3.8, 100)
    mx, my = jnp.meshgrid(xs, xs)
    points = jnp.stack([mx.ravel(), my.ravel()], axis=-1)
    density = jnp.exp(jax.vmap(target.log_prob)(points)).reshape(mx.shape)

    field = engine.field(grid)
    particles = engine.particles

    ax.contour(mx, my, density, levels=10, cmap="Greys")
    ax.quiver(grid[:, 0], grid[:, 1], field[:, 0], field[:, 1], color="tab:blue")
    ax.scatter(particles[:, 0], particles[:, 1], s=10, color="tab:red", label="θ")
    ax.set_xlim(-1.8, 3.8)
    ax.set_ylim(-1.8, 3.8)
    ax.set_title(title)


def main(num_particles, num_steps, step_size, use_attraction, use_repulsion):
    target = bimodal_2d()
    engine = SVGDEngine(
        target=target,
        initial=bimodal_2d_initial(),
        num_particles=num_particles,
        kernel=GibbsKernel(lengthscale=lambda x: 1.0),
        step_size=step_size,
        use_attraction=use_attraction,
        use_repulsion=use_repulsion,
        seed=1,
    )
    grid = make_grid(-1.8, 3.8, 10)

    fig, axs = plt.subplots(1, 2, figsize=(10, 5))
    plot_state(axs[0], engine, target, grid, "Initial particles")
    for _ in range(num_steps):
        engine.step()
    plot_state(axs[1], engine, target, grid, f"After {num_steps} SVGD steps")
    axs[1].legend()
    plt.show()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--num_particles", type=int, default=50)
    parser.add_argument("--num_steps", type=int, default=100)
    parser.add_argument("--step_size", type=float, default=0.02)
    parser.add_argument("--no_attraction", action="store_true")
    parser.add_argument("--no_repulsion", action="store_true")
    args = parser.parse_args()

    main(
        args.num_particles,
        args.num_steps,
        args.step_size,
        not args.no_attraction,
        not args.no_repulsion,
    )
