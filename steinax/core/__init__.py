"""Core building blocks: kernels and score functions."""

from .kernel import GibbsKernel, Kernel, RBFKernel, kernel_rbf, median_heuristic
from .score import ScoreFunction, check_finite, check_scores

__all__ = [
    "Kernel",
    "GibbsKernel",
    "RBFKernel",
    "kernel_rbf",
    "median_heuristic",
    "ScoreFunction",
    "check_finite",
    "check_scores",
]
