"""Type definitions."""

from collections.abc import Callable
from typing import Any, TypeAlias

import jax
from flax import struct

PyTree: TypeAlias = Any

Particle: TypeAlias = jax.Array
Particles: TypeAlias = jax.Array
Scores: TypeAlias = jax.Array
LogProbFn: TypeAlias = Callable[[jax.Array], jax.Array]
ScoreFn: TypeAlias = Callable[[jax.Array], jax.Array]


@struct.dataclass
class State:
    pass


@struct.dataclass
class Params:
    pass
