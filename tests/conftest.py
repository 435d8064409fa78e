from __future__ import annotations

import jax
import jax.numpy as jnp
import pytest

import minigsg  # noqa: F401  (enables float64 before any array is built)
from minigsg.core.math3d import quat_normalize
from minigsg.core.types import Pose


def random_poses(seed: int, n: int) -> list[Pose]:
    """Deterministic sample of ``n`` poses with positions in [-2, 2]^3."""
    key = jax.random.PRNGKey(seed)
    k_pos, k_quat = jax.random.split(key)
    pos = jax.random.uniform(k_pos, (n, 3), minval=-2.0, maxval=2.0, dtype=jnp.float64)
    quat = jax.random.normal(k_quat, (n, 4), dtype=jnp.float64)
    return [Pose(pos[i], quat_normalize(quat[i])) for i in range(n)]


@pytest.fixture
def sample_poses() -> list[Pose]:
    return random_poses(seed=0, n=16)
