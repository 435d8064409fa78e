from __future__ import annotations

import math

import jax.numpy as jnp
import pytest

from minigsg.core.math3d import quat_to_matrix, rotate_around_axis
from minigsg.core.types import Pose
from minigsg.scene_graph.planar_contact import (
    OUTWARD_NORMAL_FLIP,
    PlanarContact,
    closest_approximating_contact,
    planar_contact_to_6dof,
)


def test_outward_normal_flip_reverses_z():
    R = quat_to_matrix(OUTWARD_NORMAL_FLIP)
    assert jnp.allclose(R @ jnp.array([0.0, 0.0, 1.0]), jnp.array([0.0, 0.0, -1.0]), atol=1e-12)
    # swaps x and y
    assert jnp.allclose(R @ jnp.array([1.0, 0.0, 0.0]), jnp.array([0.0, 1.0, 0.0]), atol=1e-12)


def test_zero_contact_is_pure_flip():
    p = planar_contact_to_6dof(PlanarContact(0.0, 0.0, 0.0))
    assert p.isapprox(Pose.from_rotation(OUTWARD_NORMAL_FLIP))


def test_contact_translates_before_rotating():
    """The (x, y) offset is expressed in the parent plane, not rotated by the angle."""
    p = planar_contact_to_6dof(PlanarContact(0.3, -0.2, 1.0))
    assert jnp.allclose(p.pos, jnp.array([0.3, -0.2, 0.0]), atol=1e-12)
    expected = quat_to_matrix(OUTWARD_NORMAL_FLIP) @ quat_to_matrix(rotate_around_axis([0.0, 0.0, 1.0], 1.0))
    assert jnp.allclose(p.rotation, expected, atol=1e-12)


def test_slack_is_applied_on_the_right():
    slack = Pose.from_xyz(0.0, 0.0, 0.01, rotate_around_axis([1.0, 0.0, 0.0], 0.05))
    exact = planar_contact_to_6dof(PlanarContact(0.1, 0.2, 0.3))
    inexact = planar_contact_to_6dof(PlanarContact(0.1, 0.2, 0.3, slack))
    assert inexact.isapprox(exact * slack)
    assert PlanarContact(0.1, 0.2, 0.3).is_exact
    assert not PlanarContact(0.1, 0.2, 0.3, slack).is_exact


def test_round_trip_is_exact(sample_poses):
    for p in sample_poses:
        c = closest_approximating_contact(p)
        assert planar_contact_to_6dof(c).isapprox(p, atol=1e-9)


@pytest.mark.parametrize(
    "x, y, angle",
    [
        (0.0, 0.0, 0.0),
        (1.5, -0.25, 0.3),
        (-2.0, 3.0, -2.9),
        (0.1, 0.1, math.pi),
        (0.0, -1.0, 5.0),
        (4.0, 0.5, -7.5),
    ],
)
def test_exact_contact_is_recovered(x, y, angle):
    pose = planar_contact_to_6dof(PlanarContact(x, y, angle))
    c = closest_approximating_contact(pose)
    assert c.slack.isapprox(Pose.identity(), atol=1e-9)
    assert c.x == pytest.approx(x, abs=1e-12)
    assert c.y == pytest.approx(y, abs=1e-12)
    # angles agree modulo 2*pi
    assert math.cos(c.angle) == pytest.approx(math.cos(angle), abs=1e-9)
    assert math.sin(c.angle) == pytest.approx(math.sin(angle), abs=1e-9)


def test_slack_translation_is_along_normal(sample_poses):
    for p in sample_poses:
        slack = closest_approximating_contact(p).slack
        assert jnp.allclose(slack.pos[:2], jnp.zeros(2), atol=1e-9)


def test_best_fit_angle_beats_neighbours(sample_poses):
    """The chosen angle leaves no more rotational slack than nearby angles."""

    def slack_angle(pose: Pose, c: PlanarContact) -> float:
        residual = planar_contact_to_6dof(PlanarContact(c.x, c.y, c.angle)).ldiv(pose)
        return 2.0 * math.acos(min(abs(residual.quat_wxyz[0]), 1.0))

    for p in sample_poses[:6]:
        c = closest_approximating_contact(p)
        best = slack_angle(p, c)
        for delta in (-0.1, -0.01, 0.01, 0.1):
            other = PlanarContact(c.x, c.y, c.angle + delta)
            assert best <= slack_angle(p, other) + 1e-9


def test_lifted_pose_keeps_angle():
    """A contact lifted off the plane is fitted with the same (x, y, angle) and a pure z slack."""
    lift = Pose.from_translation([0.0, 0.0, 0.05])
    pose = planar_contact_to_6dof(PlanarContact(0.2, 0.4, 0.9)) * lift
    c = closest_approximating_contact(pose)
    assert c.angle == pytest.approx(0.9, abs=1e-9)
    assert c.slack.isapprox(lift, atol=1e-9)
