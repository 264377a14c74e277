"""
Unit tests for hand_posing.geometry.pose module.

Tests:
- Transform point conversion with rotation and scale
- Transform validation
- Pose comparison
"""

import numpy as np
import pytest

from hand_posing.geometry.pose import Pose, Transform
from hand_posing.geometry.vectors import FORWARD, RIGHT, UP
from hand_posing.orientation.rotation import Rotation3D


class TestTransform:
    """Tests for Transform class."""

    def test_default_is_identity(self):
        frame = Transform()
        assert np.allclose(frame.transform_point([1, 2, 3]), [1, 2, 3])

    def test_translation(self):
        frame = Transform(position=[1, 0, 0])
        assert np.allclose(frame.transform_point([0, 1, 0]), [1, 1, 0])

    def test_rotation_then_translation(self):
        frame = Transform(position=[0, 0, 1], rotation=Rotation3D.angle_axis(90, UP))
        assert np.allclose(frame.transform_point(FORWARD), [1, 0, 1])

    def test_scale_applied_before_rotation(self):
        frame = Transform(rotation=Rotation3D.angle_axis(90, UP), scale=[2, 1, 1])
        assert np.allclose(frame.transform_point(RIGHT), [0, 0, -2])

    def test_inverse_round_trip(self):
        frame = Transform(
            position=[0.5, -1, 2],
            rotation=Rotation3D.angle_axis(33, [1, 1, 0]),
            scale=[1, 2, 0.5],
        )
        point = np.array([0.3, 0.7, -1.1])
        assert np.allclose(frame.inverse_transform_point(frame.transform_point(point)), point)

    def test_zero_scale_raises(self):
        with pytest.raises(ValueError):
            Transform(scale=[1, 0, 1])

    def test_axes_follow_rotation(self):
        frame = Transform(rotation=Rotation3D.angle_axis(90, RIGHT))
        assert np.allclose(frame.up, FORWARD)
        assert np.allclose(frame.forward, -UP)
        assert np.allclose(frame.right, RIGHT)

    def test_pose_is_a_copy(self):
        frame = Transform(position=[1, 2, 3])
        pose = frame.pose
        pose.position[0] = 10
        assert frame.position[0] == 1


class TestPose:
    """Tests for Pose class."""

    def test_defaults(self):
        pose = Pose()
        assert np.allclose(pose.position, 0.0)
        assert pose.rotation.is_identity()

    def test_is_close(self):
        a = Pose([1, 2, 3], Rotation3D.angle_axis(10, UP))
        b = Pose([1, 2, 3 + 1e-12], Rotation3D.angle_axis(10 + 1e-12, UP))
        assert a.is_close(b)

    def test_not_close(self):
        a = Pose([1, 2, 3])
        assert not a.is_close(Pose([1, 2, 3.1]))
        assert not a.is_close(Pose([1, 2, 3], Rotation3D.angle_axis(1, UP)))
