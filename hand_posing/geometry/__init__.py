"""Vector helpers, poses and reference frames."""

from hand_posing.geometry.pose import Pose, Transform
from hand_posing.geometry.vectors import (
    FORWARD,
    RIGHT,
    UP,
    angle_between,
    normalized,
    project,
    project_on_plane,
    repeat,
    signed_angle,
)

__all__ = [
    "Pose",
    "Transform",
    "FORWARD",
    "RIGHT",
    "UP",
    "angle_between",
    "normalized",
    "project",
    "project_on_plane",
    "repeat",
    "signed_angle",
]
