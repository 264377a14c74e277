"""
Cylindrical arc snap surface.

The surface is a circular arc of ``angle`` degrees swept around the axis
from ``start_point`` to ``end_point``. Its radius and the start of the
sweep come from the grip point: the arc passes through the grip point and
opens counter-clockwise (right-hand rule about the axis) from it.

Degenerate geometry never produces NaN:

- no grip point: radius 0, sweep starts at world forward
- start == end: axis falls back to grip point up, or world up
- grip point on the axis: sweep starts at the grip forward projected on
  the cross-section plane, or any fixed perpendicular of the axis
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

import numpy as np
from numpy.typing import ArrayLike, NDArray

from hand_posing import config as cfg
from hand_posing.geometry.pose import Pose
from hand_posing.geometry.vectors import (
    FORWARD,
    UP,
    as_vector,
    distance,
    is_zero,
    normalized,
    perpendicular,
    project,
    project_on_plane,
    repeat,
    signed_angle,
)
from hand_posing.orientation.rotation import Rotation3D
from hand_posing.volumes.surface import (
    SnapSurface,
    SurfaceData,
    SurfaceVariant,
    register_variant,
)

logger = logging.getLogger(__name__)


@register_variant
@dataclass(eq=False)
class CylinderSurfaceData(SurfaceData):
    """Cylinder arc payload.

    Attributes:
        start_point: Axis start, in the grip point's local frame
        end_point: Axis end, in the grip point's local frame
        angle: Swept angle in degrees, kept in [0, 360)
    """
    variant = SurfaceVariant.CYLINDER

    start_point: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    end_point: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    angle: float = 0.0

    def __post_init__(self):
        self.start_point = as_vector(self.start_point)
        self.end_point = as_vector(self.end_point)
        angle = float(self.angle)
        if not math.isfinite(angle):
            raise ValueError(f"Cylinder angle must be finite, got {angle}")
        self.angle = repeat(angle, cfg.FULL_TURN_DEG)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({
            "start_point": self.start_point.tolist(),
            "end_point": self.end_point.tolist(),
            "angle": self.angle,
        })
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> 'CylinderSurfaceData':
        return cls(
            version=int(payload.get("version", cfg.DEFAULT_SURFACE_VERSION)),
            start_point=payload["start_point"],
            end_point=payload["end_point"],
            angle=float(payload["angle"]),
        )


class CylinderSurface(SnapSurface):
    """Snap surface shaped as a bounded cylindrical arc."""

    data_type = CylinderSurfaceData

    @property
    def start_point(self) -> NDArray[np.float64]:
        """Axis start in world space."""
        grip = self.grip_point
        if grip is not None:
            return grip.transform_point(self._data.start_point)
        return self._data.start_point.copy()

    @start_point.setter
    def start_point(self, value: ArrayLike) -> None:
        grip = self.grip_point
        if grip is not None:
            self._data.start_point = grip.inverse_transform_point(value)
        else:
            self._data.start_point = as_vector(value)

    @property
    def end_point(self) -> NDArray[np.float64]:
        """Axis end in world space."""
        grip = self.grip_point
        if grip is not None:
            return grip.transform_point(self._data.end_point)
        return self._data.end_point.copy()

    @end_point.setter
    def end_point(self, value: ArrayLike) -> None:
        grip = self.grip_point
        if grip is not None:
            self._data.end_point = grip.inverse_transform_point(value)
        else:
            self._data.end_point = as_vector(value)

    @property
    def angle(self) -> float:
        return self._data.angle

    @angle.setter
    def angle(self, value: float) -> None:
        """Wrap into [0, 360). Non-finite values are logged and ignored."""
        if not math.isfinite(value):
            logger.error(
                "Rejected non-finite angle %r for %s", value, type(self).__name__,
                extra={"event": "invalid_angle"},
            )
            return
        self._data.angle = repeat(value, cfg.FULL_TURN_DEG)

    @property
    def direction(self) -> NDArray[np.float64]:
        """Unit axis from start to end.

        Falls back to the grip point up (or world up) when the endpoints
        coincide.
        """
        axis = self.end_point - self.start_point
        if is_zero(axis):
            grip = self.grip_point
            logger.debug("Degenerate cylinder axis, using %s up", "grip" if grip is not None else "world")
            return normalized(grip.up) if grip is not None else UP.copy()
        return normalized(axis)

    @property
    def radius(self) -> float:
        """Distance from the grip point to the axis, 0 without a grip point."""
        grip = self.grip_point
        if grip is None:
            return 0.0
        start = self.start_point
        projected_point = start + project(grip.position - start, self.direction)
        return distance(projected_point, grip.position)

    @property
    def height(self) -> float:
        return distance(self.end_point, self.start_point)

    @property
    def start_angle_dir(self) -> NDArray[np.float64]:
        """Unit radial direction where the sweep begins."""
        grip = self.grip_point
        if grip is None:
            return FORWARD.copy()
        axis = self.direction
        radial = project_on_plane(grip.position - self.start_point, axis)
        if is_zero(radial):
            radial = project_on_plane(grip.forward, axis)
        if is_zero(radial):
            return perpendicular(axis)
        return normalized(radial)

    @property
    def end_angle_dir(self) -> NDArray[np.float64]:
        """Unit radial direction where the sweep ends."""
        return Rotation3D.angle_axis(self.angle, self.direction).apply(self.start_angle_dir)

    @property
    def rotation(self) -> Rotation3D:
        """Surface basis: forward along start_angle_dir, up along the axis."""
        if np.array_equal(self._data.start_point, self._data.end_point):
            return Rotation3D.look_rotation(FORWARD)
        return Rotation3D.look_rotation(self.start_angle_dir, self.direction)

    def point_altitude(self, point: ArrayLike) -> NDArray[np.float64]:
        """Project ``point`` on the axis, clamped between start and end."""
        start = self.start_point
        axis = self.direction
        height = self.height
        projected = project(as_vector(point) - start, axis)

        if np.linalg.norm(projected) > height:
            projected = normalized(projected) * height
        if np.dot(projected, axis) < 0.0:
            projected = np.zeros(3)

        return start + projected

    def nearest_point_in_surface(self, target: ArrayLike) -> NDArray[np.float64]:
        """Closest point of the arc to ``target``.

        The altitude is clamped to [0, height]. An angle past the sweep
        snaps to whichever boundary is angularly closer; an exact tie
        goes to the end boundary. A target on the axis maps to the axis.
        """
        target = as_vector(target)
        axis = self.direction
        start_dir = self.start_angle_dir
        projected_point = self.point_altitude(target)
        target_direction = normalized(project_on_plane(target - projected_point, axis))

        desired_angle = repeat(signed_angle(start_dir, target_direction, axis), cfg.FULL_TURN_DEG)
        if desired_angle > self.angle:
            to_end = desired_angle - self.angle
            to_start = cfg.FULL_TURN_DEG - desired_angle
            if to_end <= to_start + cfg.ANGLE_TIE_TOLERANCE_DEG:
                target_direction = self.end_angle_dir
            else:
                target_direction = start_dir

        return projected_point + target_direction * self.radius

    def calculate_rotation_offset(self, surface_point: ArrayLike) -> Rotation3D:
        """Rotation about the axis turning the grip point's radial direction
        onto ``surface_point``'s.

        Identity without a grip point or when either radial vector is
        zero-length. A half turn still spins about the axis.
        """
        grip = self.grip_point
        if grip is None:
            return Rotation3D.identity()
        start = self.start_point
        axis = self.direction
        recorded_direction = project_on_plane(grip.position - start, axis)
        desired_direction = project_on_plane(as_vector(surface_point) - start, axis)
        if is_zero(recorded_direction) or is_zero(desired_direction):
            return Rotation3D.identity()
        return Rotation3D.angle_axis(signed_angle(recorded_direction, desired_direction, axis), axis)

    def similar_place_at_volume(self, user_pose: Pose, snap_pose: Pose) -> Pose:
        """Slide ``snap_pose`` around the arc to follow ``user_pose``.

        The user's rotation relative to the authored snap rotation picks
        the radial direction; the user's position picks the altitude.
        The result is clamped to the surface bounds.
        """
        axis = self.direction
        rot_dif = user_pose.rotation @ snap_pose.rotation.inverse()
        desired_direction = (rot_dif @ self.rotation).apply(FORWARD)
        projected_direction = normalized(project_on_plane(desired_direction, axis))

        altitude_point = self.point_altitude(user_pose.position)
        surface_point = self.nearest_point_in_surface(
            altitude_point + projected_direction * self.radius)
        surface_rotation = self.calculate_rotation_offset(surface_point) @ snap_pose.rotation

        return Pose(surface_point, surface_rotation)

    def inverted_pose(self, pose: Pose) -> Pose:
        frame_rotation = self.reference_frame.rotation
        global_rotation = frame_rotation @ pose.rotation
        inverted = Rotation3D.angle_axis(cfg.INVERSION_ANGLE_DEG, self.start_angle_dir) @ global_rotation
        return Pose(pose.position.copy(), frame_rotation.inverse() @ inverted)
