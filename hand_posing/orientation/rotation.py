"""
Rotation utilities for hand and grip orientations.

Provides:
- Rotation3D class for representing and composing rotations
- Constructors from axis-angle and look directions
- Quaternion conversion (scalar-last, x y z w) for persisted poses

Axis convention: right = +X, up = +Y, forward = +Z.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation as ScipyRotation

from hand_posing.geometry.vectors import (
    FORWARD,
    RIGHT,
    UP,
    is_zero,
    normalized,
    perpendicular,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Rotation3D:
    """3D rotation represented as a rotation matrix.

    Attributes:
        matrix: 3x3 orthogonal rotation matrix (det = +1)
    """
    matrix: NDArray[np.float64]

    def __post_init__(self):
        """Validate rotation matrix."""
        self.matrix = np.array(self.matrix, dtype=np.float64)
        if self.matrix.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got {self.matrix.shape}")

    @classmethod
    def identity(cls) -> 'Rotation3D':
        """Create identity rotation (no rotation)."""
        return cls(np.eye(3))

    @classmethod
    def from_axis_angle(cls, axis: ArrayLike, angle_rad: float) -> 'Rotation3D':
        """Create rotation from axis and angle (Rodrigues' formula).

        Args:
            axis: 3D rotation axis (normalized internally)
            angle_rad: Rotation angle in radians

        Returns:
            Rotation3D instance; identity if the axis is zero-length
        """
        axis = normalized(axis)
        if is_zero(axis):
            return cls.identity()

        c = np.cos(angle_rad)
        s = np.sin(angle_rad)
        t = 1 - c

        x, y, z = axis
        matrix = np.array([
            [t*x*x + c,   t*x*y - s*z, t*x*z + s*y],
            [t*x*y + s*z, t*y*y + c,   t*y*z - s*x],
            [t*x*z - s*y, t*y*z + s*x, t*z*z + c],
        ])
        return cls(matrix)

    @classmethod
    def angle_axis(cls, angle_deg: float, axis: ArrayLike) -> 'Rotation3D':
        """Create rotation of ``angle_deg`` degrees about ``axis``."""
        return cls.from_axis_angle(axis, np.radians(angle_deg))

    @classmethod
    def look_rotation(cls, forward: ArrayLike, up: ArrayLike = UP) -> 'Rotation3D':
        """Create rotation whose forward (+Z) axis looks along ``forward``.

        The rotated up (+Y) axis is as close to ``up`` as possible. A
        zero-length forward gives identity; an ``up`` parallel to
        ``forward`` is replaced by a deterministic perpendicular.
        """
        f = normalized(forward)
        if is_zero(f):
            logger.debug("Look rotation with zero forward vector, using identity")
            return cls.identity()

        r = normalized(np.cross(np.asarray(up, dtype=np.float64), f))
        if is_zero(r):
            r = perpendicular(f)
        u = np.cross(f, r)
        return cls(np.column_stack([r, u, f]))

    @classmethod
    def from_quaternion(cls, quat: Sequence[float]) -> 'Rotation3D':
        """Create rotation from a scalar-last quaternion (x, y, z, w)."""
        quat = np.asarray(quat, dtype=np.float64)
        if quat.shape != (4,):
            raise ValueError(f"Quaternion must have 4 components, got {quat.shape}")
        if is_zero(quat[:3]) and abs(quat[3]) < 1e-12:
            raise ValueError("Quaternion must be non-zero")
        return cls(ScipyRotation.from_quat(quat).as_matrix())

    def as_quaternion(self) -> NDArray[np.float64]:
        """Scalar-last quaternion (x, y, z, w) with non-negative w."""
        quat = ScipyRotation.from_matrix(self.matrix).as_quat()
        if quat[3] < 0:
            quat = -quat
        return quat

    def apply(self, points: ArrayLike) -> NDArray[np.float64]:
        """Apply rotation to points.

        Args:
            points: 3-vector or Nx3 array of 3D points

        Returns:
            Rotated array of the same shape
        """
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            return self.matrix @ points
        return points @ self.matrix.T

    def compose(self, other: 'Rotation3D') -> 'Rotation3D':
        """Compose with another rotation: self * other.

        Result applies `other` first, then `self`.
        """
        return Rotation3D(self.matrix @ other.matrix)

    def inverse(self) -> 'Rotation3D':
        """Get inverse rotation (transpose of an orthogonal matrix)."""
        return Rotation3D(self.matrix.T)

    @property
    def right(self) -> NDArray[np.float64]:
        return self.matrix @ RIGHT

    @property
    def up(self) -> NDArray[np.float64]:
        return self.matrix @ UP

    @property
    def forward(self) -> NDArray[np.float64]:
        return self.matrix @ FORWARD

    @property
    def axis_angle(self) -> Tuple[NDArray[np.float64], float]:
        """Extract axis and angle from rotation matrix.

        Returns:
            (axis, angle_rad) tuple
        """
        rotvec = ScipyRotation.from_matrix(self.matrix).as_rotvec()
        angle = float(np.linalg.norm(rotvec))
        if angle < 1e-9:
            return RIGHT.copy(), 0.0
        return rotvec / angle, angle

    def angle_to(self, other: 'Rotation3D') -> float:
        """Smallest angle in degrees between two orientations."""
        _, angle = self.inverse().compose(other).axis_angle
        return float(np.degrees(angle))

    def is_identity(self, tol: float = 1e-9) -> bool:
        """Check if rotation is identity."""
        return np.allclose(self.matrix, np.eye(3), atol=tol)

    def is_close(self, other: 'Rotation3D', tol: float = 1e-9) -> bool:
        return np.allclose(self.matrix, other.matrix, atol=tol)

    def __matmul__(self, other: 'Rotation3D') -> 'Rotation3D':
        """Matrix multiplication operator."""
        return self.compose(other)

    def __repr__(self) -> str:
        x, y, z, w = self.as_quaternion()
        return f"Rotation3D(quat=({x:.4f}, {y:.4f}, {z:.4f}, {w:.4f}))"

