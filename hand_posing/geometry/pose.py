"""
Rigid poses and reference frames.

Pose is a plain value (position + rotation). Transform is an externally
owned, mutable reference frame (grip point, relative-to frame, owning
object) that surfaces read but never own.
"""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from hand_posing.geometry.vectors import as_vector
from hand_posing.orientation.rotation import Rotation3D


@dataclass(eq=False)
class Pose:
    """Position and orientation in some frame.

    Attributes:
        position: 3D position
        rotation: orientation
    """
    position: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    rotation: Rotation3D = field(default_factory=Rotation3D.identity)

    def __post_init__(self):
        self.position = as_vector(self.position)

    def is_close(self, other: 'Pose', tol: float = 1e-9) -> bool:
        """Compare position and rotation within tolerance."""
        return (
            np.allclose(self.position, other.position, atol=tol)
            and self.rotation.is_close(other.rotation, tol)
        )

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"Pose(position=({x:.4f}, {y:.4f}, {z:.4f}), rotation={self.rotation!r})"


@dataclass(eq=False)
class Transform:
    """Mutable rigid reference frame with optional per-axis scale.

    Surfaces only hold weak references to transforms, so the owner
    (scene graph, tests, CLI scene loader) must keep them alive.

    Attributes:
        position: World position of the frame origin
        rotation: World orientation of the frame
        scale: Local per-axis scale applied before rotation
    """
    position: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    rotation: Rotation3D = field(default_factory=Rotation3D.identity)
    scale: NDArray[np.float64] = field(default_factory=lambda: np.ones(3))
    name: str = ""

    def __post_init__(self):
        self.position = as_vector(self.position)
        self.scale = as_vector(self.scale)
        if np.any(self.scale == 0.0):
            raise ValueError(f"Transform scale must be non-zero, got {self.scale}")

    @property
    def up(self) -> NDArray[np.float64]:
        return self.rotation.up

    @property
    def forward(self) -> NDArray[np.float64]:
        return self.rotation.forward

    @property
    def right(self) -> NDArray[np.float64]:
        return self.rotation.right

    def transform_point(self, point: ArrayLike) -> NDArray[np.float64]:
        """Local point to world space."""
        return self.position + self.rotation.apply(as_vector(point) * self.scale)

    def inverse_transform_point(self, point: ArrayLike) -> NDArray[np.float64]:
        """World point to local space."""
        return self.rotation.inverse().apply(as_vector(point) - self.position) / self.scale

    @property
    def pose(self) -> Pose:
        return Pose(self.position.copy(), self.rotation)
