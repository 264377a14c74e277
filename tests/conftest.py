"""
Pytest configuration and fixtures for hand_posing.

Provides:
- Reference frames (grip point, relative-to frame)
- A standard cylinder arc surface
- Logger reset between tests
- Geometry assertion helpers
"""

import logging
from typing import Optional, Tuple

import numpy as np
import pytest

from hand_posing.geometry.pose import Transform
from hand_posing.geometry.vectors import project_on_plane, repeat, signed_angle
from hand_posing.orientation.rotation import Rotation3D
from hand_posing.volumes.cylinder import CylinderSurface, CylinderSurfaceData


# ============================================================================
# Logging Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog keeps receiving hand_posing records."""
    yield
    package_logger = logging.getLogger("hand_posing")
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.filters.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ============================================================================
# Surface Fixtures
# ============================================================================

@pytest.fixture
def grip_point() -> Transform:
    """Grip at world (0, 0, 1), identity rotation."""
    return Transform(position=[0.0, 0.0, 1.0], name="grip")


@pytest.fixture
def cylinder_data() -> CylinderSurfaceData:
    """Axis 2 units long, 1 unit behind the grip, 90 degree sweep."""
    return CylinderSurfaceData(
        start_point=[0.0, 0.0, -1.0],
        end_point=[0.0, 2.0, -1.0],
        angle=90.0,
    )


@pytest.fixture
def cylinder(grip_point: Transform, cylinder_data: CylinderSurfaceData) -> CylinderSurface:
    """Standard arc: start (0,0,0), end (0,2,0), radius 1, sweep from +Z to +X."""
    return CylinderSurface(data=cylinder_data, grip_point=grip_point)


# ============================================================================
# Assertion Helpers
# ============================================================================

def point_on_arc(surface: CylinderSurface, altitude: float, angle_deg: float,
                 radius: Optional[float] = None) -> np.ndarray:
    """Point at ``altitude`` along the axis and ``angle_deg`` from start_angle_dir."""
    if radius is None:
        radius = surface.radius
    radial = Rotation3D.angle_axis(angle_deg, surface.direction).apply(surface.start_angle_dir)
    return surface.start_point + surface.direction * altitude + radial * radius


def arc_coordinates(surface: CylinderSurface, point: np.ndarray) -> Tuple[float, float, float]:
    """(altitude, angle in [0, 360), radial distance) of a point."""
    offset = np.asarray(point) - surface.start_point
    altitude = float(np.dot(offset, surface.direction))
    radial = project_on_plane(offset, surface.direction)
    angle = repeat(signed_angle(surface.start_angle_dir, radial, surface.direction))
    return altitude, angle, float(np.linalg.norm(radial))


def assert_unit_vector(vec: np.ndarray) -> None:
    """Assert vector is finite and of unit length."""
    assert vec.shape == (3,)
    assert np.all(np.isfinite(vec))
    assert np.isclose(np.linalg.norm(vec), 1.0, atol=1e-9)


def assert_rotation(rotation: Rotation3D) -> None:
    """Assert matrix is a finite proper rotation."""
    assert np.all(np.isfinite(rotation.matrix))
    assert np.allclose(rotation.matrix @ rotation.matrix.T, np.eye(3), atol=1e-9)
    assert np.isclose(np.linalg.det(rotation.matrix), 1.0, atol=1e-9)
