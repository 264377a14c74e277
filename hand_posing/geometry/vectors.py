"""
Vector helpers for 3D snap geometry.

Provides:
- Standard axis constants (right, up, forward)
- Projection on a vector and on a plane
- Safe normalization (zero-length stays zero)
- Signed angle about an axis and angle wraparound

All functions accept array-likes and return new float64 arrays; inputs
are never modified.
"""

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from hand_posing import config as cfg

RIGHT = np.array([1.0, 0.0, 0.0])
UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])


def as_vector(value: ArrayLike) -> NDArray[np.float64]:
    """Coerce to a float64 3-vector (copy)."""
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {vec.shape}")
    return vec


def sqr_magnitude(vec: ArrayLike) -> float:
    v = np.asarray(vec, dtype=np.float64)
    return float(np.dot(v, v))


def is_zero(vec: ArrayLike) -> bool:
    """Check if vector is shorter than the degenerate threshold."""
    return sqr_magnitude(vec) < cfg.EPSILON


def normalized(vec: ArrayLike) -> NDArray[np.float64]:
    """Return unit vector, or zero vector if input is degenerate."""
    v = np.asarray(vec, dtype=np.float64)
    if is_zero(v):
        return np.zeros(3)
    return v / np.linalg.norm(v)


def project(vec: ArrayLike, on_normal: ArrayLike) -> NDArray[np.float64]:
    """Project a vector onto another vector.

    Args:
        vec: Vector to project
        on_normal: Direction to project onto (any length)

    Returns:
        Component of ``vec`` along ``on_normal``; zero if ``on_normal`` is degenerate
    """
    v = np.asarray(vec, dtype=np.float64)
    n = np.asarray(on_normal, dtype=np.float64)
    sqr = sqr_magnitude(n)
    if sqr < cfg.EPSILON:
        return np.zeros(3)
    return n * (np.dot(v, n) / sqr)


def project_on_plane(vec: ArrayLike, plane_normal: ArrayLike) -> NDArray[np.float64]:
    """Project a vector onto the plane orthogonal to ``plane_normal``."""
    v = np.asarray(vec, dtype=np.float64)
    return v - project(v, plane_normal)


def angle_between(a: ArrayLike, b: ArrayLike) -> float:
    """Unsigned angle between two vectors in degrees (0 if either is degenerate)."""
    u = np.asarray(a, dtype=np.float64)
    v = np.asarray(b, dtype=np.float64)
    if is_zero(u) or is_zero(v):
        return 0.0
    cross = np.cross(u, v)
    return math.degrees(math.atan2(float(np.linalg.norm(cross)), float(np.dot(u, v))))


def signed_angle(a: ArrayLike, b: ArrayLike, axis: ArrayLike) -> float:
    """Angle from ``a`` to ``b`` in degrees, signed by the right-hand rule about ``axis``.

    Returns a value in [-180, 180]. Matches ``Rotation3D.angle_axis``:
    rotating ``a`` by ``theta`` about ``axis`` gives a signed angle of ``theta``.
    """
    unsigned = angle_between(a, b)
    if unsigned == 0.0:
        return 0.0
    cross = np.cross(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))
    sign = 1.0 if np.dot(np.asarray(axis, dtype=np.float64), cross) >= 0.0 else -1.0
    return sign * unsigned


def repeat(value: float, length: float = cfg.FULL_TURN_DEG) -> float:
    """Wrap ``value`` into [0, length).

    Float modulo of a tiny negative number can round up to ``length``
    itself, so that case folds back to 0.
    """
    wrapped = math.fmod(float(value), length)
    if wrapped < 0.0:
        wrapped += length
    if wrapped >= length:
        wrapped = 0.0
    return wrapped


def perpendicular(vec: ArrayLike) -> NDArray[np.float64]:
    """Deterministic unit vector orthogonal to ``vec``.

    Uses forward unless ``vec`` is (nearly) parallel to it, then right.
    Degenerate input yields forward.
    """
    v = normalized(vec)
    if is_zero(v):
        return FORWARD.copy()
    candidate = FORWARD if abs(float(np.dot(v, FORWARD))) < 0.9 else RIGHT
    return normalized(project_on_plane(candidate, v))


def distance(a: ArrayLike, b: ArrayLike) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))
