"""
hand_posing: snap virtual hands onto grabbable objects.

Bounded snap surfaces clamp a live hand pose onto the valid region of an
object while keeping the direction the user approached from.
The command line entry point is main.py.
"""

from hand_posing.logging_config import setup_logging, log_timing
from hand_posing.geometry import Pose, Transform
from hand_posing.orientation import Rotation3D
from hand_posing.volumes import (
    CylinderSurface,
    CylinderSurfaceData,
    InvalidDataVariant,
    SnapSurface,
    SurfaceData,
    SurfaceVariant,
)
from hand_posing.service import HandPosingService, ServiceState

__all__ = [
    "setup_logging",
    "log_timing",
    "Pose",
    "Transform",
    "Rotation3D",
    "CylinderSurface",
    "CylinderSurfaceData",
    "InvalidDataVariant",
    "SnapSurface",
    "SurfaceData",
    "SurfaceVariant",
    "HandPosingService",
    "ServiceState",
]

__version__ = "0.1.0"
