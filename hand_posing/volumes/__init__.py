"""
Snap volumes: bounded surfaces a grip can slide along.

Modules:
    surface: abstract contract, payload base and variant registry
    cylinder: cylindrical arc surface
    serialization: JSON scenes, frames and poses
"""

from hand_posing.volumes.surface import (
    InvalidDataVariant,
    SnapSurface,
    SurfaceData,
    SurfaceVariant,
    register_variant,
    surface_data_from_dict,
)
from hand_posing.volumes.cylinder import CylinderSurface, CylinderSurfaceData
from hand_posing.volumes.serialization import (
    SceneLoadError,
    SurfaceScene,
    load_scene,
    pose_from_dict,
    pose_to_dict,
    scene_from_dict,
)

__all__ = [
    "InvalidDataVariant",
    "SnapSurface",
    "SurfaceData",
    "SurfaceVariant",
    "register_variant",
    "surface_data_from_dict",
    "CylinderSurface",
    "CylinderSurfaceData",
    "SceneLoadError",
    "SurfaceScene",
    "load_scene",
    "pose_from_dict",
    "pose_to_dict",
    "scene_from_dict",
]
