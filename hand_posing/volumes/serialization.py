"""
JSON representation of surfaces, reference frames and poses.

Scene file layout:
{
    "surface": {"variant": "cylinder", "version": 1,
                "start_point": [0, 0, -0.05], "end_point": [0, 0.2, -0.05],
                "angle": 90.0},
    "grip_point": {"position": [0, 1, 0.05], "rotation": [0, 0, 0, 1]},
    "transform": {"position": [0, 1, 0], "rotation": [0, 0, 0, 1]},
    "relative_to": null
}

Rotations are scalar-last quaternions (x, y, z, w). ``scale`` is optional
on transforms and defaults to [1, 1, 1].
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, Union

from hand_posing.geometry.pose import Pose, Transform
from hand_posing.orientation.rotation import Rotation3D
from hand_posing.volumes.cylinder import CylinderSurface
from hand_posing.volumes.surface import (
    InvalidDataVariant,
    SnapSurface,
    SurfaceVariant,
    surface_data_from_dict,
)

logger = logging.getLogger(__name__)

SURFACE_TYPES: Dict[SurfaceVariant, Type[SnapSurface]] = {
    SurfaceVariant.CYLINDER: CylinderSurface,
}


class SceneLoadError(Exception):
    """Scene file is missing, unreadable or malformed."""


def transform_to_dict(transform: Transform) -> Dict[str, Any]:
    return {
        "position": transform.position.tolist(),
        "rotation": transform.rotation.as_quaternion().tolist(),
        "scale": transform.scale.tolist(),
    }


def transform_from_dict(payload: Mapping[str, Any], name: str = "") -> Transform:
    return Transform(
        position=payload.get("position", [0.0, 0.0, 0.0]),
        rotation=Rotation3D.from_quaternion(payload.get("rotation", [0.0, 0.0, 0.0, 1.0])),
        scale=payload.get("scale", [1.0, 1.0, 1.0]),
        name=name,
    )


def pose_to_dict(pose: Pose) -> Dict[str, Any]:
    return {
        "position": pose.position.tolist(),
        "rotation": pose.rotation.as_quaternion().tolist(),
    }


def pose_from_dict(payload: Mapping[str, Any]) -> Pose:
    return Pose(
        position=payload["position"],
        rotation=Rotation3D.from_quaternion(payload["rotation"]),
    )


@dataclass
class SurfaceScene:
    """A surface together with the frames it observes.

    Surfaces only keep weak references to their frames, so the scene
    holds the strong ones for as long as it is alive.
    """
    surface: SnapSurface
    grip_point: Optional[Transform] = None
    transform: Optional[Transform] = None
    relative_to: Optional[Transform] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "surface": self.surface.to_dict(),
            "grip_point": transform_to_dict(self.grip_point) if self.grip_point is not None else None,
            "transform": transform_to_dict(self.surface.transform),
            "relative_to": transform_to_dict(self.relative_to) if self.relative_to is not None else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Scene saved to %s", path)


def scene_from_dict(payload: Mapping[str, Any]) -> SurfaceScene:
    """Build a SurfaceScene from its dictionary form.

    Raises:
        SceneLoadError: if the payload is malformed or of unknown variant
    """
    try:
        data = surface_data_from_dict(payload["surface"])
        grip_point = _optional_transform(payload.get("grip_point"), "grip_point")
        transform = _optional_transform(payload.get("transform"), "transform")
        relative_to = _optional_transform(payload.get("relative_to"), "relative_to")
    except (InvalidDataVariant, KeyError, TypeError, ValueError) as e:
        raise SceneLoadError(f"Malformed scene: {e}") from e

    surface_cls = SURFACE_TYPES[data.variant]
    surface = surface_cls(
        data=data,
        grip_point=grip_point,
        relative_to=relative_to,
        transform=transform,
    )
    return SurfaceScene(surface, grip_point, surface.transform, relative_to)


def load_scene(path: Union[str, Path]) -> SurfaceScene:
    """Load a scene JSON file.

    Raises:
        SceneLoadError: if the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError:
        raise SceneLoadError(f"Scene file not found: {str(path)!r}") from None
    except (OSError, json.JSONDecodeError) as e:
        raise SceneLoadError(f"Failed to read scene {str(path)!r}: {e}") from e

    scene = scene_from_dict(payload)
    logger.info(
        "Scene loaded from %s", path,
        extra={"variant": scene.surface.data.variant.value},
    )
    return scene


def _optional_transform(payload: Optional[Mapping[str, Any]], name: str) -> Optional[Transform]:
    if payload is None:
        return None
    return transform_from_dict(payload, name=name)
