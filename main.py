"""
Command line entry point: query snap surfaces stored in scene files.

Usage:
    python main.py describe <scene.json>
    python main.py nearest <scene.json> --point X Y Z
    python main.py snap <scene.json> --user-pose PX PY PZ QX QY QZ QW --snap-pose ...
    python main.py invert <scene.json> --pose PX PY PZ QX QY QZ QW
    python main.py init-config [--path .handposing.json]

Results are printed to stdout as JSON. Rotations are scalar-last
quaternions (x, y, z, w).
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from hand_posing.geometry.pose import Pose
from hand_posing.logging_config import log_timing, setup_logging
from hand_posing.orientation.rotation import Rotation3D
from hand_posing.project_config import (
    CONFIG_FILENAME,
    ProjectConfig,
    apply_config_to_globals,
    create_sample_config,
    load_config,
)
from hand_posing.volumes.cylinder import CylinderSurface
from hand_posing.volumes.serialization import SceneLoadError, SurfaceScene, load_scene, pose_to_dict

logger = logging.getLogger("hand_posing.cli")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def describe_surface(scene: SurfaceScene) -> Dict[str, Any]:
    """Derived properties of the scene's surface."""
    surface = scene.surface
    result: Dict[str, Any] = {
        "variant": surface.data.variant.value,
        "data": surface.to_dict(),
    }
    if isinstance(surface, CylinderSurface):
        result.update({
            "start_point": surface.start_point.tolist(),
            "end_point": surface.end_point.tolist(),
            "angle": surface.angle,
            "radius": surface.radius,
            "height": surface.height,
            "direction": surface.direction.tolist(),
            "start_angle_dir": surface.start_angle_dir.tolist(),
            "end_angle_dir": surface.end_angle_dir.tolist(),
            "rotation": surface.rotation.as_quaternion().tolist(),
        })
    return result


def _pose_arg(values: Sequence[float]) -> Pose:
    return Pose(values[:3], Rotation3D.from_quaternion(values[3:]))


def run_command(args: argparse.Namespace, config: ProjectConfig) -> Dict[str, Any]:
    """Execute a scene command and return its JSON-ready result.

    Raises:
        SceneLoadError: if the scene cannot be loaded
        ValueError: if a pose argument is invalid
    """
    apply_config_to_globals(config)

    with log_timing(logger, f"{args.command} {args.scene}"):
        scene = load_scene(args.scene)
        surface = scene.surface

        if args.command == "describe":
            return describe_surface(scene)
        if args.command == "nearest":
            return {"point": surface.nearest_point_in_surface(args.point).tolist()}
        if args.command == "snap":
            pose = surface.similar_place_at_volume(_pose_arg(args.user_pose), _pose_arg(args.snap_pose))
            return pose_to_dict(pose)
        if args.command == "invert":
            return pose_to_dict(surface.inverted_pose(_pose_arg(args.pose)))

    raise ValueError(f"Unknown command: {args.command}")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query hand posing snap surfaces.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help=f"Path to a {CONFIG_FILENAME} configuration file.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable DEBUG logging.",
    )
    parser.add_argument(
        "--log-json",
        default=None,
        dest="log_json",
        help="Also write JSON log lines to this file.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    describe = sub.add_parser("describe", help="Print derived surface properties.")
    describe.add_argument("scene", help="Scene JSON file.")

    nearest = sub.add_parser("nearest", help="Nearest point on the surface.")
    nearest.add_argument("scene", help="Scene JSON file.")
    nearest.add_argument("--point", nargs=3, type=float, required=True, metavar=("X", "Y", "Z"))

    pose_metavar = ("PX", "PY", "PZ", "QX", "QY", "QZ", "QW")
    snap = sub.add_parser("snap", help="Place a snap pose following the user pose.")
    snap.add_argument("scene", help="Scene JSON file.")
    snap.add_argument("--user-pose", nargs=7, type=float, required=True, dest="user_pose", metavar=pose_metavar)
    snap.add_argument("--snap-pose", nargs=7, type=float, required=True, dest="snap_pose", metavar=pose_metavar)

    invert = sub.add_parser("invert", help="Mirror a pose about the surface.")
    invert.add_argument("scene", help="Scene JSON file.")
    invert.add_argument("--pose", nargs=7, type=float, required=True, metavar=pose_metavar)

    init_config = sub.add_parser("init-config", help="Write a sample configuration file.")
    init_config.add_argument("--path", default=CONFIG_FILENAME)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    config = load_config(
        scene_path=getattr(args, "scene", None),
        explicit_config=args.config,
    )
    level = logging.DEBUG if args.verbose or config.logging.verbose else config.logging.level_number
    setup_logging(
        level=level,
        json_file=args.log_json or config.logging.json_file,
        use_colors=config.logging.use_colors,
    )

    if args.command == "init-config":
        create_sample_config(args.path)
        return 0

    try:
        result = run_command(args, config)
    except SceneLoadError as exc:
        logger.critical("Scene load error: %s", exc)
        return 1
    except ValueError as exc:
        logger.critical("Invalid argument: %s", exc)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
