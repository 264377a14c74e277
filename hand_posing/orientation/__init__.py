"""Orientation: rotations for grips, hands and surfaces."""

from hand_posing.orientation.rotation import Rotation3D

__all__ = [
    "Rotation3D",
]
