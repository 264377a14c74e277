"""
Abstract snap surface contract.

A SnapSurface owns exactly one SurfaceData payload and answers geometric
queries against it:

- nearest_point_in_surface: clamp an arbitrary point onto the surface
- calculate_rotation_offset: reorient a grip that slides along the surface
- similar_place_at_volume: place a snap pose so it keeps the user's approach
- inverted_pose: mirror a pose about the surface (e.g. for the other hand)

Payloads are tagged with a SurfaceVariant discriminator. Assigning a
payload of the wrong variant is logged and ignored; the query methods
never raise.

Grip point and relative-to frames are held through weak references:
the scene owns them and the surface degrades gracefully once they are gone.
"""

import logging
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Type

import numpy as np
from numpy.typing import ArrayLike, NDArray

from hand_posing import config as cfg
from hand_posing.geometry.pose import Pose, Transform
from hand_posing.orientation.rotation import Rotation3D

logger = logging.getLogger(__name__)


class SurfaceVariant(Enum):
    """Discriminator stored with every persisted surface payload."""
    CYLINDER = "cylinder"


class InvalidDataVariant(ValueError):
    """Surface payload does not match the expected variant."""


@dataclass
class SurfaceData(ABC):
    """Serializable geometry payload of a snap surface.

    Subclasses declare their ``variant`` and register themselves with
    ``register_variant`` so payloads can be restored from dictionaries.
    """
    variant: ClassVar[SurfaceVariant]

    version: int = cfg.DEFAULT_SURFACE_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary with the variant tag first."""
        return {"variant": self.variant.value, "version": self.version}

    @classmethod
    @abstractmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> 'SurfaceData':
        """Restore the payload from ``to_dict`` output."""


_DATA_VARIANTS: Dict[SurfaceVariant, Type[SurfaceData]] = {}


def register_variant(data_cls: Type[SurfaceData]) -> Type[SurfaceData]:
    """Class decorator adding a SurfaceData subclass to the variant registry."""
    _DATA_VARIANTS[data_cls.variant] = data_cls
    return data_cls


def surface_data_from_dict(payload: Mapping[str, Any]) -> SurfaceData:
    """Restore a SurfaceData from its dictionary form.

    Args:
        payload: Dictionary produced by ``SurfaceData.to_dict``

    Returns:
        Concrete SurfaceData instance

    Raises:
        InvalidDataVariant: if the variant tag is missing or unknown
        KeyError, TypeError, ValueError: if variant fields are malformed
    """
    tag = payload.get("variant") if isinstance(payload, Mapping) else None
    try:
        variant = SurfaceVariant(tag)
    except ValueError:
        raise InvalidDataVariant(f"Unknown surface variant: {tag!r}") from None

    data_cls = _DATA_VARIANTS.get(variant)
    if data_cls is None:
        raise InvalidDataVariant(f"No payload registered for variant {variant.value!r}")
    return data_cls.from_dict(payload)


def _ref(transform: Optional[Transform]) -> Optional['weakref.ReferenceType[Transform]']:
    return weakref.ref(transform) if transform is not None else None


class SnapSurface(ABC):
    """Bounded surface a grip can snap onto.

    Args:
        data: Initial payload (variant-checked like the ``data`` setter)
        grip_point: Frame where the hand attaches (weakly referenced)
        relative_to: Frame poses are expressed in (weakly referenced)
        transform: The surface's own frame, used when relative_to is unset
    """

    data_type: ClassVar[Type[SurfaceData]]

    def __init__(
        self,
        data: Optional[SurfaceData] = None,
        grip_point: Optional[Transform] = None,
        relative_to: Optional[Transform] = None,
        transform: Optional[Transform] = None,
    ):
        self._data = self.data_type()
        self._grip_point = _ref(grip_point)
        self._relative_to = _ref(relative_to)
        self.transform = transform if transform is not None else Transform(name="surface")
        if data is not None:
            self.data = data

    @property
    def data(self) -> SurfaceData:
        return self._data

    @data.setter
    def data(self, value: SurfaceData) -> None:
        if not isinstance(value, self.data_type):
            logger.error(
                "Invalid data for %s: expected %s, got %s",
                type(self).__name__, self.data_type.__name__, type(value).__name__,
                extra={"event": "invalid_data_variant"},
            )
            return
        self._data = value

    @property
    def grip_point(self) -> Optional[Transform]:
        return self._grip_point() if self._grip_point is not None else None

    @grip_point.setter
    def grip_point(self, value: Optional[Transform]) -> None:
        self._grip_point = _ref(value)

    @property
    def relative_to(self) -> Optional[Transform]:
        return self._relative_to() if self._relative_to is not None else None

    @relative_to.setter
    def relative_to(self, value: Optional[Transform]) -> None:
        self._relative_to = _ref(value)

    @property
    def reference_frame(self) -> Transform:
        """Relative-to frame, or the surface's own transform when unset."""
        frame = self.relative_to
        return frame if frame is not None else self.transform

    def load_data(self, payload: Mapping[str, Any]) -> bool:
        """Replace data from a persisted payload, failing soft.

        Any parse error or variant mismatch is logged and leaves the
        current data untouched.

        Returns:
            True if the payload was applied
        """
        try:
            data = surface_data_from_dict(payload)
        except (InvalidDataVariant, KeyError, TypeError, ValueError) as e:
            logger.error(
                "Rejected surface payload for %s: %s", type(self).__name__, e,
                extra={"event": "invalid_payload"},
            )
            return False

        if not isinstance(data, self.data_type):
            logger.error(
                "Rejected surface payload for %s: variant %s",
                type(self).__name__, data.variant.value,
                extra={"event": "invalid_data_variant"},
            )
            return False

        self._data = data
        return True

    def to_dict(self) -> Dict[str, Any]:
        return self._data.to_dict()

    @abstractmethod
    def nearest_point_in_surface(self, target: ArrayLike) -> NDArray[np.float64]:
        """Closest valid point of the surface to ``target`` (world space)."""

    @abstractmethod
    def calculate_rotation_offset(self, surface_point: ArrayLike) -> Rotation3D:
        """Rotation moving the recorded grip onto ``surface_point``."""

    @abstractmethod
    def similar_place_at_volume(self, user_pose: Pose, snap_pose: Pose) -> Pose:
        """Place ``snap_pose`` on the surface keeping the approach of ``user_pose``."""

    @abstractmethod
    def inverted_pose(self, pose: Pose) -> Pose:
        """Mirror ``pose`` (expressed in ``reference_frame``) about the surface."""
