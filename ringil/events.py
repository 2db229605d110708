"""Perception events and the geometric primitives they carry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class ObjectClass(IntEnum):
    """Classes of objects the detector can report."""

    PERSON = 0
    BICYCLE = 1
    CAR = 2
    MOTORCYCLE = 3
    BUS = 4
    TRUCK = 5
    TRAIN = 6
    ANIMAL = 7
    TRAFFIC_LIGHT = 10
    FIRE_HYDRANT = 11
    STOP_SIGN = 12
    PARKING_METER = 13
    BENCH = 14
    TREE = 15
    BUILDING = 16
    FENCE = 17
    POLE = 20
    POWER_LINE = 21
    TRAFFIC_SIGN = 22
    WALL = 23
    BACKPACK = 30
    UMBRELLA = 31
    HANDBAG = 32
    SUITCASE = 33
    TRASH_CAN = 34
    UNKNOWN = 255

    @classmethod
    def from_value(cls, value: int) -> ObjectClass:
        """Map a raw class id to a class, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class OrientedBoundingBox:
    """A box given by its centre, size and rotation angle in radians."""

    cx: float = 0.0
    cy: float = 0.0
    width: float = 0.0
    height: float = 0.0
    angle: float = 0.0

    def to_tlwh(self) -> tuple[float, float, float, float]:
        """Axis-aligned enclosing box as (left, top, width, height)."""
        cos_a = abs(math.cos(self.angle))
        sin_a = abs(math.sin(self.angle))
        w = self.width * cos_a + self.height * sin_a
        h = self.width * sin_a + self.height * cos_a
        return (self.cx - w / 2.0, self.cy - h / 2.0, w, h)


@dataclass(frozen=True)
class ObstacleDetected:
    """A tracked object of any class is in view."""

    id: int
    object_class: ObjectClass
    obb: OrientedBoundingBox
    confidence: float


@dataclass(frozen=True)
class PersonTracked:
    """A tracked object is a person."""

    track_id: int
    obb: OrientedBoundingBox


@dataclass(frozen=True)
class PersonIdentityExtracted:
    """A re-identification embedding was computed for a tracked person."""

    track_id: int
    embedding: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "embedding", tuple(self.embedding))


@dataclass(frozen=True)
class TrackLost:
    """A track stopped being matched by detections."""

    track_id: int


InstinctEvent = Union[ObstacleDetected, PersonTracked, PersonIdentityExtracted, TrackLost]