"""Face candidates decoded from a multi-stride face detector, with suppression."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

INPUT_SIZE = 640

# Reference landmark positions of an aligned 112x112 face crop.
ARCFACE_DST: tuple[tuple[float, float], ...] = (
    (38.2946, 51.6963),
    (73.5318, 51.5014),
    (56.0252, 71.7366),
    (41.5493, 92.3655),
    (70.7299, 92.2041),
)

BBox = tuple[float, float, float, float]
Point = tuple[float, float]


@dataclass(frozen=True)
class Face:
    """A detected face: score, (x1, y1, x2, y2) box and five landmarks."""

    score: float
    bbox: BBox
    keypoints: tuple[Point, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "bbox", tuple(float(v) for v in self.bbox))
        object.__setattr__(
            self, "keypoints", tuple((float(x), float(y)) for x, y in self.keypoints)
        )


def _anchor(index: int, stride: int) -> tuple[int, int]:
    if stride <= 0 or stride > INPUT_SIZE:
        raise ValueError(f"stride must be in 1..{INPUT_SIZE}, got {stride}")
    cells = INPUT_SIZE // stride
    location = index // 2
    cx = (location * stride) % INPUT_SIZE
    cy = ((location // cells) * stride) % INPUT_SIZE
    return cx, cy


def distance2bbox(index: int, stride: int, distance: Sequence[Sequence[float]]) -> BBox:
    """Decode the edge distances of one anchor into an (x1, y1, x2, y2) box."""
    cx, cy = _anchor(index, stride)
    row = distance[index]
    return (
        cx - float(row[0]) * stride,
        cy - float(row[1]) * stride,
        cx + float(row[2]) * stride,
        cy + float(row[3]) * stride,
    )


def distance2kps(
    index: int, stride: int, distance: Sequence[Sequence[float]]
) -> tuple[Point, ...]:
    """Decode the offsets of one anchor into five landmark points."""
    cx, cy = _anchor(index, stride)
    row = distance[index]
    return tuple(
        (cx + float(row[2 * i]) * stride, cy + float(row[2 * i + 1]) * stride)
        for i in range(5)
    )


def _area(bbox: BBox) -> float:
    return (bbox[2] - bbox[0] + 1.0) * (bbox[3] - bbox[1] + 1.0)


def _overlap(a: BBox, b: BBox) -> float:
    w = max(min(a[2], b[2]) - max(a[0], b[0]) + 1.0, 0.0)
    h = max(min(a[3], b[3]) - max(a[1], b[1]) + 1.0, 0.0)
    inter = w * h
    return inter / (_area(a) + _area(b) - inter)


def nms(faces: Iterable[Face], iou_threshold: float) -> list[Face]:
    """Keep the best-scoring faces, dropping those overlapping a kept one too much."""
    ordered = sorted(faces, key=lambda f: f.score, reverse=True)
    suppressed = [False] * len(ordered)
    keep: list[Face] = []
    for i, face in enumerate(ordered):
        if suppressed[i]:
            continue
        keep.append(face)
        for j in range(i + 1, len(ordered)):
            if not suppressed[j] and _overlap(face.bbox, ordered[j].bbox) > iou_threshold:
                suppressed[j] = True
    return keep