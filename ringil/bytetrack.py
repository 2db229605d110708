"""Multi-object tracking: Kalman prediction, IoU matching and ByteTrack association."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from ringil.kalman import KalmanFilter

Box = tuple[float, float, float, float]


def iou(box1: Sequence[float], box2: Sequence[float]) -> float:
    """Intersection over union of two (left, top, width, height) boxes."""
    x1 = max(box1[0], box2[0])
    y1 = max(box1[1], box2[1])
    x2 = min(box1[0] + box1[2], box2[0] + box2[2])
    y2 = min(box1[1] + box1[3], box2[1] + box2[3])
    inter_area = max(x2 - x1, 0.0) * max(y2 - y1, 0.0)
    union_area = box1[2] * box1[3] + box2[2] * box2[3] - inter_area
    if union_area <= 0.0:
        return 0.0
    return inter_area / union_area


class TrackState(Enum):
    NEW = "new"
    TRACKED = "tracked"
    LOST = "lost"
    REMOVED = "removed"


def _tlwh_to_xyah(tlwh: Sequence[float]) -> np.ndarray:
    return np.array(
        [
            tlwh[0] + tlwh[2] / 2.0,
            tlwh[1] + tlwh[3] / 2.0,
            tlwh[2] / max(tlwh[3], 1e-6),
            tlwh[3],
        ]
    )


def _xyah_to_tlwh(state: np.ndarray) -> Box:
    w = float(state[2] * state[3])
    h = float(state[3])
    return (float(state[0]) - w / 2.0, float(state[1]) - h / 2.0, w, h)


@dataclass(eq=False)
class STrack:
    """A tracklet with its box, lifecycle state and Kalman statistics."""

    tlwh: Box
    score: float
    class_id: int
    track_id: int = 0
    state: TrackState = TrackState.NEW
    is_activated: bool = False
    tracklet_len: int = 0
    start_frame: int = 0
    frame_id: int = 0
    mean: np.ndarray = field(default_factory=lambda: np.zeros(8))
    covariance: np.ndarray = field(default_factory=lambda: np.eye(8))

    def __post_init__(self) -> None:
        self.tlwh = tuple(float(v) for v in self.tlwh)

    def copy(self) -> STrack:
        return dataclasses.replace(
            self, mean=self.mean.copy(), covariance=self.covariance.copy()
        )

    def predict(self, kf: KalmanFilter) -> None:
        """Advance the Kalman state one frame."""
        if self.state is not TrackState.TRACKED:
            self.mean = self.mean.copy()
            self.mean[7] = 0.0
        self.mean, self.covariance = kf.predict(self.mean, self.covariance)
        self.tlwh = _xyah_to_tlwh(self.mean)

    def update(self, new_track: STrack, frame_id: int, kf: KalmanFilter) -> STrack:
        """Absorb a matched detection and return a snapshot of the result."""
        self.frame_id = frame_id
        self.tracklet_len += 1
        self.state = TrackState.TRACKED
        self.is_activated = True
        self.score = new_track.score
        self.tlwh = new_track.tlwh
        self.mean, self.covariance = kf.update(
            self.mean, self.covariance, _tlwh_to_xyah(self.tlwh)
        )
        return self.copy()

    def activate(self, kf: KalmanFilter, frame_id: int, track_id: int) -> None:
        """Start tracking from this detection under the given id."""
        self.mean, self.covariance = kf.initiate(_tlwh_to_xyah(self.tlwh))
        self.track_id = track_id
        self.state = TrackState.TRACKED
        self.is_activated = True
        self.frame_id = frame_id
        self.start_frame = frame_id
        self.tracklet_len = 0

    def mark_lost(self) -> None:
        self.state = TrackState.LOST


def _associate(
    tracks: Sequence[STrack], detections: Sequence[STrack], threshold: float
) -> tuple[list[tuple[int, int]], list[int], list[int]]:
    """Greedy assignment by ascending 1 - IoU cost.

    Returns matches as (track, detection) pairs, unmatched detection indices
    and unmatched track indices.
    """
    if not tracks:
        return [], list(range(len(detections))), []
    if not detections:
        return [], [], list(range(len(tracks)))

    costs = sorted(
        (1.0 - iou(trk.tlwh, det.tlwh), r, c)
        for r, trk in enumerate(tracks)
        for c, det in enumerate(detections)
    )
    matches: list[tuple[int, int]] = []
    unmatched_tracks = set(range(len(tracks)))
    unmatched_dets = set(range(len(detections)))
    for cost, trk_idx, det_idx in costs:
        if cost > threshold:
            continue
        if trk_idx in unmatched_tracks and det_idx in unmatched_dets:
            matches.append((trk_idx, det_idx))
            unmatched_tracks.discard(trk_idx)
            unmatched_dets.discard(det_idx)
    return matches, sorted(unmatched_dets), sorted(unmatched_tracks)


class ByteTrack:
    """Two-stage tracker matching high then low confidence detections."""

    def __init__(
        self,
        track_thresh: float,
        track_buffer: int,
        match_thresh: float,
        det_thresh: float,
    ) -> None:
        self.track_thresh = track_thresh
        self.track_buffer = track_buffer
        self.match_thresh = match_thresh
        self.det_thresh = det_thresh
        self.tracked_stracks: list[STrack] = []
        self.lost_stracks: list[STrack] = []
        self.lost_ids: set[int] = set()
        self.frame_id = 0
        self.kalman_filter = KalmanFilter()
        self._next_id = 1

    def update(self, detections: Iterable[tuple[Sequence[float], float, int]]) -> list[STrack]:
        """Process one frame of (tlwh, score, class_id) detections; return active tracks."""
        self.frame_id += 1
        self.lost_ids.clear()
        kf = self.kalman_filter

        det_high: list[STrack] = []
        det_low: list[STrack] = []
        for tlwh, score, class_id in detections:
            track = STrack(tuple(tlwh), score, class_id)
            if score >= self.track_thresh:
                det_high.append(track)
            elif score >= self.det_thresh:
                det_low.append(track)

        pool = self.tracked_stracks + self.lost_stracks
        self.tracked_stracks = []
        self.lost_stracks = []
        for track in pool:
            track.predict(kf)

        matches_high, unmatch_high, unmatch_trk = _associate(pool, det_high, self.match_thresh)

        new_tracked: list[STrack] = []
        matched_pool: set[int] = set()
        for trk_idx, det_idx in matches_high:
            matched_pool.add(trk_idx)
            new_tracked.append(pool[trk_idx].update(det_high[det_idx], self.frame_id, kf))

        # Second pass: still-tracked leftovers against low-confidence detections.
        remaining = [idx for idx in unmatch_trk if pool[idx].state is TrackState.TRACKED]
        matches_low, _, unmatch_low_trk = _associate(
            [pool[idx] for idx in remaining], det_low, 0.5
        )
        for view_idx, det_idx in matches_low:
            pool_idx = remaining[view_idx]
            matched_pool.add(pool_idx)
            new_tracked.append(pool[pool_idx].update(det_low[det_idx], self.frame_id, kf))

        for view_idx in unmatch_low_trk:
            track = pool[remaining[view_idx]].copy()
            if track.state is not TrackState.LOST:
                track.mark_lost()
                self.lost_ids.add(track.track_id)
            self.lost_stracks.append(track)

        for idx in unmatch_trk:
            if idx not in matched_pool and pool[idx].state is TrackState.LOST:
                self.lost_stracks.append(pool[idx].copy())

        for det_idx in unmatch_high:
            new_track = det_high[det_idx].copy()
            if new_track.score >= self.track_thresh:
                new_track.activate(kf, self.frame_id, self._next_id)
                self._next_id += 1
                new_tracked.append(new_track)

        self.lost_stracks = [
            t for t in self.lost_stracks if self.frame_id - t.frame_id <= self.track_buffer
        ]
        self.tracked_stracks = new_tracked
        return [t.copy() for t in self.tracked_stracks if t.is_activated]

    def get_lost_track_ids(self) -> list[int]:
        """Ids of tracks that became lost during the last update."""
        return sorted(self.lost_ids)