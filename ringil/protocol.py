"""Swarm frames, a fluent frame builder and a priority-aware frame buffer."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

DEFAULT_HOP_LIMIT = 3


class PriorityLevel(IntEnum):
    """Delivery priority, ordered from lowest to highest."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3


class PayloadKind(Enum):
    PERCEPTION = "perception"
    MAPPING = "mapping"
    CONSENSUS = "consensus"
    STATUS = "status"
    NAV_GOAL = "nav_goal"


@dataclass(frozen=True)
class Payload:
    """A frame body tagged with its kind."""

    kind: PayloadKind
    data: Any


@dataclass
class RingilFrame:
    source_node_id: int
    timestamp_us: int
    hop_limit: int = DEFAULT_HOP_LIMIT
    payload: Payload | None = None


def _threat_of(data: Any) -> Any:
    if isinstance(data, Mapping):
        return data.get("threat")
    return getattr(data, "threat", None)


def priority_of(frame: RingilFrame) -> PriorityLevel:
    """Priority from the payload kind, or the threat level of perception events."""
    payload = frame.payload
    if payload is None:
        return PriorityLevel.LOW
    if payload.kind is PayloadKind.PERCEPTION:
        try:
            return PriorityLevel(_threat_of(payload.data))
        except (ValueError, TypeError):
            return PriorityLevel.MEDIUM
    if payload.kind in (PayloadKind.CONSENSUS, PayloadKind.NAV_GOAL):
        return PriorityLevel.HIGH
    if payload.kind is PayloadKind.MAPPING:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW


class FrameBuilder:
    """Fluent construction of a frame stamped with the current time."""

    def __init__(self, source_node_id: int) -> None:
        self._frame = RingilFrame(
            source_node_id=source_node_id,
            timestamp_us=time.time_ns() // 1000,
        )

    def _with_payload(self, kind: PayloadKind, data: Any) -> FrameBuilder:
        self._frame.payload = Payload(kind, data)
        return self

    def with_hop_limit(self, limit: int) -> FrameBuilder:
        self._frame.hop_limit = limit
        return self

    def perception(self, event: Any) -> FrameBuilder:
        return self._with_payload(PayloadKind.PERCEPTION, event)

    def mapping(self, update: Any) -> FrameBuilder:
        return self._with_payload(PayloadKind.MAPPING, update)

    def consensus(self, node: Any) -> FrameBuilder:
        return self._with_payload(PayloadKind.CONSENSUS, node)

    def status(self, status: Any) -> FrameBuilder:
        return self._with_payload(PayloadKind.STATUS, status)

    def nav_goal(self, goal: Any) -> FrameBuilder:
        return self._with_payload(PayloadKind.NAV_GOAL, goal)

    def build(self) -> RingilFrame:
        return self._frame


class PriorityFrameBuffer:
    """Bounded buffer with strict priority scheduling and lower-priority eviction."""

    def __init__(self, max_len: int) -> None:
        self.max_len = max_len
        self._queues: dict[PriorityLevel, deque[RingilFrame]] = {
            level: deque() for level in PriorityLevel
        }

    def __len__(self) -> int:
        return sum(len(q) for q in self._queues.values())

    def push(self, frame: RingilFrame) -> None:
        """Queue a frame, evicting or dropping when the buffer is full."""
        priority = priority_of(frame)
        if len(self) >= self.max_len:
            low = self._queues[PriorityLevel.LOW]
            medium = self._queues[PriorityLevel.MEDIUM]
            if low:
                low.popleft()
            elif medium and priority >= PriorityLevel.HIGH:
                medium.popleft()
            elif priority <= PriorityLevel.MEDIUM:
                return
            else:
                same = self._queues[priority]
                if same:
                    same.popleft()
        self._queues[priority].append(frame)

    def pop(self) -> RingilFrame | None:
        """Oldest frame of the highest non-empty priority, or None."""
        for level in sorted(PriorityLevel, reverse=True):
            queue = self._queues[level]
            if queue:
                return queue.popleft()
        return None

    def is_empty(self) -> bool:
        return len(self) == 0