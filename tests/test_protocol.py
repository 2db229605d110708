import time

import pytest

from ringil.protocol import (
    FrameBuilder,
    Payload,
    PayloadKind,
    PriorityFrameBuffer,
    PriorityLevel,
    RingilFrame,
    priority_of,
)


def frame(kind=None, data=None, node=1):
    payload = None if kind is None else Payload(kind, data)
    return RingilFrame(source_node_id=node, timestamp_us=0, payload=payload)


def low(node=1):
    return frame(PayloadKind.STATUS, {}, node)


def medium(node=1):
    return frame(PayloadKind.MAPPING, {}, node)


def high(node=1):
    return frame(PayloadKind.NAV_GOAL, {}, node)


def critical(node=1):
    return frame(PayloadKind.PERCEPTION, {"threat": PriorityLevel.CRITICAL.value}, node)


def test_builder_defaults():
    before = time.time_ns() // 1000
    built = FrameBuilder(7).build()
    after = time.time_ns() // 1000
    assert built.source_node_id == 7
    assert built.hop_limit == 3
    assert built.payload is None
    assert before <= built.timestamp_us <= after


def test_builder_sets_payload_and_hop_limit():
    goal = {"lat": 1.0, "lon": 2.0}
    built = FrameBuilder(2).with_hop_limit(5).nav_goal(goal).build()
    assert built.hop_limit == 5
    assert built.payload == Payload(PayloadKind.NAV_GOAL, goal)


@pytest.mark.parametrize(
    "method,kind",
    [
        ("perception", PayloadKind.PERCEPTION),
        ("mapping", PayloadKind.MAPPING),
        ("consensus", PayloadKind.CONSENSUS),
        ("status", PayloadKind.STATUS),
        ("nav_goal", PayloadKind.NAV_GOAL),
    ],
)
def test_builder_payload_kinds(method, kind):
    body = {"value": 1}
    built = getattr(FrameBuilder(1), method)(body).build()
    assert built.payload.kind is kind
    assert built.payload.data is body


def test_last_payload_wins():
    built = FrameBuilder(1).status({}).mapping({"cell": 3}).build()
    assert built.payload.kind is PayloadKind.MAPPING


def test_priority_by_kind():
    assert priority_of(frame()) is PriorityLevel.LOW
    assert priority_of(low()) is PriorityLevel.LOW
    assert priority_of(medium()) is PriorityLevel.MEDIUM
    assert priority_of(high()) is PriorityLevel.HIGH
    assert priority_of(frame(PayloadKind.CONSENSUS, {})) is PriorityLevel.HIGH


@pytest.mark.parametrize("level", list(PriorityLevel))
def test_perception_priority_follows_threat(level):
    assert priority_of(frame(PayloadKind.PERCEPTION, {"threat": level.value})) is level


@pytest.mark.parametrize("data", [{"threat": 99}, {}, object()])
def test_perception_invalid_threat_is_medium(data):
    assert priority_of(frame(PayloadKind.PERCEPTION, data)) is PriorityLevel.MEDIUM


def test_pop_strict_priority_order():
    buf = PriorityFrameBuffer(10)
    frames = [low(), medium(), high(), critical()]
    for f in frames:
        buf.push(f)
    popped = [buf.pop() for _ in frames]
    assert popped == list(reversed(frames))
    assert buf.pop() is None
    assert buf.is_empty()


def test_fifo_within_level():
    buf = PriorityFrameBuffer(10)
    for node in range(4):
        buf.push(high(node))
    assert [buf.pop().source_node_id for _ in range(4)] == list(range(4))


def test_full_buffer_evicts_oldest_low():
    buf = PriorityFrameBuffer(2)
    buf.push(low(1))
    buf.push(low(2))
    buf.push(high(3))
    assert len(buf) == 2
    assert buf.pop().source_node_id == 3
    assert buf.pop().source_node_id == 2


def test_full_buffer_drops_medium_when_nothing_lower():
    buf = PriorityFrameBuffer(2)
    buf.push(medium(1))
    buf.push(medium(2))
    buf.push(medium(3))
    buf.push(low(4))
    assert len(buf) == 2
    assert [buf.pop().source_node_id for _ in range(2)] == [1, 2]


def test_full_buffer_high_evicts_medium():
    buf = PriorityFrameBuffer(2)
    buf.push(medium(1))
    buf.push(medium(2))
    buf.push(high(3))
    assert len(buf) == 2
    assert [buf.pop().source_node_id for _ in range(2)] == [3, 2]


def test_full_buffer_of_high_evicts_oldest_high():
    buf = PriorityFrameBuffer(2)
    buf.push(high(1))
    buf.push(high(2))
    buf.push(high(3))
    assert len(buf) == 2
    assert [buf.pop().source_node_id for _ in range(2)] == [2, 3]


def test_full_buffer_of_critical_evicts_oldest_critical():
    buf = PriorityFrameBuffer(2)
    for node in (1, 2, 3):
        buf.push(critical(node))
    assert [buf.pop().source_node_id for _ in range(2)] == [2, 3]


def test_length_never_exceeds_max_for_mixed_pushes():
    buf = PriorityFrameBuffer(3)
    makers = [low, medium, high, low, medium, critical, low, high]
    for node, make in enumerate(makers):
        buf.push(make(node))
        assert len(buf) <= 3