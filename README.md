# ringil

Building blocks for an autonomous drone: perception event types, a
ByteTrack-style multi-object tracker with a Kalman filter, helpers for face
detection post-processing and alignment, image-to-tensor conversion, a
priority-aware buffer for swarm messages, embedding compression, and a small
bridge command that loads the flight configuration.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module             | Contents |
|--------------------|----------|
| `ringil.events`    | `ObjectClass`, `OrientedBoundingBox` and the events `ObstacleDetected`, `PersonTracked`, `PersonIdentityExtracted`, `TrackLost`. |
| `ringil.config`    | `AppConfig` and its sections, loaded from TOML or YAML; `ConfigError`. |
| `ringil.protocol`  | `RingilFrame`, `Payload`, `PayloadKind`, `PriorityLevel`, `priority_of`, `FrameBuilder`, `PriorityFrameBuffer`. |
| `ringil.embedding` | `CompressionType`, `FeatureEmbedding`, `compress_embedding`. |
| `ringil.kalman`    | `KalmanFilter` over `[x, y, aspect, height]` measurements. |
| `ringil.bytetrack` | `iou`, `TrackState`, `STrack`, `ByteTrack`. |
| `ringil.face`      | `Face`, `ARCFACE_DST`, `distance2bbox`, `distance2kps`, `nms`. |
| `ringil.warp`      | `umeyama` and `warp_into`. |
| `ringil.imaging`   | `fast_resize`, `image_to_tensor_rgb`, `image_to_tensor_rgba32f`. |
| `ringil.bridge`    | `main`, behind the `ringil-bridge` command. |

## Perception events

`ObjectClass` is an `IntEnum` of detector classes; `ObjectClass.from_value(i)`
returns the matching class or `ObjectClass.UNKNOWN` for ids it does not know.

`OrientedBoundingBox(cx, cy, width, height, angle)` holds a box by its centre,
size and angle in radians. `to_tlwh()` returns the axis-aligned enclosing box
as `(left, top, width, height)`.

The events are frozen dataclasses:

- `ObstacleDetected(id, object_class, obb, confidence)`
- `PersonTracked(track_id, obb)`
- `PersonIdentityExtracted(track_id, embedding)` — the embedding is stored as a tuple
- `TrackLost(track_id)`

## Tracking

`ByteTrack(track_thresh, track_buffer, match_thresh, det_thresh)` takes one
frame at a time as a list of `(tlwh, score, class_id)` detections and returns
copies of the activated tracks:

```python
from ringil.bytetrack import ByteTrack

tracker = ByteTrack(0.5, 180, 0.8, 0.6)

tracks = tracker.update([((100.0, 50.0, 40.0, 80.0), 0.9, 0)])
for track in tracks:
    print(track.track_id, track.tlwh, track.score, track.state)

print(tracker.get_lost_track_ids())
```

Detections scoring at least `track_thresh` are high-confidence; those between
`det_thresh` and `track_thresh` are low-confidence; the rest are ignored.
Existing tracks are first matched greedily to high-confidence detections by
ascending `1 - IoU`, accepting costs up to `match_thresh`. Tracks that are
still in the tracked state then get a second pass against low-confidence
detections with a cost limit of `0.5`; those left over are marked lost.
Unmatched high-confidence detections start new tracks with increasing ids
from 1. Lost tracks not updated within `track_buffer` frames are dropped.
`get_lost_track_ids()` returns, sorted, the ids that became lost in the last
update.

`iou(box1, box2)` computes intersection over union of two
`(left, top, width, height)` boxes, returning `0.0` when the union is empty.

`KalmanFilter` provides `initiate(measurement)`, `predict(mean, covariance)`
and `update(mean, covariance, measurement)` for a constant-velocity model
with the 8D state `[x, y, a, h, vx, vy, va, vh]`; each returns a new
`(mean, covariance)` pair of NumPy arrays, with the covariance symmetrised.

## Face helpers

- `distance2bbox(index, stride, distance)` and `distance2kps(index, stride, distance)`
  decode one anchor row of a 640×640 multi-stride detector output into an
  `(x1, y1, x2, y2)` box or five landmark points. A stride outside `1..640`
  raises `ValueError`.
- `nms(faces, iou_threshold)` sorts `Face` objects by score and drops those
  overlapping an already kept face by more than the threshold.
- `umeyama(src, dst)` returns the 3×3 least-squares similarity transform
  mapping one point set onto another; mismatched or empty sets, or fully
  degenerate ones, raise `ValueError`.
- `warp_into(image, matrix, size)` returns a new `size × size` array sampled
  by nearest neighbour through the inverse of `matrix`; pixels falling
  outside the source stay zero. `ARCFACE_DST` holds the reference landmarks
  of an aligned 112×112 face.

```python
import numpy as np
from ringil.face import ARCFACE_DST
from ringil.warp import umeyama, warp_into

landmarks = [(120.0, 140.0), (180.0, 139.0), (150.0, 175.0), (126.0, 210.0), (176.0, 209.0)]
matrix = umeyama(landmarks, ARCFACE_DST)
aligned = warp_into(np.zeros((400, 400, 4), dtype=np.float32), matrix, 112)
```

## Imaging

- `fast_resize(image, width, height)` converts a Pillow image or a `uint8`
  array to RGB and resizes it with a Lanczos filter, returning a Pillow image.
- `image_to_tensor_rgb(image)` turns an 8-bit RGB image into a
  `(1, 3, H, W)` `float32` tensor scaled to `[-1, 1]`.
- `image_to_tensor_rgba32f(image)` does the same for an `H × W × 4` array of
  floats in `[0, 1]`, dropping the alpha channel.

## Swarm messages

`FrameBuilder(source_node_id)` stamps a `RingilFrame` with the sender and the
current time in microseconds, with a hop limit of 3 unless changed. The
methods `perception`, `mapping`, `consensus`, `status` and `nav_goal` set the
payload; `build()` returns the frame.

```python
from ringil.protocol import FrameBuilder, PriorityFrameBuffer

frame = FrameBuilder(7).with_hop_limit(5).perception({"threat": 3}).build()

buffer = PriorityFrameBuffer(64)
buffer.push(frame)
while not buffer.is_empty():
    next_frame = buffer.pop()
```

`priority_of(frame)` decides the priority: perception payloads take their
`threat` value (a mapping key or attribute) as a `PriorityLevel`, falling back
to `MEDIUM`; consensus and navigation goals are `HIGH`; mapping updates are
`MEDIUM`; status payloads and empty frames are `LOW`.

`PriorityFrameBuffer(max_len)` pops the oldest frame of the highest non-empty
priority, or returns `None` when empty; `len()` gives the number of queued
frames. When full, a push evicts the oldest low-priority frame; failing that,
a high or critical frame evicts the oldest medium-priority frame; a new frame
of medium or low priority with nothing lower to displace is dropped; and
otherwise the oldest frame of the new frame's own priority is evicted.

## Embedding compression

`compress_embedding(vec, method, model_id)` returns a `FeatureEmbedding`
whose `model_hash` is the CRC-32 of the UTF-8 model id. With
`CompressionType.NONE` the signature is the values as little-endian 32-bit
floats; with `CompressionType.BINARY` it holds one bit per value (set when
positive, least significant bit first, eight values per byte).
`CompressionType.PRODUCT_QUANTIZATION` raises `NotImplementedError`.

## Configuration

`AppConfig.load_from_file(path)` reads a `.toml`, `.yaml` or `.yml` file; the
extension may be left off, in which case those are tried in that order.
`AppConfig.from_mapping(data)` builds the same object from parsed data. A
missing file, an unsupported extension, a parse failure, or a missing or
wrongly typed field raises `ConfigError`.

```toml
[target]
type = "person"
embedding = [0.1, 0.2, 0.3]
threshold = 0.6

[avoidance]
person_safe_distance = 5.0
safe_distance = 2.0
max_yaw_rate = 0.8
repulse_gain = 1.5

[controller]
p_gain_advance = 0.4
p_gain_yaw = 0.9

[vision]
video_src = "camera0"
resolution = [1280, 720]
frame_rate = 30

[communication]
mavlink_url = "udp://localhost:14540"
heartbeat_rate = 1.0

[simulation]
use_sim_time = false
timeout_connect = 10

[offboard]
failsafe_on_loss = true
command_freq = 20.0
```

The `target` section may also hold a `coordinates` table with `lat`, `lon`
and `alt`.

## The bridge command

```
ringil-bridge [--config PATH]
```

The command loads the configuration (`config.toml` by default), logs that it
was loaded, and then waits on its internal event queue until interrupted.
The log level of the `ringil` loggers comes from the `RINGIL_LOG` environment
variable (for example `DEBUG`), defaulting to `INFO`. It exits with status 1
and a message on standard error when the configuration cannot be loaded, and
with 130 on Ctrl-C.

## What the package does not do

- It runs no detection or face-embedding models and reads no camera or video
  stream; the tracker, face helpers and tensor conversions expect detections
  and images to be supplied by the caller.
- Nothing feeds the bridge's event queue, so `ringil-bridge` only validates
  the configuration and then idles; it does not fly, steer or talk to an
  autopilot.
- It has no network transport or payload encryption for swarm frames, and no
  wire serialisation of `RingilFrame`; frames live only in memory.