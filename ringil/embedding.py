"""Compact encodings of feature embeddings for narrow-band links."""

from __future__ import annotations

import struct
import zlib
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum


class CompressionType(IntEnum):
    NONE = 0
    BINARY = 1
    PRODUCT_QUANTIZATION = 2


@dataclass(frozen=True)
class FeatureEmbedding:
    model_hash: int
    compression: int
    signature: bytes


def _compress_binary(values: Sequence[float]) -> bytes:
    """One bit per dimension, set when the value is positive, LSB first."""
    return bytes(
        sum(1 << bit for bit, v in enumerate(values[start : start + 8]) if v > 0.0)
        for start in range(0, len(values), 8)
    )


def _to_bytes(values: Sequence[float]) -> bytes:
    return struct.pack(f"<{len(values)}f", *values)


def compress_embedding(
    vec: Sequence[float], method: CompressionType, model_id: str
) -> FeatureEmbedding:
    """Encode an embedding with the given method, tagged with a model hash."""
    method = CompressionType(method)
    values = list(vec)
    if method is CompressionType.BINARY:
        signature = _compress_binary(values)
    elif method is CompressionType.NONE:
        signature = _to_bytes(values)
    else:
        raise NotImplementedError("advanced compression requires shared codebooks")
    return FeatureEmbedding(
        model_hash=zlib.crc32(model_id.encode("utf-8")),
        compression=int(method),
        signature=signature,
    )