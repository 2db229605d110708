"""Image resizing and conversion to normalised NCHW float tensors."""

from __future__ import annotations

import numpy as np
from PIL import Image


def _to_pil(image: Image.Image | np.ndarray) -> Image.Image:
    if isinstance(image, Image.Image):
        return image
    return Image.fromarray(np.asarray(image, dtype=np.uint8))


def fast_resize(image: Image.Image | np.ndarray, width: int, height: int) -> Image.Image:
    """Resize to width x height RGB with a Lanczos filter."""
    if width <= 0 or height <= 0:
        raise ValueError(f"target size must be positive, got {width}x{height}")
    rgb = _to_pil(image).convert("RGB")
    return rgb.resize((width, height), Image.Resampling.LANCZOS)


def _pixels(image: Image.Image | np.ndarray, mode: str, channels: int) -> np.ndarray:
    if isinstance(image, Image.Image):
        image = image.convert(mode)
    array = np.asarray(image, dtype=np.float32)
    if array.ndim != 3 or array.shape[2] != channels:
        raise ValueError(f"expected an HxWx{channels} image, got shape {array.shape}")
    return array


def image_to_tensor_rgb(image: Image.Image | np.ndarray) -> np.ndarray:
    """8-bit RGB image to a (1, 3, H, W) tensor scaled to [-1, 1]."""
    pixels = _pixels(image, "RGB", 3)
    tensor = (pixels - 127.5) / 127.5
    return np.ascontiguousarray(tensor.transpose(2, 0, 1)[np.newaxis])


def image_to_tensor_rgba32f(image: np.ndarray) -> np.ndarray:
    """RGBA image with [0, 1] floats to a (1, 3, H, W) tensor in [-1, 1]; alpha is dropped."""
    pixels = _pixels(image, "RGBA", 4)[..., :3]
    tensor = (pixels - 0.5) / 0.5
    return np.ascontiguousarray(tensor.transpose(2, 0, 1)[np.newaxis])