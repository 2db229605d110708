import numpy as np
import pytest
from PIL import Image

from ringil.imaging import fast_resize, image_to_tensor_rgb, image_to_tensor_rgba32f


def test_fast_resize_size_and_mode():
    img = Image.new("RGBA", (50, 30), (10, 20, 30, 40))
    out = fast_resize(img, 64, 48)
    assert out.size == (64, 48)
    assert out.mode == "RGB"


def test_fast_resize_uniform_colour_preserved():
    img = Image.new("RGB", (37, 91), (12, 200, 77))
    out = np.asarray(fast_resize(img, 20, 20))
    assert (out == np.array([12, 200, 77], dtype=np.uint8)).all()


def test_fast_resize_accepts_array():
    arr = np.zeros((8, 16, 3), dtype=np.uint8)
    assert fast_resize(arr, 4, 2).size == (4, 2)


def test_fast_resize_rejects_zero_size():
    with pytest.raises(ValueError):
        fast_resize(Image.new("RGB", (4, 4)), 0, 4)


def test_rgb_tensor_layout_and_range():
    arr = np.zeros((3, 4, 3), dtype=np.uint8)
    arr[1, 2, 0] = 255
    tensor = image_to_tensor_rgb(Image.fromarray(arr))
    assert tensor.shape == (1, 3, 3, 4)
    assert tensor.dtype == np.float32
    assert tensor[0, 0, 1, 2] == 1.0
    assert tensor.min() == -1.0
    assert (tensor[0, 0] == 1.0).sum() == 1


def test_rgb_tensor_round_trip():
    rng = np.random.default_rng(3)
    arr = rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8)
    tensor = image_to_tensor_rgb(arr)
    restored = np.rint(tensor[0].transpose(1, 2, 0) * 127.5 + 127.5)
    assert np.array_equal(restored.astype(np.uint8), arr)


def test_rgba_tensor_drops_alpha_and_round_trips():
    rng = np.random.default_rng(4)
    arr = rng.random((4, 6, 4)).astype(np.float32)
    tensor = image_to_tensor_rgba32f(arr)
    assert tensor.shape == (1, 3, 4, 6)
    restored = tensor[0].transpose(1, 2, 0) * 0.5 + 0.5
    assert np.allclose(restored, arr[..., :3], atol=1e-6)


def test_rgba_tensor_rejects_rgb():
    with pytest.raises(ValueError):
        image_to_tensor_rgba32f(np.zeros((4, 4, 3), dtype=np.float32))