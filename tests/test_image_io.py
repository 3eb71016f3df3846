"""Tests for image decoding, grayscale conversion and resizing."""

import cv2
import numpy as np
import pytest
from utils.image_io import (
    fit_within, to_grayscale, decode_grayscale, load_grayscale, encode_png, save_image
)


@pytest.mark.parametrize("size, expected", [
    ((300, 200), (256, 171)),
    ((100, 400), (64, 256)),
    ((50, 50), (50, 50)),
    ((256, 256), (256, 256)),
])
def test_fit_within(size, expected):
    assert fit_within(*size, max_dim=256) == expected


def test_bt601_luminance():
    bgr = np.zeros((2, 2, 3), dtype=np.uint8)
    bgr[..., 2] = 255  # red
    assert np.allclose(to_grayscale(bgr), 0.299 * 255)


def test_decode_resizes_longer_side():
    img = np.full((128, 512, 3), 90, dtype=np.uint8)
    ok, buf = cv2.imencode('.png', img)
    assert ok
    gray = decode_grayscale(buf.tobytes(), max_dim=256)
    assert gray.shape == (64, 256)
    assert gray.dtype == np.float64
    assert np.allclose(gray, 90.0)


def test_decode_garbage_raises():
    with pytest.raises(ValueError):
        decode_grayscale(b"definitely not an image")


def test_save_and_load_round_trip(tmp_path):
    image = (np.arange(64, dtype=np.uint8).reshape(8, 8) * 3)
    path = tmp_path / "gray.png"
    save_image(image, str(path))
    loaded = load_grayscale(str(path))
    assert np.allclose(loaded, image, atol=0.5)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ValueError):
        load_grayscale(str(tmp_path / "missing.png"))


def test_encode_png_signature():
    data = encode_png(np.zeros((4, 4), dtype=np.uint8))
    assert data.startswith(b"\x89PNG")
