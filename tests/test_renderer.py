"""Tests for log-magnitude rendering and normalization."""

import numpy as np
from engines.kspace import forward_transform
from engines.renderer import normalize_to_uint8, render_spectrum, log_magnitude, to_rgba
from models.spectrum import Spectrum


def test_constant_grid_renders_single_bright_pixel():
    """DC-only spectrum: one white pixel at the center, black elsewhere."""
    image = render_spectrum(forward_transform(np.full((4, 4), 100.0)))
    assert image.dtype == np.uint8
    assert image[2, 2] == 255
    image[2, 2] = 0
    assert np.all(image == 0)


def test_flat_input_uses_unit_scale():
    """max == min must not divide by zero."""
    out = normalize_to_uint8(np.full((3, 3), 5.0))
    assert np.all(out == 0)


def test_normalize_rescales_min_to_max():
    out = normalize_to_uint8(np.array([-1.0, 0.0, 3.0]))
    assert out.tolist() == [0, 64, 255]


def test_log_magnitude_is_log1p_of_abs():
    spectrum = Spectrum(rows=1, cols=2, real=[3.0, 0.0], imag=[4.0, 0.0])
    assert np.allclose(log_magnitude(spectrum), [[np.log(6.0), 0.0]])


def test_render_does_not_mutate_spectrum(rng):
    spectrum = forward_transform(rng.random((6, 6)))
    before = spectrum.real.copy(), spectrum.imag.copy()
    render_spectrum(spectrum)
    assert np.array_equal(spectrum.real, before[0])
    assert np.array_equal(spectrum.imag, before[1])


def test_to_rgba_packs_opaque_gray():
    gray = np.array([[0, 128], [200, 255]], dtype=np.uint8)
    rgba = to_rgba(gray)
    assert rgba.shape == (2, 2, 4)
    assert np.array_equal(rgba[..., 0], gray)
    assert np.array_equal(rgba[..., 2], gray)
    assert np.all(rgba[..., 3] == 255)
