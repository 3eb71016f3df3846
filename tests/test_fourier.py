"""Tests for the 1D Fourier transform."""

import numpy as np
import pytest
from engines.fourier import fft, ifft


@pytest.mark.parametrize("n", [1, 2, 3, 5, 8, 17, 64, 100, 256])
def test_fft_matches_reference(n, rng):
    """Radix-2 and Bluestein paths agree with numpy's DFT."""
    x = rng.standard_normal(n) + 1j * rng.standard_normal(n)
    assert np.allclose(fft(x), np.fft.fft(x), atol=1e-9 * max(n, 1))


@pytest.mark.parametrize("n", [1, 6, 17, 32, 100])
def test_ifft_inverts_fft(n, rng):
    x = rng.standard_normal(n)
    assert np.allclose(ifft(fft(x)), x, atol=1e-10)


def test_ifft_normalization():
    """ifft of a unit impulse spectrum is a flat 1/N signal."""
    spectrum = np.zeros(10, dtype=complex)
    spectrum[0] = 1.0
    assert np.allclose(ifft(spectrum), np.full(10, 0.1))


def test_axis_selection(rng):
    """Transforming along an axis only mixes values along that axis."""
    a = rng.standard_normal((5, 12))
    assert np.allclose(fft(a, axis=0), np.fft.fft(a, axis=0))
    assert np.allclose(fft(a, axis=1), np.fft.fft(a, axis=1))


def test_deterministic(rng):
    x = rng.standard_normal(37)
    assert np.array_equal(fft(x), fft(x))


def test_empty_axis_rejected():
    with pytest.raises(ValueError):
        fft(np.zeros((3, 0)), axis=1)
