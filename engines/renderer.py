"""Log-magnitude rendering and 8-bit normalization."""

import numpy as np

from models.spectrum import Spectrum


def normalize_to_uint8(values: np.ndarray) -> np.ndarray:
    """
    Linear rescale of min..max onto 0..255, rounded and clipped.

    A flat input uses a scale factor of 1 instead of dividing by zero.
    """
    values = np.asarray(values, dtype=np.float64)
    lo = float(np.min(values))
    hi = float(np.max(values))
    scale = 255.0 / (hi - lo) if hi > lo else 1.0
    scaled = np.rint((values - lo) * scale)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def log_magnitude(spectrum: Spectrum) -> np.ndarray:
    """log(1 + |z|) for every coefficient, shaped (rows, cols)."""
    mag = np.hypot(spectrum.real, spectrum.imag)
    return np.log1p(mag).reshape(spectrum.rows, spectrum.cols)


def render_spectrum(spectrum: Spectrum) -> np.ndarray:
    """Visual k-space: normalized log-magnitude as uint8 grayscale."""
    return normalize_to_uint8(log_magnitude(spectrum))


def to_rgba(gray: np.ndarray) -> np.ndarray:
    """Pack a grayscale buffer into opaque RGBA (rows, cols, 4)."""
    gray = np.asarray(gray, dtype=np.uint8)
    alpha = np.full(gray.shape, 255, dtype=np.uint8)
    return np.stack([gray, gray, gray, alpha], axis=-1)
