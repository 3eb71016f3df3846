"""Centered 2D k-space transform with checkerboard phase flip."""

from typing import Optional
import numpy as np

from engines.fourier import fft, ifft
from models.errors import InvalidDimensions
from models.mask import CircleMask
from models.spectrum import Spectrum


def to_sample_grid(image) -> np.ndarray:
    """Validate a 2D intensity image and return a read-only float64 copy."""
    grid = np.array(image, dtype=np.float64)
    if grid.ndim != 2:
        raise InvalidDimensions(f"Sample grid must be 2D, got {grid.ndim}D")
    rows, cols = grid.shape
    if rows <= 0 or cols <= 0:
        raise InvalidDimensions(f"Sample grid must be at least 1x1, got {rows}x{cols}")
    grid.setflags(write=False)
    return grid


def checkerboard(rows: int, cols: int) -> np.ndarray:
    """(-1)^(x+y) for every sample; moves DC to (rows//2, cols//2)."""
    y = np.arange(rows).reshape(rows, 1)
    x = np.arange(cols).reshape(1, cols)
    return np.where((x + y) % 2 == 0, 1.0, -1.0)


def forward_transform(grid) -> Spectrum:
    """Phase-flip, then 1D DFT along rows, then along columns."""
    samples = to_sample_grid(grid)
    rows, cols = samples.shape
    centered = samples * checkerboard(rows, cols)
    coeffs = fft(centered, axis=1)
    coeffs = fft(coeffs, axis=0)
    return Spectrum.from_complex(coeffs)


def apply_mask(coeffs: np.ndarray, mask: CircleMask) -> np.ndarray:
    """Zero every coefficient outside the circle (boundary kept)."""
    rows, cols = coeffs.shape
    return np.where(mask.grid(rows, cols), coeffs, 0.0)


def inverse_transform(spectrum: Spectrum, mask: Optional[CircleMask] = None) -> np.ndarray:
    """
    Inverse of forward_transform, optionally restricted to a circular mask.

    Columns are inverted first, then rows; the real part is taken and the
    checkerboard flip undone. Returns raw float samples (not normalized).
    """
    coeffs = spectrum.to_complex()
    if mask is not None:
        coeffs = apply_mask(coeffs, mask)
    samples = ifft(coeffs, axis=0)
    samples = ifft(samples, axis=1)
    return np.real(samples) * checkerboard(spectrum.rows, spectrum.cols)


def retained_count(spectrum: Spectrum, mask: Optional[CircleMask]) -> int:
    """Number of coefficients a mask keeps."""
    if mask is None:
        return spectrum.rows * spectrum.cols
    return int(np.count_nonzero(mask.grid(spectrum.rows, spectrum.cols)))
