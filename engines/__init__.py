"""K-space engines - pure computation, no GUI dependencies."""

from .fourier import fft, ifft
from .kspace import (
    to_sample_grid, checkerboard, forward_transform, inverse_transform,
    apply_mask, retained_count
)
from .renderer import normalize_to_uint8, log_magnitude, render_spectrum, to_rgba
from .recon_service import ReconstructionService, SequenceGate, result_from_reply
from .pipeline import compute_kspace

__all__ = [
    'fft',
    'ifft',
    'to_sample_grid',
    'checkerboard',
    'forward_transform',
    'inverse_transform',
    'apply_mask',
    'retained_count',
    'normalize_to_uint8',
    'log_magnitude',
    'render_spectrum',
    'to_rgba',
    'ReconstructionService',
    'SequenceGate',
    'result_from_reply',
    'compute_kspace',
]
