"""One-shot k-space pipeline run when an image is loaded."""

import logging
import numpy as np

from models.kspace_result import KSpaceResult
from engines.kspace import to_sample_grid, forward_transform, inverse_transform
from engines.renderer import render_spectrum, normalize_to_uint8
from utils.metrics import Timer

logger = logging.getLogger(__name__)


def compute_kspace(image_gray: np.ndarray) -> KSpaceResult:
    """Forward transform, k-space rendering and unmasked reconstruction."""
    timer = Timer()
    grid = to_sample_grid(image_gray)
    
    # === FORWARD ===
    spectrum = timer.measure_forward(forward_transform, grid)
    kspace_image = render_spectrum(spectrum)
    
    # === INVERSE (full spectrum) ===
    samples = timer.measure_inverse(inverse_transform, spectrum)
    recon_image = normalize_to_uint8(samples)
    
    logger.info(
        "K-space %dx%d: forward %.1f ms, inverse %.1f ms",
        spectrum.cols, spectrum.rows, timer.forward_time_ms, timer.inverse_time_ms
    )
    
    return KSpaceResult(
        grid=grid,
        spectrum=spectrum,
        kspace_image=kspace_image,
        recon_image=recon_image,
        forward_time_ms=timer.forward_time_ms,
        inverse_time_ms=timer.inverse_time_ms,
    )
