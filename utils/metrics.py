"""Metrics: PSNR, SSIM, mask coverage, runtime."""

import time
import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity
from typing import Dict, Optional

from models.mask import CircleMask
from models.spectrum import Spectrum


def compute_psnr_ssim(reference: np.ndarray, reconstructed: np.ndarray) -> Dict[str, float]:
    """PSNR and SSIM between two 8-bit grayscale images."""
    if reference.shape != reconstructed.shape:
        raise ValueError(f"Shape mismatch: {reference.shape} vs {reconstructed.shape}")
    
    if np.array_equal(reference, reconstructed):
        return {'psnr': float('inf'), 'ssim': 1.0}
    
    psnr = peak_signal_noise_ratio(reference, reconstructed, data_range=255)
    
    # SSIM window must fit inside the image and be odd
    win = min(7, reference.shape[0], reference.shape[1])
    if win % 2 == 0:
        win -= 1
    if win < 3:
        ssim = float('nan')
    else:
        ssim = structural_similarity(reference, reconstructed, win_size=win, data_range=255)
    
    return {'psnr': float(psnr), 'ssim': float(ssim)}


def mask_coverage(spectrum: Spectrum, mask: Optional[CircleMask]) -> Dict:
    """
    How much of the spectrum a mask keeps.
    
    Energy is sum(|z|^2), so the fraction reflects how much of the image's
    signal power survives the mask (Parseval).
    """
    total = spectrum.rows * spectrum.cols
    power = (spectrum.real ** 2 + spectrum.imag ** 2).reshape(spectrum.rows, spectrum.cols)
    total_energy = float(np.sum(power))
    
    if mask is None:
        inside = np.ones(power.shape, dtype=bool)
    else:
        inside = mask.grid(spectrum.rows, spectrum.cols)
    
    retained = int(np.count_nonzero(inside))
    kept_energy = float(np.sum(power[inside]))
    
    return {
        'retained_coeffs': retained,
        'total_coeffs': total,
        'coeff_fraction': retained / total,
        'energy_fraction': kept_energy / total_energy if total_energy > 0 else 1.0,
    }


class Timer:
    """Simple timer for forward/inverse runtime."""
    
    def __init__(self):
        self.forward_time_ms = 0.0
        self.inverse_time_ms = 0.0
    
    def measure_forward(self, func, *args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.forward_time_ms = (time.perf_counter() - start) * 1000.0
        return result
    
    def measure_inverse(self, func, *args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.inverse_time_ms = (time.perf_counter() - start) * 1000.0
        return result
