"""One-shot k-space pipeline output."""

from dataclasses import dataclass
import numpy as np

from models.spectrum import Spectrum


@dataclass
class KSpaceResult:
    """Everything produced when an image is first analysed."""

    grid: np.ndarray
    spectrum: Spectrum
    kspace_image: np.ndarray
    recon_image: np.ndarray

    # Runtime
    forward_time_ms: float
    inverse_time_ms: float

    @property
    def rows(self) -> int:
        return self.spectrum.rows

    @property
    def cols(self) -> int:
        return self.spectrum.cols
