"""Masked reconstruction output."""

from dataclasses import dataclass
from typing import Optional
import numpy as np

from models.mask import CircleMask


@dataclass
class ReconstructionResult:
    """Normalized 8-bit reconstruction of a (possibly masked) spectrum."""

    rows: int
    cols: int
    pixels: np.ndarray
    mask: Optional[CircleMask] = None
    retained_coeffs: int = 0
    seq: int = 0
    elapsed_ms: float = 0.0

    @property
    def total_coeffs(self) -> int:
        return self.rows * self.cols

    def to_rgba(self) -> np.ndarray:
        from engines.renderer import to_rgba
        return to_rgba(self.pixels)
