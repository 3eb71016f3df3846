"""
Messages exchanged with the reconstruction worker.

Requests: LoadSpectrum, CircleRecon. Replies: Loaded, Reconstructed,
ReconError. Every message carries the sequence number of the request it
belongs to so the caller can drop stale replies.
"""

from dataclasses import dataclass
import numpy as np

from models.mask import CircleMask
from models.spectrum import Spectrum


@dataclass(frozen=True, eq=False)
class LoadSpectrum:
    rows: int
    cols: int
    real: np.ndarray
    imag: np.ndarray
    seq: int = 0

    @classmethod
    def from_spectrum(cls, spectrum: Spectrum, seq: int = 0) -> 'LoadSpectrum':
        return cls(
            rows=spectrum.rows,
            cols=spectrum.cols,
            real=spectrum.real.copy(),
            imag=spectrum.imag.copy(),
            seq=seq,
        )

    def to_spectrum(self) -> Spectrum:
        return Spectrum(rows=self.rows, cols=self.cols, real=self.real, imag=self.imag)


@dataclass(frozen=True)
class CircleRecon:
    cx: float
    cy: float
    radius: float
    seq: int = 0

    @classmethod
    def from_mask(cls, mask: CircleMask, seq: int = 0) -> 'CircleRecon':
        return cls(cx=mask.cx, cy=mask.cy, radius=mask.radius, seq=seq)

    def to_mask(self) -> CircleMask:
        return CircleMask(cx=self.cx, cy=self.cy, radius=self.radius)


@dataclass(frozen=True)
class Loaded:
    rows: int
    cols: int
    seq: int = 0


@dataclass(frozen=True, eq=False)
class Reconstructed:
    rows: int
    cols: int
    pixels: np.ndarray
    seq: int = 0
    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0
    retained_coeffs: int = 0
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class ReconError:
    message: str
    kind: str = "KSpaceError"
    seq: int = 0
