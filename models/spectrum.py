"""Complex spectrum stored as parallel real/imaginary planes."""

from dataclasses import dataclass
import numpy as np

from models.errors import InvalidDimensions


def _frozen_plane(values, size: int, name: str) -> np.ndarray:
    plane = np.array(values, dtype=np.float64).reshape(-1)
    if plane.size != size:
        raise InvalidDimensions(f"{name} plane has {plane.size} values, expected {size}")
    plane.setflags(write=False)
    return plane


@dataclass(frozen=True, eq=False)
class Spectrum:
    """
    rows x cols complex coefficients.

    Coefficient (x, y) lives at offset y * cols + x in both planes. The
    planes are private read-only copies, so a Spectrum can be handed across
    threads without anyone mutating it.
    """

    rows: int
    cols: int
    real: np.ndarray
    imag: np.ndarray

    def __post_init__(self):
        if self.rows <= 0 or self.cols <= 0:
            raise InvalidDimensions(f"Spectrum must be at least 1x1, got {self.rows}x{self.cols}")
        size = self.rows * self.cols
        object.__setattr__(self, 'real', _frozen_plane(self.real, size, 'real'))
        object.__setattr__(self, 'imag', _frozen_plane(self.imag, size, 'imag'))

    @classmethod
    def from_complex(cls, coeffs: np.ndarray) -> 'Spectrum':
        if coeffs.ndim != 2:
            raise InvalidDimensions(f"Spectrum expects a 2D array, got {coeffs.ndim}D")
        rows, cols = coeffs.shape
        return cls(rows=rows, cols=cols, real=coeffs.real, imag=coeffs.imag)

    @property
    def shape(self) -> tuple:
        return (self.rows, self.cols)

    def offset(self, x: int, y: int) -> int:
        return y * self.cols + x

    def coefficient(self, x: int, y: int) -> complex:
        i = self.offset(x, y)
        return complex(self.real[i], self.imag[i])

    def to_complex(self) -> np.ndarray:
        """Fresh (rows, cols) complex128 array; safe to modify."""
        out = np.empty(self.rows * self.cols, dtype=np.complex128)
        out.real = self.real
        out.imag = self.imag
        return out.reshape(self.rows, self.cols)
