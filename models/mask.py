"""Circular k-space mask."""

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class CircleMask:
    """Circle in natural (spectrum) pixel coordinates; boundary is inside."""

    cx: float
    cy: float
    radius: float

    def __post_init__(self):
        if self.radius < 1:
            raise ValueError(f"Mask radius must be >= 1, got {self.radius}")

    @property
    def center(self) -> tuple:
        return (self.cx, self.cy)

    def contains(self, x: float, y: float) -> bool:
        dx = x - self.cx
        dy = y - self.cy
        return dx * dx + dy * dy <= self.radius * self.radius

    def grid(self, rows: int, cols: int) -> np.ndarray:
        """Boolean (rows, cols) array, True where the coefficient is kept."""
        y = np.arange(rows, dtype=np.float64).reshape(rows, 1) - self.cy
        x = np.arange(cols, dtype=np.float64).reshape(1, cols) - self.cx
        return x * x + y * y <= self.radius * self.radius

    def covers(self, rows: int, cols: int) -> bool:
        """True when every coefficient of a rows x cols grid is inside."""
        corners = ((0, 0), (cols - 1, 0), (0, rows - 1), (cols - 1, rows - 1))
        return all(self.contains(x, y) for x, y in corners)
