"""K-space lab settings."""

from dataclasses import dataclass


@dataclass
class KSpaceParams:
    """Analysis and interaction settings."""
    
    max_dim: int = 256
    debounce_ms: int = 120
    initial_radius: int = 35
    min_radius_px: float = 5.0
    handle_hit_radius_px: float = 10.0
    
    def __post_init__(self):
        if not (1 <= self.max_dim <= 4096):
            raise ValueError(f"max_dim must be 1-4096, got {self.max_dim}")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {self.debounce_ms}")
        if self.initial_radius < 1:
            raise ValueError(f"initial_radius must be >= 1, got {self.initial_radius}")
        if self.min_radius_px <= 0 or self.handle_hit_radius_px <= 0:
            raise ValueError("Pixel radii must be positive")
