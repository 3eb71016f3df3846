"""
Pointer-gesture state machine for the circular k-space mask.

The controller is toolkit-agnostic: the viewer feeds it pointer positions in
display pixels (relative to the image's top-left corner on screen) and it
keeps two masks in natural spectrum coordinates:

- displayed_mask: follows the pointer immediately, drawn by the viewer
- committed_mask: the last mask handed to on_mask_settled

Commits go through a debouncer (anything with schedule(callback) and
cancel()), so a burst of pointer moves produces a single reconstruction
request. Pointer-up flushes immediately.
"""

import math
from enum import Enum
from typing import Callable, Optional

from models.kspace_params import KSpaceParams
from models.mask import CircleMask


class Gesture(Enum):
    IDLE = "idle"
    DRAGGING_CENTER = "dragging_center"
    RESIZING_RADIUS = "resizing_radius"


class MaskController:
    """Drag the mask center or resize its radius with a pointer."""
    
    def __init__(
        self,
        debouncer,
        params: Optional[KSpaceParams] = None,
        on_mask_settled: Optional[Callable[[tuple, int], None]] = None,
        on_radius_preview: Optional[Callable[[int], None]] = None,
        on_changed: Optional[Callable[[], None]] = None,
    ):
        self._debouncer = debouncer
        self._params = params or KSpaceParams()
        self.on_mask_settled = on_mask_settled
        self.on_radius_preview = on_radius_preview
        self.on_changed = on_changed
        
        self._natural_size = None
        self._display_size = None
        self._center = None
        self._radius = float(self._params.initial_radius)
        self._gesture = Gesture.IDLE
        self._committed: Optional[CircleMask] = None
        self._visible = False
        self._enabled = True
    
    # --- State ---
    
    @property
    def gesture(self) -> Gesture:
        return self._gesture
    
    @property
    def is_active(self) -> bool:
        return self._gesture is not Gesture.IDLE
    
    @property
    def visible(self) -> bool:
        return self._visible
    
    @property
    def enabled(self) -> bool:
        return self._enabled
    
    @property
    def center(self) -> Optional[tuple]:
        return self._center
    
    @property
    def radius(self) -> float:
        """Local radius in natural pixels (horizontal scale)."""
        return self._radius
    
    @property
    def displayed_mask(self) -> Optional[CircleMask]:
        if self._center is None:
            return None
        cx, cy = self._center
        return CircleMask(cx=cx, cy=cy, radius=max(1, round(self._radius)))
    
    @property
    def committed_mask(self) -> Optional[CircleMask]:
        return self._committed
    
    # --- Geometry ---
    
    def reset(self, natural_width: int, natural_height: int, radius: Optional[float] = None):
        """Start over on a new image: centered mask, nothing committed."""
        self._debouncer.cancel()
        self._gesture = Gesture.IDLE
        self._natural_size = (natural_width, natural_height)
        self._center = (natural_width // 2, natural_height // 2)
        r = self._params.initial_radius if radius is None else radius
        self._radius = float(max(1, min(r, natural_width / 2, natural_height / 2)))
        self._committed = None
        self._notify_changed()
    
    def set_display_size(self, width: float, height: float):
        if width > 0 and height > 0:
            self._display_size = (float(width), float(height))
    
    def _scale(self) -> tuple:
        nw, nh = self._natural_size
        dw, dh = self._display_size
        return nw / dw, nh / dh
    
    def to_display(self, x: float, y: float) -> tuple:
        sx, sy = self._scale()
        return x / sx, y / sy
    
    def to_natural(self, x: float, y: float) -> tuple:
        sx, sy = self._scale()
        return round(x * sx), round(y * sy)
    
    @property
    def display_radius(self) -> float:
        sx, _ = self._scale()
        return self._radius / sx
    
    @property
    def radii(self) -> tuple:
        """(horizontal, vertical) radius in natural pixels, for drawing."""
        _, sy = self._scale()
        return self._radius, self.display_radius * sy
    
    def handle_position(self) -> tuple:
        """Resize handle in display pixels, 45 degrees down-right of center."""
        dcx, dcy = self.to_display(*self._center)
        offset = self.display_radius / math.sqrt(2)
        return dcx + offset, dcy + offset
    
    # --- Visibility ---
    
    def show(self):
        """Show the overlay and request a reconstruction for the current mask."""
        self._visible = True
        self._commit()
        self._notify_changed()
    
    def hide(self):
        self._debouncer.cancel()
        self._gesture = Gesture.IDLE
        self._visible = False
        self._committed = None
        self._notify_changed()
    
    def set_enabled(self, enabled: bool):
        """Disabling mid-gesture ends it like a release: the local mask is committed."""
        self._enabled = enabled
        if not enabled:
            self.release()
    
    @property
    def has_geometry(self) -> bool:
        """True once both the natural and the on-screen size are known."""
        return self._natural_size is not None and self._display_size is not None
    
    def _accepts_input(self) -> bool:
        return (
            self._visible and self._enabled
            and self._center is not None
            and self.has_geometry
        )
    
    # --- Pointer events ---
    
    def press(self, x: float, y: float) -> bool:
        """Pointer down at display (x, y). Returns True if a gesture started."""
        if not self._accepts_input() or self.is_active:
            return False
        
        hx, hy = self.handle_position()
        if math.hypot(x - hx, y - hy) <= self._params.handle_hit_radius_px:
            self._gesture = Gesture.RESIZING_RADIUS
            return True
        
        dcx, dcy = self.to_display(*self._center)
        if math.hypot(x - dcx, y - dcy) <= self.display_radius:
            self._gesture = Gesture.DRAGGING_CENTER
            # Optimistic: the circle jumps under the pointer, no request yet
            self._center = self._clamped_center(x, y)
            self._notify_changed()
            return True
        
        return False
    
    def move(self, x: float, y: float):
        if not self._accepts_input() or not self.is_active:
            return
        
        if self._gesture is Gesture.DRAGGING_CENTER:
            self._center = self._clamped_center(x, y)
        else:
            new_r = self._clamped_radius(x, y)
            sx, _ = self._scale()
            self._radius = new_r * sx
            if self.on_radius_preview is not None:
                self.on_radius_preview(round(new_r))
        
        self._notify_changed()
        self._debouncer.schedule(self._commit)
    
    def release(self):
        """Pointer up: end the gesture and commit the latest local mask now."""
        if not self.is_active:
            return
        self._gesture = Gesture.IDLE
        self._debouncer.cancel()
        self._commit()
    
    def cancel(self):
        self.release()
    
    def _clamped_center(self, x: float, y: float) -> tuple:
        r = self.display_radius
        dw, dh = self._display_size
        cx = max(r, min(dw - r, x))
        cy = max(r, min(dh - r, y))
        return self.to_natural(cx, cy)
    
    def _clamped_radius(self, x: float, y: float) -> float:
        dcx, dcy = self.to_display(*self._center)
        dw, dh = self._display_size
        raw = math.hypot(x - dcx, y - dcy)
        max_r = min(dcx, dcy, dw - dcx, dh - dcy)
        return max(self._params.min_radius_px, min(max_r, raw))
    
    # --- Commit ---
    
    def commit_now(self) -> Optional[CircleMask]:
        """Flush any pending debounce and commit the displayed mask."""
        self._debouncer.cancel()
        return self._commit()
    
    def _commit(self) -> Optional[CircleMask]:
        mask = self.displayed_mask
        if mask is None or mask == self._committed:
            return None
        self._committed = mask
        if self.on_mask_settled is not None:
            self.on_mask_settled((int(mask.cx), int(mask.cy)), int(mask.radius))
        return mask
    
    def _notify_changed(self):
        if self.on_changed is not None:
            self.on_changed()
