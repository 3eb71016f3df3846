"""Tests for the mask gesture state machine."""

import math
import pytest
from gui.mask_controller import MaskController, Gesture
from models.kspace_params import KSpaceParams
from models.mask import CircleMask


class ManualDebouncer:
    """Debouncer double: callbacks only run when the test fires them."""
    
    def __init__(self):
        self.callback = None
        self.scheduled = 0
    
    @property
    def is_pending(self):
        return self.callback is not None
    
    def schedule(self, callback):
        self.callback = callback
        self.scheduled += 1
    
    def cancel(self):
        self.callback = None
    
    def fire(self):
        callback, self.callback = self.callback, None
        if callback is not None:
            callback()


@pytest.fixture
def debouncer():
    return ManualDebouncer()


@pytest.fixture
def settled():
    return []


@pytest.fixture
def previews():
    return []


def make_controller(debouncer, settled, previews, natural=(256, 256), display=(512, 512)):
    ctrl = MaskController(
        debouncer,
        params=KSpaceParams(),
        on_mask_settled=lambda center, r: settled.append((center, r)),
        on_radius_preview=previews.append,
    )
    ctrl.reset(*natural)
    ctrl.set_display_size(*display)
    ctrl.show()
    settled.clear()
    return ctrl


@pytest.fixture
def ctrl(debouncer, settled, previews):
    # natural 256x256 shown at 512x512: display = 2 x natural
    return make_controller(debouncer, settled, previews)


def test_show_commits_initial_mask(debouncer, settled, previews):
    ctrl = MaskController(debouncer, on_mask_settled=lambda c, r: settled.append((c, r)))
    ctrl.reset(256, 256)
    ctrl.set_display_size(512, 512)
    ctrl.show()
    assert settled == [((128, 128), 35)]
    assert ctrl.committed_mask == CircleMask(cx=128, cy=128, radius=35)


def test_press_inside_starts_drag_without_request(ctrl, debouncer, settled):
    assert ctrl.press(300, 250)
    assert ctrl.gesture is Gesture.DRAGGING_CENTER
    assert ctrl.center == (150, 125)
    assert settled == []
    assert not debouncer.is_pending


def test_press_outside_is_ignored(ctrl):
    assert not ctrl.press(10, 10)
    assert ctrl.gesture is Gesture.IDLE


def test_press_on_handle_starts_resize(ctrl):
    hx, hy = ctrl.handle_position()
    assert hx == pytest.approx(256 + 70 / math.sqrt(2))
    assert ctrl.press(hx + 3, hy - 3)
    assert ctrl.gesture is Gesture.RESIZING_RADIUS


def test_debounce_coalesces_rapid_moves(ctrl, debouncer, settled):
    """Ten moves inside one debounce window produce one request: the last."""
    ctrl.press(256, 256)
    for i in range(10):
        ctrl.move(260 + i * 10, 256)
    assert debouncer.scheduled == 10
    assert settled == []
    
    debouncer.fire()
    assert settled == [((175, 128), 35)]
    
    ctrl.release()
    assert settled == [((175, 128), 35)]
    assert ctrl.gesture is Gesture.IDLE


def test_release_flushes_pending_commit(ctrl, debouncer, settled):
    ctrl.press(256, 256)
    ctrl.move(300, 300)
    ctrl.move(320, 310)
    ctrl.release()
    assert settled == [((160, 155), 35)]
    assert not debouncer.is_pending
    assert ctrl.displayed_mask == ctrl.committed_mask


def test_press_and_release_commits_new_center(ctrl, settled):
    ctrl.press(270, 240)
    ctrl.release()
    assert settled == [((135, 120), 35)]


def test_cancel_behaves_like_release(ctrl, settled):
    ctrl.press(256, 256)
    ctrl.move(280, 256)
    ctrl.cancel()
    assert ctrl.gesture is Gesture.IDLE
    assert settled == [((140, 128), 35)]


def test_drag_is_clamped_to_display_bounds(ctrl):
    ctrl.press(256, 256)
    ctrl.move(0, 0)
    assert ctrl.center == (35, 35)
    ctrl.move(1000, 1000)
    assert ctrl.center == (221, 221)


def test_resize_updates_radius_and_previews(ctrl, settled, previews):
    ctrl.press(*ctrl.handle_position())
    ctrl.move(356, 256)
    assert previews == [100]
    assert ctrl.radius == pytest.approx(50)
    ctrl.release()
    assert settled == [((128, 128), 50)]


def test_resize_respects_minimum_radius(ctrl, previews):
    ctrl.press(*ctrl.handle_position())
    ctrl.move(257, 256)
    assert previews == [5]
    assert ctrl.display_radius == pytest.approx(5)
    assert ctrl.displayed_mask.radius >= 1


def test_resize_limited_by_nearest_edge(ctrl, settled, previews):
    ctrl.press(256, 256)
    ctrl.move(100, 256)
    ctrl.release()
    assert settled[-1] == ((50, 128), 35)
    
    ctrl.press(*ctrl.handle_position())
    ctrl.move(400, 256)
    assert previews[-1] == 100
    ctrl.release()
    assert settled[-1] == ((50, 128), 50)


def test_gestures_are_exclusive(ctrl):
    ctrl.press(256, 256)
    assert not ctrl.press(*ctrl.handle_position())
    assert ctrl.gesture is Gesture.DRAGGING_CENTER


def test_independent_axis_scales(debouncer, settled, previews):
    ctrl = make_controller(debouncer, settled, previews, natural=(200, 100), display=(400, 400))
    assert ctrl.display_radius == pytest.approx(70)
    assert ctrl.radii == pytest.approx((35, 17.5))
    
    ctrl.press(200, 200)
    ctrl.move(240, 300)
    ctrl.release()
    assert settled == [((120, 75), 35)]


def test_hidden_overlay_ignores_pointer(ctrl, debouncer, settled):
    ctrl.hide()
    assert not ctrl.press(256, 256)
    ctrl.move(300, 300)
    ctrl.release()
    assert settled == []
    assert debouncer.scheduled == 0


def test_disabled_overlay_ignores_pointer(ctrl, settled):
    ctrl.set_enabled(False)
    assert not ctrl.press(256, 256)
    ctrl.set_enabled(True)
    assert ctrl.press(256, 256)


def test_disable_mid_gesture_commits_local_mask(ctrl, debouncer, settled):
    ctrl.press(256, 256)
    ctrl.move(300, 256)
    ctrl.set_enabled(False)
    assert ctrl.gesture is Gesture.IDLE
    assert not debouncer.is_pending
    assert ctrl.center == (150, 128)
    assert settled == [((150, 128), 35)]
    assert ctrl.committed_mask == ctrl.displayed_mask


def test_disable_while_idle_commits_nothing(ctrl, settled):
    ctrl.set_enabled(False)
    assert settled == []


def test_geometry_needs_a_nonzero_display_size(debouncer):
    ctrl = MaskController(debouncer)
    ctrl.reset(64, 64)
    assert not ctrl.has_geometry
    ctrl.set_display_size(0, 0)
    assert not ctrl.has_geometry
    ctrl.set_display_size(128, 128)
    assert ctrl.has_geometry


def test_reset_recenters_and_forgets_commit(ctrl, settled):
    ctrl.press(256, 256)
    ctrl.move(300, 300)
    ctrl.release()
    ctrl.reset(64, 32)
    assert ctrl.center == (32, 16)
    assert ctrl.radius == 16
    assert ctrl.committed_mask is None
    ctrl.commit_now()
    assert settled[-1] == ((32, 16), 16)


def test_no_geometry_means_no_gestures(debouncer):
    ctrl = MaskController(debouncer)
    ctrl.show()
    assert not ctrl.press(10, 10)
    assert ctrl.displayed_mask is None
