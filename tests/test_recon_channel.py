"""Tests for the threaded reconstruction channel and the Qt debouncer."""

import time

import numpy as np
import pytest
from engines.kspace import forward_transform
from models.mask import CircleMask
from models.messages import Reconstructed, ReconError


def wait_until(qapp, predicate, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        qapp.processEvents()
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def fake_reply(seq, value):
    return Reconstructed(
        rows=2, cols=2, pixels=np.full((2, 2), value, dtype=np.uint8),
        seq=seq, cx=1, cy=1, radius=1
    )


def test_stale_reply_never_overwrites_newer(qapp):
    """Replies 1 and 2 arriving out of order: only 2 is applied."""
    from gui.recon_channel import ReconstructionChannel
    
    channel = ReconstructionChannel()
    applied = []
    channel.reconstructed.connect(applied.append)
    
    channel._gate.next()
    channel._gate.next()
    channel._on_reply(fake_reply(2, 200))
    channel._on_reply(fake_reply(1, 100))
    
    assert len(applied) == 1
    assert applied[0].seq == 2
    assert np.all(applied[0].pixels == 200)


def test_stale_error_is_not_surfaced(qapp):
    from gui.recon_channel import ReconstructionChannel
    
    channel = ReconstructionChannel()
    failures = []
    channel.failed.connect(failures.append)
    
    channel._gate.next()
    channel._gate.next()
    channel._on_reply(ReconError(message="old", kind="NoSpectrumLoaded", seq=1))
    assert failures == []
    channel._on_reply(ReconError(message="new", kind="NoSpectrumLoaded", seq=2))
    assert failures == ["NoSpectrumLoaded: new"]


def test_request_without_worker_reports_channel_failure(qapp):
    from gui.recon_channel import ReconstructionChannel
    
    channel = ReconstructionChannel()
    failures = []
    channel.failed.connect(failures.append)
    
    assert channel.request(CircleMask(cx=1, cy=1, radius=1)) is None
    assert len(failures) == 1
    assert failures[0].startswith("ChannelFailure")


def test_worker_thread_round_trip(qapp, rng):
    """Load then two requests: only the latest result reaches the caller."""
    from gui.recon_channel import ReconstructionChannel
    
    spectrum = forward_transform(rng.random((16, 16)) * 255)
    channel = ReconstructionChannel()
    applied = []
    loaded = []
    channel.reconstructed.connect(applied.append)
    channel.loaded.connect(lambda rows, cols: loaded.append((rows, cols)))
    
    channel.start()
    try:
        channel.load(spectrum)
        channel.request(CircleMask(cx=8, cy=8, radius=2))
        latest = channel.request(CircleMask(cx=8, cy=8, radius=5))
        assert wait_until(qapp, lambda: len(applied) > 0)
        # Give any straggler a chance to (wrongly) show up
        wait_until(qapp, lambda: False, timeout=0.1)
    finally:
        channel.shutdown()
    
    assert loaded == [(16, 16)]
    assert [r.seq for r in applied] == [latest]
    assert applied[0].mask == CircleMask(cx=8, cy=8, radius=5)
    assert not channel.is_running()


def test_reconstruct_before_load_over_channel(qapp):
    from gui.recon_channel import ReconstructionChannel
    
    channel = ReconstructionChannel()
    failures = []
    channel.failed.connect(failures.append)
    channel.start()
    try:
        channel.request(CircleMask(cx=1, cy=1, radius=1))
        assert wait_until(qapp, lambda: len(failures) > 0)
    finally:
        channel.shutdown()
    assert failures[0].startswith("NoSpectrumLoaded")


def test_qt_debouncer_runs_last_callback_once(qapp):
    from gui.debounce import Debouncer
    
    calls = []
    debouncer = Debouncer(delay_ms=20)
    for i in range(10):
        debouncer.schedule(lambda i=i: calls.append(i))
    assert debouncer.is_pending
    
    assert wait_until(qapp, lambda: len(calls) > 0, timeout=2.0)
    wait_until(qapp, lambda: False, timeout=0.1)
    assert calls == [9]
    assert not debouncer.is_pending


def test_qt_debouncer_cancel(qapp):
    from gui.debounce import Debouncer
    
    calls = []
    debouncer = Debouncer(delay_ms=10)
    debouncer.schedule(lambda: calls.append(1))
    debouncer.cancel()
    wait_until(qapp, lambda: False, timeout=0.1)
    assert calls == []


def test_invalidate_makes_in_flight_reply_stale(qapp):
    from gui.recon_channel import ReconstructionChannel
    
    channel = ReconstructionChannel()
    applied = []
    channel.reconstructed.connect(applied.append)
    
    in_flight = channel._gate.next()
    assert channel.invalidate() > in_flight
    channel._on_reply(fake_reply(in_flight, 50))
    assert applied == []
