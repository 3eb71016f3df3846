"""Tests for the masked reconstruction service and its message protocol."""

import numpy as np
import pytest
from engines.kspace import forward_transform
from engines.pipeline import compute_kspace
from engines.recon_service import ReconstructionService, SequenceGate, result_from_reply
from models.errors import NoSpectrumLoaded
from models.mask import CircleMask
from models.messages import LoadSpectrum, CircleRecon, Loaded, Reconstructed, ReconError


@pytest.fixture
def spectrum(rng):
    return forward_transform(rng.random((24, 32)) * 255)


def test_reconstruct_before_load_fails():
    with pytest.raises(NoSpectrumLoaded):
        ReconstructionService().reconstruct(CircleMask(cx=0, cy=0, radius=3))


def test_reconstruct_is_idempotent(spectrum):
    service = ReconstructionService()
    service.load(spectrum)
    mask = CircleMask(cx=16, cy=12, radius=6)
    first = service.reconstruct(mask)
    second = service.reconstruct(mask)
    assert np.array_equal(first.pixels, second.pixels)
    assert first.pixels.shape == (24, 32)
    assert first.pixels.dtype == np.uint8


def test_unmasked_matches_pipeline(rng):
    grid = rng.random((20, 20)) * 255
    result = compute_kspace(grid)
    service = ReconstructionService()
    service.load(result.spectrum)
    assert np.array_equal(service.reconstruct(None).pixels, result.recon_image)


def test_load_replaces_spectrum(spectrum, rng):
    service = ReconstructionService()
    service.load(spectrum)
    service.load(forward_transform(rng.random((6, 8))))
    result = service.reconstruct(CircleMask(cx=4, cy=3, radius=2))
    assert (result.rows, result.cols) == (6, 8)


def test_retained_coefficients_reported(spectrum):
    service = ReconstructionService()
    service.load(spectrum)
    result = service.reconstruct(CircleMask(cx=16, cy=12, radius=1))
    assert result.retained_coeffs == 5
    assert result.total_coeffs == 24 * 32


def test_handle_protocol_round_trip(spectrum):
    service = ReconstructionService()
    
    reply = service.handle(LoadSpectrum.from_spectrum(spectrum, seq=1))
    assert reply == Loaded(rows=24, cols=32, seq=1)
    
    reply = service.handle(CircleRecon(cx=16, cy=12, radius=5, seq=2))
    assert isinstance(reply, Reconstructed)
    assert reply.seq == 2
    assert reply.pixels.shape == (24, 32)
    
    result = result_from_reply(reply)
    assert result.mask == CircleMask(cx=16, cy=12, radius=5)
    assert np.array_equal(result.to_rgba()[..., 0], reply.pixels)


def test_handle_reports_errors_as_values():
    service = ReconstructionService()
    
    reply = service.handle(CircleRecon(cx=1, cy=1, radius=2, seq=7))
    assert isinstance(reply, ReconError)
    assert reply.kind == "NoSpectrumLoaded"
    assert reply.seq == 7
    
    reply = service.handle(CircleRecon(cx=1, cy=1, radius=0, seq=8))
    assert isinstance(reply, ReconError)
    assert reply.seq == 8
    
    reply = service.handle("not a message")
    assert isinstance(reply, ReconError)
    assert reply.kind == "ProtocolError"


def test_load_message_copies_planes(spectrum):
    message = LoadSpectrum.from_spectrum(spectrum)
    assert message.real is not spectrum.real
    assert np.array_equal(message.real, spectrum.real)
    assert message.to_spectrum().shape == spectrum.shape


def test_sequence_gate_rejects_stale():
    gate = SequenceGate()
    first = gate.next()
    second = gate.next()
    assert second > first
    assert gate.is_current(second)
    assert not gate.is_current(first)
