"""
Masked reconstruction service.

ReconstructionService holds one cached spectrum and answers circle
reconstruction requests against it. It is plain Python; gui.worker hosts it
on a QThread and gui.recon_channel talks to it with the messages defined in
models.messages.
"""

import logging
import time
from typing import Optional

from engines.kspace import inverse_transform, retained_count
from engines.renderer import normalize_to_uint8
from models.errors import KSpaceError, NoSpectrumLoaded
from models.mask import CircleMask
from models.messages import (
    LoadSpectrum, CircleRecon, Loaded, Reconstructed, ReconError
)
from models.recon_result import ReconstructionResult
from models.spectrum import Spectrum

logger = logging.getLogger(__name__)


class ReconstructionService:
    """Cached spectrum plus masked inverse transform."""
    
    def __init__(self):
        self._spectrum: Optional[Spectrum] = None
    
    @property
    def spectrum(self) -> Optional[Spectrum]:
        return self._spectrum
    
    def load(self, spectrum: Spectrum) -> None:
        """Replace the cached spectrum wholesale."""
        self._spectrum = spectrum
        logger.info("Loaded %dx%d spectrum", spectrum.cols, spectrum.rows)
    
    def reconstruct(self, mask: Optional[CircleMask], seq: int = 0) -> ReconstructionResult:
        """Masked inverse of the cached spectrum, normalized to uint8."""
        if self._spectrum is None:
            raise NoSpectrumLoaded("Spectrum not loaded")
        
        start = time.perf_counter()
        samples = inverse_transform(self._spectrum, mask)
        pixels = normalize_to_uint8(samples)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        
        return ReconstructionResult(
            rows=self._spectrum.rows,
            cols=self._spectrum.cols,
            pixels=pixels,
            mask=mask,
            retained_coeffs=retained_count(self._spectrum, mask),
            seq=seq,
            elapsed_ms=elapsed_ms,
        )
    
    def handle(self, message):
        """Process one protocol message and return its reply."""
        if isinstance(message, LoadSpectrum):
            try:
                self.load(message.to_spectrum())
            except KSpaceError as e:
                return ReconError(message=str(e), kind=e.kind, seq=message.seq)
            return Loaded(rows=message.rows, cols=message.cols, seq=message.seq)
        
        if isinstance(message, CircleRecon):
            try:
                result = self.reconstruct(message.to_mask(), seq=message.seq)
            except KSpaceError as e:
                logger.warning("Reconstruction %d failed: %s", message.seq, e)
                return ReconError(message=str(e), kind=e.kind, seq=message.seq)
            except ValueError as e:
                return ReconError(message=str(e), kind="InvalidMask", seq=message.seq)
            return Reconstructed(
                rows=result.rows,
                cols=result.cols,
                pixels=result.pixels,
                seq=result.seq,
                cx=message.cx,
                cy=message.cy,
                radius=message.radius,
                retained_coeffs=result.retained_coeffs,
                elapsed_ms=result.elapsed_ms,
            )
        
        return ReconError(
            message=f"Unknown message type: {type(message).__name__}",
            kind="ProtocolError",
            seq=getattr(message, 'seq', 0),
        )


def result_from_reply(reply: Reconstructed) -> ReconstructionResult:
    """Rebuild a ReconstructionResult on the receiving side of the channel."""
    return ReconstructionResult(
        rows=reply.rows,
        cols=reply.cols,
        pixels=reply.pixels,
        mask=CircleMask(cx=reply.cx, cy=reply.cy, radius=reply.radius),
        retained_coeffs=reply.retained_coeffs,
        seq=reply.seq,
        elapsed_ms=reply.elapsed_ms,
    )


class SequenceGate:
    """
    Hands out monotonically increasing request numbers.

    Only a reply tagged with the most recently issued number is current;
    anything older arrived too late and must not overwrite newer state.
    """
    
    def __init__(self):
        self._latest = 0
    
    @property
    def latest(self) -> int:
        return self._latest
    
    def next(self) -> int:
        self._latest += 1
        return self._latest
    
    def is_current(self, seq: int) -> bool:
        return seq == self._latest
