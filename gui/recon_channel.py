"""GUI-thread side of the reconstruction worker."""

import logging
from typing import Optional

from PySide6.QtCore import QObject, QThread, Signal, Slot

from engines.recon_service import SequenceGate, result_from_reply
from gui.worker import ReconstructionWorker
from models.errors import ChannelFailure
from models.mask import CircleMask
from models.messages import (
    LoadSpectrum, CircleRecon, Loaded, Reconstructed, ReconError
)
from models.spectrum import Spectrum

logger = logging.getLogger(__name__)


class ReconstructionChannel(QObject):
    """
    Ordered, asynchronous request/response channel to a ReconstructionWorker.
    
    Every request (load or reconstruct) takes the next sequence number.
    A reply is only applied if it answers the latest request, so a slow,
    older reconstruction can never overwrite a newer one.
    """
    
    loaded = Signal(int, int)
    reconstructed = Signal(object)
    failed = Signal(str)
    
    _request = Signal(object)
    
    def __init__(self, parent=None):
        super().__init__(parent)
        self._gate = SequenceGate()
        self._thread = None
        self._worker = None
    
    @property
    def latest_seq(self) -> int:
        return self._gate.latest
    
    def start(self):
        if self.is_running():
            return
        
        self._thread = QThread()
        self._worker = ReconstructionWorker()
        self._worker.moveToThread(self._thread)
        
        self._request.connect(self._worker.handle)
        self._worker.replied.connect(self._on_reply)
        self._thread.finished.connect(self._worker.deleteLater)
        
        self._thread.start()
        logger.debug("Reconstruction thread started")
    
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.isRunning()
    
    def shutdown(self):
        if self._thread is None:
            return
        self._thread.quit()
        self._thread.wait()
        self._thread = None
        self._worker = None
        logger.debug("Reconstruction thread stopped")
    
    def load(self, spectrum: Spectrum) -> Optional[int]:
        """Replace the worker's spectrum; invalidates in-flight reconstructions."""
        seq = self._gate.next()
        if not self._send(LoadSpectrum.from_spectrum(spectrum, seq)):
            return None
        return seq
    
    def request(self, mask: CircleMask) -> Optional[int]:
        """Ask for a masked reconstruction; returns its sequence number."""
        seq = self._gate.next()
        if not self._send(CircleRecon.from_mask(mask, seq)):
            return None
        return seq
    
    def invalidate(self) -> int:
        """Make every reply still in flight stale without sending anything."""
        return self._gate.next()
    
    def _send(self, message) -> bool:
        if not self.is_running():
            error = ChannelFailure("Reconstruction channel is not running")
            logger.error("%s (dropped %s)", error, type(message).__name__)
            self.failed.emit(f"{error.kind}: {error}")
            return False
        self._request.emit(message)
        return True
    
    @Slot(object)
    def _on_reply(self, reply):
        if isinstance(reply, Loaded):
            self.loaded.emit(reply.rows, reply.cols)
            return
        
        if isinstance(reply, ReconError):
            logger.warning("Worker error (seq %d): %s: %s", reply.seq, reply.kind, reply.message)
        
        if not self._gate.is_current(reply.seq):
            logger.debug("Dropping stale reply %d (latest %d)", reply.seq, self._gate.latest)
            return
        
        if isinstance(reply, Reconstructed):
            self.reconstructed.emit(result_from_reply(reply))
        elif isinstance(reply, ReconError):
            self.failed.emit(f"{reply.kind}: {reply.message}")
