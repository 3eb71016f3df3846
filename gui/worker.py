"""Background workers for the k-space pipeline and masked reconstruction."""

import logging
from typing import Optional

import numpy as np
from PySide6.QtCore import QObject, Signal, Slot

from engines.pipeline import compute_kspace
from engines.recon_service import ReconstructionService
from utils.image_io import load_grayscale

logger = logging.getLogger(__name__)


class KSpaceWorker(QObject):
    """Loads an image and runs the one-shot k-space pipeline in a background thread."""
    
    finished = Signal(object)
    error = Signal(str)
    progress = Signal(str)
    
    def __init__(self, path: Optional[str] = None, image: Optional[np.ndarray] = None,
                 max_dim: int = 256):
        super().__init__()
        if path is None and image is None:
            raise ValueError("KSpaceWorker needs a path or an image")
        self.path = path
        self.image = image
        self.max_dim = max_dim
    
    def run(self):
        try:
            if self.path is not None:
                self.progress.emit("Decoding image...")
                gray = load_grayscale(self.path, self.max_dim)
            else:
                gray = np.asarray(self.image, dtype=np.float64)
            
            h, w = gray.shape[:2]
            self.progress.emit(f"Computing k-space ({w}×{h})...")
            result = compute_kspace(gray)
            self.finished.emit(result)
        except Exception as e:
            logger.exception("K-space pipeline failed")
            self.error.emit(str(e))


class ReconstructionWorker(QObject):
    """
    Long-lived host for a ReconstructionService.
    
    Lives on its own QThread; queued signal delivery hands it one message at
    a time in arrival order and each reply goes back through `replied`.
    """
    
    replied = Signal(object)
    
    def __init__(self):
        super().__init__()
        self._service = ReconstructionService()
    
    @Slot(object)
    def handle(self, message):
        self.replied.emit(self._service.handle(message))
