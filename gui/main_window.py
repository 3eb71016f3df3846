"""Main application window."""

import logging
from pathlib import Path

import numpy as np
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QLabel, QStatusBar,
    QFileDialog, QMessageBox, QPushButton, QSplitter
)
from PySide6.QtCore import Qt, QThread, QSettings
from PySide6.QtGui import QAction

from engines.renderer import normalize_to_uint8
from gui.recon_channel import ReconstructionChannel
from gui.widgets.image_viewer import ImageViewer, KSpaceViewer, ViewerPanel
from gui.worker import KSpaceWorker
from models.kspace_params import KSpaceParams
from models.kspace_result import KSpaceResult
from models.mask import CircleMask
from models.recon_result import ReconstructionResult
from utils.image_io import save_image
from utils.metrics import compute_psnr_ssim, mask_coverage

logger = logging.getLogger(__name__)

APP_VERSION = "1.0"
APP_NAME = "K-Space Lab"

# QSettings key for the image shown when the app was last used:
# a file path, or "demo:<key>" for a synthetic image
LAST_SOURCE_KEY = "last_source"
DEMO_PREFIX = "demo:"

DEMO_IMAGES = [
    ("Checkerboard", "checkerboard"),
    ("Stripes", "stripes"),
    ("Disk", "disk"),
    ("Gradient", "gradient"),
    ("Text & Edges", "text_edges"),
]


class MainWindow(QMainWindow):
    """
    Original / K-space / Reconstruction side by side.

    Loading an image runs the one-shot pipeline on a KSpaceWorker thread.
    With "Select region" on, the mask on the k-space panel drives masked
    reconstructions through the ReconstructionChannel worker thread.
    """

    def __init__(self, params: KSpaceParams | None = None, settings: QSettings | None = None):
        super().__init__()

        self.setWindowTitle(f"{APP_NAME}: Frequency-Domain Reconstruction")
        self.setMinimumSize(1100, 600)

        self._params = params or KSpaceParams()
        self._settings = settings if settings is not None else QSettings("KSpaceLab", "KSpaceLab")

        # State
        self._result: KSpaceResult | None = None
        self._recon: ReconstructionResult | None = None
        self._reference = None
        self._image_name = None
        self._source = None
        self._thread = None
        self._worker = None

        self._channel = ReconstructionChannel(self)
        self._channel.reconstructed.connect(self._on_reconstructed)
        self._channel.failed.connect(self._on_recon_failed)
        self._channel.start()

        self._init_ui()
        self._init_menu()
        self._init_statusbar()

    def _init_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(8, 8, 8, 8)

        # Toolbar row
        controls = QHBoxLayout()

        self._load_btn = QPushButton("Load Image")
        self._load_btn.clicked.connect(self._on_load_image)
        controls.addWidget(self._load_btn)

        self._select_btn = QPushButton("Select Region")
        self._select_btn.setCheckable(True)
        self._select_btn.setEnabled(False)
        self._select_btn.setToolTip("Reconstruct from a circular region of k-space")
        self._select_btn.toggled.connect(self._on_select_toggled)
        controls.addWidget(self._select_btn)

        self._reset_mask_btn = QPushButton("Reset Mask")
        self._reset_mask_btn.setEnabled(False)
        self._reset_mask_btn.clicked.connect(self._on_reset_mask)
        controls.addWidget(self._reset_mask_btn)

        controls.addStretch()

        self._info_label = QLabel("No image loaded")
        controls.addWidget(self._info_label)
        layout.addLayout(controls)

        # Viewers
        splitter = QSplitter(Qt.Orientation.Horizontal)

        self._original_panel = ViewerPanel("Original (grayscale)", ImageViewer())
        self._original_panel.viewer().imageDropped.connect(self._on_image_dropped)
        splitter.addWidget(self._original_panel)

        self._kspace_viewer = KSpaceViewer(params=self._params)
        self._kspace_viewer.imageDropped.connect(self._on_image_dropped)
        self._kspace_viewer.maskSettled.connect(self._on_mask_settled)
        self._kspace_viewer.radiusPreview.connect(self._on_radius_preview)
        self._kspace_panel = ViewerPanel("K-space (log magnitude)", self._kspace_viewer)
        splitter.addWidget(self._kspace_panel)

        self._recon_panel = ViewerPanel("Reconstruction", ImageViewer(placeholder=""))
        splitter.addWidget(self._recon_panel)

        layout.addWidget(splitter, stretch=1)

    def _init_menu(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        load_action = QAction("&Load Image", self)
        load_action.setShortcut("Ctrl+O")
        load_action.triggered.connect(self._on_load_image)
        file_menu.addAction(load_action)

        save_recon_action = QAction("&Save Reconstruction", self)
        save_recon_action.setShortcut("Ctrl+S")
        save_recon_action.triggered.connect(self._on_save_reconstruction)
        file_menu.addAction(save_recon_action)

        save_kspace_action = QAction("Save &K-space", self)
        save_kspace_action.setShortcut("Ctrl+Shift+S")
        save_kspace_action.triggered.connect(self._on_save_kspace)
        file_menu.addAction(save_kspace_action)

        file_menu.addSeparator()

        clear_action = QAction("&Clear", self)
        clear_action.setShortcut("Ctrl+N")
        clear_action.triggered.connect(self._on_clear)
        file_menu.addAction(clear_action)

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        demo_menu = menubar.addMenu("&Demo")
        for label, key in DEMO_IMAGES:
            action = QAction(label, self)
            action.triggered.connect(lambda checked, k=key: self._load_demo_image(k))
            demo_menu.addAction(action)

    def _init_statusbar(self):
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)
        self._statusbar.showMessage("Ready. Load an image to begin.")

    # --- Loading ---

    def _on_load_image(self):
        last_folder = self._settings.value("last_open_folder", "")
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Image", last_folder,
            "Images (*.png *.jpg *.jpeg *.bmp *.tiff *.webp);;All Files (*)"
        )
        if file_path:
            self._settings.setValue("last_open_folder", str(Path(file_path).parent))
            self._start_analysis(path=file_path, name=Path(file_path).name)

    def _on_image_dropped(self, file_path: str):
        self._start_analysis(path=file_path, name=Path(file_path).name)

    def _load_demo_image(self, key: str):
        from utils.test_images import generate_demo_image

        demo_image = generate_demo_image(key, self._params.max_dim)
        if demo_image is None:
            QMessageBox.warning(self, "Demo Error", f"Could not load demo image: {key}")
            return
        self._start_analysis(image=demo_image, name=f"Demo: {key}", source=DEMO_PREFIX + key)

    def restore_session(self) -> bool:
        """Reload the image from the last session, if it is still available."""
        source = self._settings.value(LAST_SOURCE_KEY, "")
        if not source:
            return False

        if source.startswith(DEMO_PREFIX):
            key = source[len(DEMO_PREFIX):]
            if key in (k for _, k in DEMO_IMAGES):
                self._load_demo_image(key)
                return True
        elif Path(source).is_file():
            self._start_analysis(path=source, name=Path(source).name)
            return True

        logger.info("Last session image %s is gone, forgetting it", source)
        self._settings.remove(LAST_SOURCE_KEY)
        return False

    def _start_analysis(self, path: str | None = None, image: np.ndarray | None = None,
                        name: str = "", source: str | None = None):
        if self._thread is not None:
            self._statusbar.showMessage("Wait for the current image to finish processing")
            return

        self._image_name = name
        self._source = source or path
        self._set_running(True)

        self._thread = QThread()
        self._worker = KSpaceWorker(path=path, image=image, max_dim=self._params.max_dim)
        self._worker.moveToThread(self._thread)

        self._thread.started.connect(self._worker.run)
        self._worker.progress.connect(self._statusbar.showMessage)
        self._worker.finished.connect(self._on_analysis_finished)
        self._worker.error.connect(self._on_analysis_error)
        self._worker.finished.connect(self._thread.quit)
        self._worker.error.connect(self._thread.quit)
        self._thread.finished.connect(self._cleanup_thread)

        self._thread.start()

    def _on_analysis_finished(self, result: KSpaceResult):
        self._result = result
        self._recon = None
        self._reference = normalize_to_uint8(result.grid)

        self._original_panel.set_image(self._reference)
        self._kspace_panel.set_image(result.kspace_image)
        self._recon_panel.set_image(result.recon_image)
        self._recon_panel.set_context_info("full spectrum")

        # Worker gets the spectrum before any masked request for this image
        self._channel.load(result.spectrum)
        controller = self._kspace_viewer.controller()
        controller.reset(result.cols, result.rows)

        self._info_label.setText(f"{self._image_name}  {result.cols} × {result.rows}")
        self._set_running(False)

        if self._source:
            self._settings.setValue(LAST_SOURCE_KEY, self._source)

        if self._select_btn.isChecked():
            self._kspace_viewer.set_mask_visible(True)

        total = result.forward_time_ms + result.inverse_time_ms
        self._statusbar.showMessage(
            f"Loaded {self._image_name} ({result.cols}×{result.rows}) in {total:.1f} ms"
        )

    def _on_analysis_error(self, error_msg: str):
        self._set_running(False)
        QMessageBox.critical(self, "Error", f"Failed to process image:\n{error_msg}")
        self._statusbar.showMessage("Failed to process image")

    def _set_running(self, running: bool):
        has_image = self._result is not None
        self._load_btn.setEnabled(not running)
        self._select_btn.setEnabled(not running and has_image)
        self._reset_mask_btn.setEnabled(not running and has_image)
        self._kspace_viewer.set_mask_enabled(not running)

    def _cleanup_thread(self):
        if self._thread:
            self._thread.deleteLater()
            self._thread = None
        if self._worker:
            self._worker.deleteLater()
            self._worker = None

    # --- Mask interaction ---

    def _on_select_toggled(self, checked: bool):
        self._kspace_viewer.set_mask_visible(checked)
        if not checked:
            self._channel.invalidate()
        if not checked and self._result is not None:
            self._recon = None
            self._recon_panel.viewer().swap_pixmap(self._result.recon_image)
            self._recon_panel.set_context_info("full spectrum")
            self._statusbar.showMessage("Showing full-spectrum reconstruction")

    def _on_reset_mask(self):
        if self._result is None:
            return
        controller = self._kspace_viewer.controller()
        controller.reset(self._result.cols, self._result.rows)
        if controller.visible:
            controller.commit_now()

    def _on_mask_settled(self, cx: int, cy: int, radius: int):
        if self._result is None:
            return
        mask = CircleMask(cx=cx, cy=cy, radius=radius)
        seq = self._channel.request(mask)
        if seq is not None:
            self._statusbar.showMessage(f"Reconstructing center=({cx}, {cy}) r={radius}...")

    def _on_radius_preview(self, radius_px: int):
        self._statusbar.showMessage(f"Radius: {radius_px} px")

    def _on_reconstructed(self, recon: ReconstructionResult):
        if self._result is None or (recon.rows, recon.cols) != (self._result.rows, self._result.cols):
            return
        if not self._kspace_viewer.controller().visible:
            return
        self._recon = recon
        self._recon_panel.viewer().swap_pixmap(recon.pixels)

        mask = recon.mask
        coverage = mask_coverage(self._result.spectrum, mask)
        metrics = compute_psnr_ssim(self._reference, recon.pixels)

        self._recon_panel.set_context_info(f"r={mask.radius:g}")
        self._statusbar.showMessage(
            f"Mask ({mask.cx:g}, {mask.cy:g}) r={mask.radius:g}  |  "
            f"{coverage['coeff_fraction'] * 100:.1f}% coeffs, "
            f"{coverage['energy_fraction'] * 100:.1f}% energy  |  "
            f"PSNR {metrics['psnr']:.2f} dB, SSIM {metrics['ssim']:.4f}  |  "
            f"{recon.elapsed_ms:.1f} ms"
        )

    def _on_recon_failed(self, message: str):
        # Mask stays where the user left it; only the reconstruction is stale
        logger.error("Reconstruction failed: %s", message)
        self._statusbar.showMessage(f"Reconstruction failed: {message}")

    # --- Saving ---

    def _default_name(self, suffix: str) -> str:
        stem = "image"
        if self._image_name and not self._image_name.startswith("Demo"):
            stem = Path(self._image_name).stem
        return f"{stem}_{suffix}.png"

    def _save(self, image: np.ndarray, title: str, suffix: str):
        file_path, _ = QFileDialog.getSaveFileName(
            self, title, self._default_name(suffix), "PNG (*.png);;All Files (*)"
        )
        if not file_path:
            return
        try:
            save_image(image, file_path)
            self._statusbar.showMessage(f"Saved: {Path(file_path).name}")
        except ValueError as e:
            QMessageBox.critical(self, "Export Error", f"Failed to save:\n{e}")

    def _on_save_reconstruction(self):
        if self._result is None:
            return
        image = self._recon.pixels if self._recon is not None else self._result.recon_image
        self._save(image, "Save Reconstruction", "reconstructed")

    def _on_save_kspace(self):
        if self._result is None:
            return
        self._save(self._result.kspace_image, "Save K-space", "kspace")

    # --- Session ---

    def _on_clear(self):
        if self._thread is not None:
            self._statusbar.showMessage("Wait for processing to complete")
            return
        self._select_btn.setChecked(False)
        self._channel.invalidate()
        self._settings.remove(LAST_SOURCE_KEY)
        self._result = None
        self._recon = None
        self._reference = None
        self._image_name = None
        self._source = None
        self._original_panel.clear_image()
        self._kspace_panel.clear_image()
        self._recon_panel.clear_image()
        self._info_label.setText("No image loaded")
        self._set_running(False)
        self._statusbar.showMessage("Session cleared")

    def closeEvent(self, event):
        if self._thread is not None:
            self._thread.quit()
            self._thread.wait()
        self._channel.shutdown()
        super().closeEvent(event)
