"""Image viewers: plain grayscale view and k-space view with mask overlay."""

import numpy as np
from PySide6.QtWidgets import (
    QGraphicsView, QGraphicsScene, QGraphicsItem, QWidget, QVBoxLayout,
    QHBoxLayout, QLabel, QPushButton, QFrame
)
from PySide6.QtGui import (
    QPixmap, QImage, QPen, QColor, QBrush, QPainterPath, QWheelEvent,
    QMouseEvent, QDragEnterEvent, QDropEvent, QDragMoveEvent, QPainter, QFont
)
from PySide6.QtCore import Qt, Signal, QRectF, QPointF

from gui.debounce import Debouncer
from gui.mask_controller import MaskController, Gesture
from models.kspace_params import KSpaceParams

IMAGE_SUFFIXES = ('.png', '.jpg', '.jpeg', '.bmp', '.tiff', '.webp')


def gray_to_pixmap(image: np.ndarray) -> QPixmap:
    """uint8 (h, w) array to QPixmap (copies the data)."""
    image = np.ascontiguousarray(image, dtype=np.uint8)
    h, w = image.shape
    qimage = QImage(image.data, w, h, w, QImage.Format.Format_Grayscale8)
    return QPixmap.fromImage(qimage)


def dropped_image_path(mime_data) -> str | None:
    if mime_data.hasUrls():
        urls = mime_data.urls()
        if urls:
            path = urls[0].toLocalFile()
            if path.lower().endswith(IMAGE_SUFFIXES):
                return path
    return None


class ImageViewer(QGraphicsView):
    """QGraphicsView with zoom/pan and image drops for grayscale arrays."""

    viewChanged = Signal()
    imageDropped = Signal(str)

    def __init__(self, parent=None, placeholder: str = "Drop an image here"):
        super().__init__(parent)

        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)

        self._pixmap_item = None
        self._image_array = None
        self._placeholder = placeholder

        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)
        self.setBackgroundBrush(QColor(40, 40, 40))
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setMinimumSize(200, 200)

        self.setAcceptDrops(True)
        self.viewport().setAcceptDrops(True)

        self._zoom_factor = 1.0
        self._min_zoom = 0.1
        self._max_zoom = 40.0

    def set_image(self, image: np.ndarray):
        """Display a uint8 grayscale array, fitted to the view."""
        self._image_array = image
        pixmap = gray_to_pixmap(image)

        self._scene.clear()
        self._pixmap_item = self._scene.addPixmap(pixmap)
        self._pixmap_item.setTransformationMode(Qt.TransformationMode.FastTransformation)

        self.setSceneRect(QRectF(pixmap.rect()))
        self.reset_view()

    def swap_pixmap(self, image: np.ndarray):
        """Replace the image without resetting zoom (same size expected)."""
        if self._pixmap_item is None:
            self.set_image(image)
            return
        self._image_array = image
        self._pixmap_item.setPixmap(gray_to_pixmap(image))

    def clear_image(self):
        self._scene.clear()
        self._pixmap_item = None
        self._image_array = None
        self.resetTransform()
        self.viewport().update()

    def has_image(self) -> bool:
        return self._image_array is not None

    def get_image_dimensions(self) -> tuple[int, int] | None:
        if self._image_array is not None:
            h, w = self._image_array.shape[:2]
            return (w, h)
        return None

    def reset_view(self):
        if self._pixmap_item:
            self.fitInView(self._pixmap_item, Qt.AspectRatioMode.KeepAspectRatio)
            self._zoom_factor = self.transform().m11()
            self.viewChanged.emit()

    def image_display_rect(self) -> QRectF | None:
        """Where the image currently sits on screen, in viewport pixels."""
        if self._pixmap_item is None:
            return None
        return self.mapFromScene(self._pixmap_item.sceneBoundingRect()).boundingRect().toRectF()

    def paintEvent(self, event):
        super().paintEvent(event)

        if self._pixmap_item is None and self._placeholder:
            painter = QPainter(self.viewport())
            rect = self.viewport().rect()
            painter.setFont(QFont("Segoe UI", 11))
            painter.setPen(QColor(100, 100, 100))
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, self._placeholder)
            painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.reset_view()

    def wheelEvent(self, event: QWheelEvent):
        if self._image_array is None:
            event.ignore()
            return

        factor = 1.15 if event.angleDelta().y() > 0 else 1 / 1.15
        new_zoom = self._zoom_factor * factor

        if self._min_zoom <= new_zoom <= self._max_zoom:
            self._zoom_factor = new_zoom
            self.scale(factor, factor)
            self.viewChanged.emit()
        event.accept()

    def dragEnterEvent(self, event: QDragEnterEvent):
        if dropped_image_path(event.mimeData()):
            event.setDropAction(Qt.DropAction.CopyAction)
            event.accept()
        else:
            event.ignore()

    def dragMoveEvent(self, event: QDragMoveEvent):
        if dropped_image_path(event.mimeData()):
            event.setDropAction(Qt.DropAction.CopyAction)
            event.accept()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent):
        path = dropped_image_path(event.mimeData())
        if path:
            self.imageDropped.emit(path)
            event.setDropAction(Qt.DropAction.CopyAction)
            event.accept()
        else:
            event.ignore()


class KSpaceViewer(ImageViewer):
    """
    K-space view with a draggable, resizable circular mask.

    Pointer positions are translated to display pixels relative to the
    image's on-screen top-left corner and handed to a MaskController; the
    overlay is redrawn from the controller's local (uncommitted) state.
    """

    maskSettled = Signal(int, int, int)
    radiusPreview = Signal(int)

    HANDLE_SIZE = 14

    def __init__(self, parent=None, params: KSpaceParams | None = None):
        super().__init__(parent, placeholder="K-space appears here")
        self._params = params or KSpaceParams()
        self._debouncer = Debouncer(self._params.debounce_ms, self)
        self._controller = MaskController(
            self._debouncer,
            params=self._params,
            on_mask_settled=lambda center, r: self.maskSettled.emit(center[0], center[1], r),
            on_radius_preview=self.radiusPreview.emit,
            on_changed=self._update_overlay,
        )

        self._dim_item = None
        self._circle_item = None
        self._handle_item = None

        self.viewChanged.connect(self._sync_display_size)

    def controller(self) -> MaskController:
        return self._controller

    def set_image(self, image: np.ndarray):
        # scene.clear() inside set_image deletes the overlay items
        self._dim_item = self._circle_item = self._handle_item = None
        super().set_image(image)
        self._create_overlay()
        self._sync_display_size()
        self._update_overlay()

    def clear_image(self):
        self._controller.hide()
        self._dim_item = self._circle_item = self._handle_item = None
        super().clear_image()

    def set_mask_visible(self, visible: bool):
        if visible and self.has_image():
            self._sync_display_size()
            self._controller.show()
        else:
            self._controller.hide()

    def set_mask_enabled(self, enabled: bool):
        self._controller.set_enabled(enabled)
        self._update_overlay()

    def _sync_display_size(self):
        rect = self.image_display_rect()
        if rect is not None:
            self._controller.set_display_size(rect.width(), rect.height())

    def _to_display(self, event: QMouseEvent) -> tuple | None:
        rect = self.image_display_rect()
        if rect is None:
            return None
        self._controller.set_display_size(rect.width(), rect.height())
        pos = event.position()
        return pos.x() - rect.left(), pos.y() - rect.top()

    # --- Overlay drawing ---

    def _create_overlay(self):
        self._dim_item = self._scene.addPath(
            QPainterPath(), QPen(Qt.PenStyle.NoPen), QBrush(QColor(0, 0, 0, 150))
        )

        pen = QPen(QColor(99, 102, 241))
        pen.setWidth(2)
        pen.setCosmetic(True)
        self._circle_item = self._scene.addEllipse(
            QRectF(), pen, QBrush(QColor(0, 0, 0, 25))
        )

        s = self.HANDLE_SIZE
        self._handle_item = self._scene.addEllipse(
            QRectF(-s / 2, -s / 2, s, s),
            QPen(QColor(99, 102, 241)),
            QBrush(QColor(255, 255, 255, 210))
        )
        self._handle_item.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations)

        for item in (self._dim_item, self._circle_item, self._handle_item):
            item.setVisible(False)

    def _update_overlay(self):
        if self._circle_item is None or self._image_array is None:
            return

        self._sync_display_size()
        ctrl = self._controller
        # A 0x0 viewport leaves no display scale to draw with
        shown = ctrl.visible and ctrl.center is not None and ctrl.has_geometry
        for item in (self._dim_item, self._circle_item, self._handle_item):
            item.setVisible(shown)
        if not shown:
            return

        h, w = self._image_array.shape[:2]
        cx, cy = ctrl.center
        rx, ry = ctrl.radii
        circle = QRectF(cx - rx, cy - ry, 2 * rx, 2 * ry)

        outside = QPainterPath()
        outside.addRect(QRectF(0, 0, w, h))
        hole = QPainterPath()
        hole.addEllipse(circle)
        self._dim_item.setPath(outside.subtracted(hole))
        self._circle_item.setRect(circle)

        offset = 1 / np.sqrt(2)
        self._handle_item.setPos(QPointF(cx + rx * offset, cy + ry * offset))
        self._handle_item.setOpacity(1.0 if ctrl.enabled else 0.5)

    # --- Pointer events ---

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = self._to_display(event)
            if pos is not None and self._controller.press(*pos):
                if self._controller.gesture is Gesture.RESIZING_RADIUS:
                    self.viewport().setCursor(Qt.CursorShape.SizeFDiagCursor)
                else:
                    self.viewport().setCursor(Qt.CursorShape.ClosedHandCursor)
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._controller.is_active:
            pos = self._to_display(event)
            if pos is not None:
                self._controller.move(*pos)
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        if self._controller.is_active:
            self._controller.release()
            self.viewport().unsetCursor()
            event.accept()
            return
        super().mouseReleaseEvent(event)


class ViewerPanel(QWidget):
    """A viewer with a header bar (label, resolution badge, Fit button)."""

    def __init__(self, label: str, viewer: ImageViewer, parent=None):
        super().__init__(parent)
        self._viewer = viewer

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        header = QFrame()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(10, 5, 10, 5)
        header_layout.setSpacing(8)

        self._label_widget = QLabel(label)
        self._label_widget.setStyleSheet("font-weight: 600;")
        header_layout.addWidget(self._label_widget)

        self._res_badge = QLabel("")
        self._res_badge.setVisible(False)
        header_layout.addWidget(self._res_badge)

        self._context_badge = QLabel("")
        self._context_badge.setVisible(False)
        header_layout.addWidget(self._context_badge)

        header_layout.addStretch()

        fit_btn = QPushButton("Fit")
        fit_btn.setToolTip("Fit to Window")
        fit_btn.clicked.connect(self._viewer.reset_view)
        header_layout.addWidget(fit_btn)

        layout.addWidget(header)
        layout.addWidget(self._viewer)

    def viewer(self) -> ImageViewer:
        return self._viewer

    def set_image(self, image: np.ndarray):
        self._viewer.set_image(image)
        h, w = image.shape[:2]
        self._res_badge.setText(f"{w}×{h}")
        self._res_badge.setVisible(True)

    def clear_image(self):
        self._viewer.clear_image()
        self._res_badge.setVisible(False)
        self._context_badge.setVisible(False)

    def set_context_info(self, info: str):
        self._context_badge.setText(info)
        self._context_badge.setVisible(bool(info))
