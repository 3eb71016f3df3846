"""GUI widgets for the k-space lab."""

from .image_viewer import ImageViewer, KSpaceViewer, ViewerPanel

__all__ = ['ImageViewer', 'KSpaceViewer', 'ViewerPanel']
