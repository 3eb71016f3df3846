"""Image I/O using OpenCV. Everything leaves here as BT.601 luminance."""

import cv2
import numpy as np


def fit_within(width: int, height: int, max_dim: int) -> tuple:
    """Scale (width, height) down so the longer side is at most max_dim."""
    if width > height:
        if width > max_dim:
            height = max(1, round(height * max_dim / width))
            width = max_dim
    else:
        if height > max_dim:
            width = max(1, round(width * max_dim / height))
            height = max_dim
    return width, height


def to_grayscale(image_bgr: np.ndarray) -> np.ndarray:
    """Float luminance 0.299 R + 0.587 G + 0.114 B from a BGR/BGRA/gray image."""
    if image_bgr.ndim == 2:
        return image_bgr.astype(np.float64)
    img = image_bgr.astype(np.float64)
    B, G, R = img[:, :, 0], img[:, :, 1], img[:, :, 2]
    return 0.299 * R + 0.587 * G + 0.114 * B


def _prepare(image_bgr: np.ndarray, max_dim: int) -> np.ndarray:
    h, w = image_bgr.shape[:2]
    new_w, new_h = fit_within(w, h, max_dim)
    if (new_w, new_h) != (w, h):
        image_bgr = cv2.resize(image_bgr, (new_w, new_h), interpolation=cv2.INTER_AREA)
    return to_grayscale(image_bgr)


def load_grayscale(path: str, max_dim: int = 256) -> np.ndarray:
    """Load an image file as a float grayscale grid no larger than max_dim."""
    img = cv2.imread(path, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError(f"Could not load image from {path}")
    return _prepare(img, max_dim)


def decode_grayscale(data: bytes, max_dim: int = 256) -> np.ndarray:
    """Decode encoded image bytes (PNG, JPEG, ...) to a float grayscale grid."""
    buf = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("Could not decode image data")
    return _prepare(img, max_dim)


def encode_png(image: np.ndarray) -> bytes:
    """Encode an 8-bit grayscale image as PNG bytes."""
    ok, buf = cv2.imencode('.png', np.asarray(image, dtype=np.uint8))
    if not ok:
        raise ValueError("PNG encoding failed")
    return buf.tobytes()


def save_image(image: np.ndarray, path: str) -> None:
    """Save an 8-bit grayscale image."""
    if not cv2.imwrite(path, np.asarray(image, dtype=np.uint8)):
        raise ValueError(f"Could not write image to {path}")
