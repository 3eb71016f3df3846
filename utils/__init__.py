"""Shared utilities."""

from .metrics import compute_psnr_ssim, mask_coverage, Timer
from .test_images import (
    generate_checkerboard, generate_stripes, generate_disk,
    generate_gradient, generate_text_edges, generate_demo_image
)
from .image_io import load_grayscale, decode_grayscale, encode_png, save_image

__all__ = [
    'compute_psnr_ssim',
    'mask_coverage',
    'Timer',
    'generate_checkerboard',
    'generate_stripes',
    'generate_disk',
    'generate_gradient',
    'generate_text_edges',
    'generate_demo_image',
    'load_grayscale',
    'decode_grayscale',
    'encode_png',
    'save_image',
]
