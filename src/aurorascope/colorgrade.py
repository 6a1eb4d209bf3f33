"""
Presentation of the working raster.

Flattens the translucent bands onto the page background and stretches
the half-resolution raster back to output size, which is where the
soft-focus look comes from.
"""

from typing import Tuple

import numpy as np
from PIL import Image, ImageFilter


def composite_over(
    rgba: np.ndarray,
    background: Tuple[int, int, int] = (250, 252, 250),
) -> np.ndarray:
    """
    Source-over blend a straight-alpha RGBA raster onto a solid colour.

    Args:
        rgba: (H, W, 4) uint8 array.
        background: RGB byte triple.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    src = rgba.astype(np.float32)
    alpha = src[:, :, 3:4] / 255.0
    bg = np.asarray(background, dtype=np.float32)
    out = src[:, :, :3] * alpha + bg * (1.0 - alpha)
    return np.clip(np.round(out), 0, 255).astype(np.uint8)


def soft_focus(
    frame: np.ndarray,
    size: Tuple[int, int],
    radius: float = 0.0,
) -> np.ndarray:
    """
    Bilinear upscale to ``size`` with an optional gaussian blur on top.

    Args:
        frame: (h, w, 3) uint8 RGB array.
        size: Output (width, height).
        radius: Extra blur radius in output pixels (0 = stretch only).

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    img = Image.fromarray(frame)
    if img.size != tuple(size):
        img = img.resize(tuple(size), Image.BILINEAR)
    if radius > 0:
        img = img.filter(ImageFilter.GaussianBlur(radius=radius))
    return np.asarray(img, dtype=np.uint8)
