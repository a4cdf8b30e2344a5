"""Resample an in-memory image buffer through a fit transform using cv2.remap.

Each target pixel center is normalized, mapped through the transform into
normalized source coordinates, then converted back to source pixels.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from . import affine

logger = logging.getLogger(__name__)


def normalized_grid(width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Normalized (u, v) of every pixel center, each of shape (height, width)."""
    u = (np.arange(width, dtype=np.float64) + 0.5) / width
    v = (np.arange(height, dtype=np.float64) + 0.5) / height
    return np.meshgrid(u, v)


def build_remap(
    matrix: np.ndarray,
    source_size: tuple[int, int],
    target_size: tuple[int, int],
) -> tuple[np.ndarray, np.ndarray]:
    """Compute float32 (map_x, map_y) for cv2.remap.

    *source_size* and *target_size* are (width, height).
    """
    src_w, src_h = source_size
    dst_w, dst_h = target_size

    u, v = normalized_grid(dst_w, dst_h)
    mapped = affine.transform_points(matrix, np.stack([u.ravel(), v.ravel()], axis=1))

    map_x = (mapped[:, 0] * src_w - 0.5).reshape(dst_h, dst_w).astype(np.float32)
    map_y = (mapped[:, 1] * src_h - 0.5).reshape(dst_h, dst_w).astype(np.float32)
    return map_x, map_y


def remap_image(
    source_image: np.ndarray,
    matrix: np.ndarray,
    target_size: tuple[int, int],
    interpolation: int = cv2.INTER_LINEAR,
) -> np.ndarray:
    """Return *source_image* resampled into a *target_size* (width, height) frame.

    Target pixels that land outside the source are black.
    """
    src_h, src_w = source_image.shape[:2]
    map_x, map_y = build_remap(matrix, (src_w, src_h), target_size)
    logger.debug("Remapping %dx%d -> %dx%d", src_w, src_h, target_size[0], target_size[1])
    return cv2.remap(
        source_image,
        map_x,
        map_y,
        interpolation=interpolation,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0,
    )
