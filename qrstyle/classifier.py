"""
Nearest-reference-color pixel classification.

Each pixel is compared against exactly two reference colors, the
foreground and the (resolved) background the raster was rendered with.
A pixel is FOREGROUND only if it is strictly closer to the foreground
color; equal distances go to BACKGROUND. Consequently, when the two
reference colors are identical every pixel is BACKGROUND.

Distances are compared squared, in integer arithmetic, which orders
pixels exactly like the Euclidean distance and keeps ties exact.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

import numpy as np

from .colors import Color


class PixelClass(IntEnum):
    BACKGROUND = 0
    FOREGROUND = 1


def _squared_distance(rgb: np.ndarray, ref: Color) -> np.ndarray:
    diff = rgb - np.asarray(ref, dtype=np.int32)
    return np.sum(diff * diff, axis=-1)


def classify(raster: np.ndarray, fg: Color, bg: Color) -> np.ndarray:
    """
    Label every pixel of a raster as foreground or background.

    Parameters
    ----------
    raster : numpy.ndarray
        Array of shape (H, W, 3) or (H, W, 4). Only the RGB channels are
        used; alpha is ignored.
    fg : Color
        Foreground reference color as an (R, G, B) triple.
    bg : Color
        Background reference color as an (R, G, B) triple.

    Returns
    -------
    numpy.ndarray
        Boolean array of shape (H, W); True marks FOREGROUND pixels.

    Raises
    ------
    ValueError
        If `raster` is not an (H, W, C) array with at least 3 channels.
    """
    arr = np.asarray(raster)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise ValueError(f"raster must have shape (H, W, 3) or (H, W, 4); got {arr.shape}")

    rgb = arr[..., :3].astype(np.int32)
    return _squared_distance(rgb, fg) < _squared_distance(rgb, bg)


def classify_pixel(pixel: Sequence[int], fg: Color, bg: Color) -> PixelClass:
    """Classify a single (R, G, B[, A]) pixel."""
    rgb = np.asarray(pixel[:3], dtype=np.int32)
    if _squared_distance(rgb, fg) < _squared_distance(rgb, bg):
        return PixelClass.FOREGROUND
    return PixelClass.BACKGROUND
