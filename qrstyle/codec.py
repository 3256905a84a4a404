"""
PNG <-> RGBA array conversion backed by Pillow.
"""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image


def decode_png(buffer: bytes) -> np.ndarray:
    """
    Decode encoded image bytes into a mutable RGBA array.

    Returns
    -------
    numpy.ndarray
        uint8 array of shape (H, W, 4). Images without alpha get an
        opaque alpha channel.

    Raises
    ------
    PIL.UnidentifiedImageError
        If `buffer` is not a readable image.
    """
    with Image.open(BytesIO(buffer)) as img:
        rgba = img.convert("RGBA")
    return np.array(rgba, dtype=np.uint8)


def encode_png(raster: np.ndarray) -> bytes:
    """Encode an (H, W, 4) uint8 array as PNG bytes."""
    arr = np.asarray(raster)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"raster must have shape (H, W, 4); got {arr.shape}")

    img = Image.fromarray(arr.astype(np.uint8, copy=False))
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
