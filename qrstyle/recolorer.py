"""
Final color and alpha assignment for classified QR rasters.

Functions
---------
recolor
    Rewrite every pixel from its foreground/background label.
circle_mask
    Pixels inside the circle inscribed in their module cell.
apply_styling
    Decode, classify, recolor and re-encode a PNG, falling back to the
    input bytes on failure.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .classifier import classify
from .codec import decode_png, encode_png
from .colors import hex_to_rgb
from .encoder import ModuleGeometry
from .errors import StylingError
from .style import ModuleShape, StyleOptions

logger = logging.getLogger(__name__)

TRANSPARENT_PIXEL = (0, 0, 0, 0)


def recolor(raster: np.ndarray, mask: np.ndarray, options: StyleOptions) -> np.ndarray:
    """
    Assign final RGBA values from a foreground mask.

    Parameters
    ----------
    raster : numpy.ndarray
        Source array of shape (H, W, 4). Only its shape is used; the
        input is not modified.
    mask : numpy.ndarray
        Boolean (H, W) array, True for FOREGROUND pixels.
    options : StyleOptions
        Requested colors and transparency.

    Returns
    -------
    numpy.ndarray
        New uint8 (H, W, 4) array where

        - FOREGROUND pixels take the requested foreground color with
          alpha 255, whatever the transparency mode;
        - BACKGROUND pixels are (0, 0, 0, 0) when `options.transparent`
          is set;
        - otherwise BACKGROUND pixels take the requested background
          color with alpha 255.
    """
    h, w = raster.shape[:2]
    if mask.shape != (h, w):
        raise StylingError(f"mask shape {mask.shape} does not match raster {(h, w)}")

    if options.transparent:
        background = TRANSPARENT_PIXEL
    else:
        background = (*hex_to_rgb(options.background_color), 255)

    out = np.empty((h, w, 4), dtype=np.uint8)
    out[...] = background
    out[mask] = (*hex_to_rgb(options.foreground_color), 255)
    return out


def circle_mask(shape: tuple[int, int], geometry: ModuleGeometry) -> np.ndarray:
    """
    Pixels whose centre lies in the circle inscribed in their module.

    Parameters
    ----------
    shape : tuple of int
        (height, width) of the raster.
    geometry : ModuleGeometry
        Module size and margin the raster was rendered with.

    Returns
    -------
    numpy.ndarray
        Boolean (H, W) array. Quiet-zone pixels are False.
    """
    h, w = shape
    if (h, w) != (geometry.side, geometry.side):
        raise StylingError(
            f"raster shape {shape} does not match geometry side {geometry.side}"
        )

    index, inside = geometry.module_index()
    centre = (np.arange(geometry.side) + 0.5 - geometry.margin_px) / geometry.scale
    # Offset of the pixel centre from its module centre, in module units.
    local = np.clip(centre - index, 0.0, 1.0) - 0.5

    dist2 = local[:, None] ** 2 + local[None, :] ** 2
    return (dist2 <= 0.25) & inside[:, None] & inside[None, :]


def _style_raster(
    raster: np.ndarray,
    options: StyleOptions,
    resolved_background: str,
    geometry: Optional[ModuleGeometry],
) -> np.ndarray:
    fg = hex_to_rgb(options.foreground_color)
    bg = hex_to_rgb(resolved_background)
    mask = classify(raster, fg, bg)

    if options.module_shape is ModuleShape.CIRCLE:
        if geometry is None:
            logger.warning("Circle modules need the module geometry; using square modules")
        else:
            mask &= circle_mask(mask.shape, geometry)

    logger.debug(
        "Classified %d of %d pixels as foreground", int(mask.sum()), mask.size
    )
    return recolor(raster, mask, options)


def apply_styling(
    buffer: bytes,
    options: StyleOptions,
    resolved_background: str,
    geometry: Optional[ModuleGeometry] = None,
) -> bytes:
    """
    Restyle an encoder-produced PNG.

    The raster is classified against the requested foreground color and
    the background color it was actually rendered with, optionally
    masked to circular modules, and recolored.

    Parameters
    ----------
    buffer : bytes
        PNG produced by the encoder.
    options : StyleOptions
        Requested styling.
    resolved_background : str
        Hex background color the encoder drew (see
        ``style.resolve_background``).
    geometry : ModuleGeometry, optional
        Required for circle modules.

    Returns
    -------
    bytes
        Styled PNG, or `buffer` unchanged if styling failed. Failures are
        logged as warnings and never raised.
    """
    try:
        raster = decode_png(buffer)
        styled = _style_raster(raster, options, resolved_background, geometry)
        return encode_png(styled)
    except Exception as exc:
        logger.warning("Styling failed (%s); falling back to the unstyled QR code", exc)
        return buffer
