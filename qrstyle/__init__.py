"""
qrstyle: QR codes with custom colors, transparent backgrounds and
circular modules.

Quick start:
  from qrstyle import StyleOptions, generate_qr, save_qr

  png = generate_qr("https://example.com", StyleOptions(transparent=True))
  save_qr(png, "example.png")

For debug logging:
  import logging
  logging.basicConfig(level=logging.DEBUG)
"""

import logging

__version__ = "1.0.0"

logger = logging.getLogger("qrstyle")
logger.addHandler(logging.NullHandler())

from .classifier import PixelClass, classify, classify_pixel  # noqa: E402
from .colors import hex_to_rgb, invert_color, rgb_to_hex  # noqa: E402
from .encoder import ModuleGeometry, QRCodeImage, QRSpec, encode  # noqa: E402
from .errors import (  # noqa: E402
    EncodingError,
    InputValidationError,
    OutputWriteError,
    QRStyleError,
    StylingError,
)
from .generator import GeneratedQR, describe, generate_qr, render_qr, save_qr  # noqa: E402
from .preview import render_terminal  # noqa: E402
from .recolorer import apply_styling, circle_mask, recolor  # noqa: E402
from .style import ModuleShape, StyleOptions, resolve_background  # noqa: E402

__all__ = [
    "__version__",
    # colors
    "hex_to_rgb",
    "rgb_to_hex",
    "invert_color",
    # options
    "ModuleShape",
    "StyleOptions",
    "resolve_background",
    # pixel engine
    "PixelClass",
    "classify",
    "classify_pixel",
    "recolor",
    "circle_mask",
    "apply_styling",
    # encoder
    "QRSpec",
    "QRCodeImage",
    "ModuleGeometry",
    "encode",
    # pipeline
    "GeneratedQR",
    "render_qr",
    "generate_qr",
    "save_qr",
    "describe",
    "render_terminal",
    # errors
    "QRStyleError",
    "InputValidationError",
    "EncodingError",
    "StylingError",
    "OutputWriteError",
]
