"""
Hex and RGB color helpers.

Parsing is deliberately lenient: any string that is not exactly six hex
digits (with an optional leading ``#``) parses as black, so a malformed
color never aborts QR generation.
"""

from __future__ import annotations

import re

Color = tuple[int, int, int]  # (R, G, B)

BLACK: Color = (0, 0, 0)

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def hex_to_rgb(hex_str: str) -> Color:
    """
    Parse a ``#rrggbb`` or ``rrggbb`` string into an RGB triple.

    Parameters
    ----------
    hex_str : str
        Color string. Case-insensitive.

    Returns
    -------
    Color
        (R, G, B) with each channel in 0-255, or (0, 0, 0) if `hex_str`
        is not a six-digit hex color.
    """
    if not isinstance(hex_str, str):
        return BLACK
    match = _HEX_RE.fullmatch(hex_str)
    if match is None:
        return BLACK
    r, g, b = (int(group, 16) for group in match.groups())
    return (r, g, b)


def rgb_to_hex(rgb: Color) -> str:
    """RGB triple to lowercase ``#rrggbb``."""
    r, g, b = (int(c) for c in rgb)
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"channel value {channel} outside 0-255")
    return f"#{r:02x}{g:02x}{b:02x}"


def invert_color(hex_str: str) -> str:
    """
    Per-channel complement of a hex color.

    ``invert_color("#000000") == "#ffffff"``. Malformed input is treated
    as black, so it inverts to white.
    """
    r, g, b = hex_to_rgb(hex_str)
    return rgb_to_hex((255 - r, 255 - g, 255 - b))
