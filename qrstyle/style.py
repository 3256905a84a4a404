"""
Styling options and background resolution.

Classes
-------
ModuleShape
    Shape used to draw dark modules.
StyleOptions
    Immutable configuration for one QR generation request.

Functions
---------
resolve_background
    Background color to request from the encoder.
parse_background
    Split a background argument into a color and a transparency flag.
normalize_hex_input
    Add the leading ``#`` to a user-typed hex color.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from qrcode.constants import (
    ERROR_CORRECT_L,
    ERROR_CORRECT_M,
    ERROR_CORRECT_Q,
    ERROR_CORRECT_H,
)

from .colors import invert_color
from .errors import InputValidationError


_ECC_MAP = {
    "L": ERROR_CORRECT_L,  # ~7% error correction
    "M": ERROR_CORRECT_M,  # ~15% (default)
    "Q": ERROR_CORRECT_Q,  # ~25%
    "H": ERROR_CORRECT_H,  # ~30%
}

ECC_NAMES = {
    "L": "low",
    "M": "medium",
    "Q": "quartile",
    "H": "high",
}

TRANSPARENT = "transparent"

DEFAULT_FOREGROUND = "#000000"
DEFAULT_BACKGROUND = "#FFFFFF"
DEFAULT_SIZE = 300
DEFAULT_MARGIN = 4
DEFAULT_ERROR_CORRECTION = "M"
DEFAULT_OUTPUT = "qrcode.png"

MAX_VERSION = 40


class ModuleShape(str, Enum):
    SQUARE = "square"
    CIRCLE = "circle"


def validate_ecc(value: str) -> str:
    """Return `value` upper-cased, or raise if it is not L, M, Q or H."""
    ecc_upper = str(value).upper()
    if ecc_upper not in _ECC_MAP:
        raise InputValidationError("'error_correction' must be one of {'L', 'M', 'Q', 'H'}")
    return ecc_upper


def ecc_level(value: str) -> int:
    """qrcode library constant for an error-correction letter."""
    return _ECC_MAP[validate_ecc(value)]


def normalize_version(version: Optional[int]) -> Optional[int]:
    """
    Validate a QR version number.

    ``None`` and 0 both mean automatic selection and return ``None``.
    """
    if version is None or version == 0:
        return None
    if isinstance(version, bool) or not isinstance(version, int):
        raise InputValidationError("'version' must be an integer")
    if not 1 <= version <= MAX_VERSION:
        raise InputValidationError(f"'version' must be between 1 and {MAX_VERSION}")
    return version


@dataclass(frozen=True)
class StyleOptions:
    """
    Immutable styling configuration for a single QR code.

    Parameters
    ----------
    foreground_color : str, optional
        Hex color of dark modules. The default is '#000000'.
    background_color : str, optional
        Hex color of light modules and the quiet zone. Ignored for
        rendering when `transparent` is True. The default is '#FFFFFF'.
    transparent : bool, optional
        Make background pixels fully transparent. The default is False.
    module_shape : ModuleShape or str, optional
        'square' or 'circle'. The default is 'square'.
    size : int, optional
        Requested image side in pixels. The default is 300.
    margin : int, optional
        Quiet-zone width in modules. The default is 4.
    error_correction : {'L', 'M', 'Q', 'H'}, optional
        Case-insensitive, normalized to uppercase. The default is 'M'.
    version : int, optional
        QR version 1-40. ``None`` or 0 selects the smallest version that
        fits the payload.

    Notes
    -----
    Color strings are not validated here. A malformed color renders as
    black (see ``colors.hex_to_rgb``).

    Raises
    ------
    InputValidationError
        If `size`, `margin`, `version`, `error_correction` or
        `module_shape` is out of range.
    """

    foreground_color: str = DEFAULT_FOREGROUND
    background_color: str = DEFAULT_BACKGROUND
    transparent: bool = False
    module_shape: ModuleShape = ModuleShape.SQUARE
    size: int = DEFAULT_SIZE
    margin: int = DEFAULT_MARGIN
    error_correction: str = DEFAULT_ERROR_CORRECTION
    version: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            raise InputValidationError("'size' must be a positive integer")
        if isinstance(self.margin, bool) or not isinstance(self.margin, int) or self.margin < 0:
            raise InputValidationError("'margin' must be a non-negative integer")

        try:
            shape = ModuleShape(self.module_shape)
        except ValueError as exc:
            raise InputValidationError("'module_shape' must be 'square' or 'circle'") from exc

        object.__setattr__(self, "module_shape", shape)
        object.__setattr__(self, "error_correction", validate_ecc(self.error_correction))
        object.__setattr__(self, "version", normalize_version(self.version))

    @property
    def ecc_level(self) -> int:
        """Integer error-correction level understood by ``qrcode``."""
        return _ECC_MAP[self.error_correction]

    @property
    def needs_styling(self) -> bool:
        """True when the base raster has to go through the pixel pass."""
        return self.transparent or self.module_shape is not ModuleShape.SQUARE

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "StyleOptions":
        """Build options from the parsed command-line arguments."""
        background, transparent = parse_background(args.background_color)
        return cls(
            foreground_color=args.foreground_color,
            background_color=background,
            transparent=transparent,
            module_shape=args.module_shape,
            size=args.size,
            margin=args.margin,
            error_correction=args.error_correction,
            version=args.qr_version,
        )


def parse_background(value: str) -> tuple[str, bool]:
    """
    Interpret a background argument.

    Returns
    -------
    tuple of (str, bool)
        ``(DEFAULT_BACKGROUND, True)`` for the literal 'transparent'
        (any case), otherwise ``(value, False)``.
    """
    if value.strip().lower() == TRANSPARENT:
        return DEFAULT_BACKGROUND, True
    return value, False


def normalize_hex_input(value: str) -> str:
    """'ff0000' -> '#ff0000'; values already starting with '#' pass through."""
    value = value.strip()
    if value.startswith("#"):
        return value
    return f"#{value}"


def resolve_background(options: StyleOptions) -> str:
    """
    Background color the encoder should draw.

    With transparency requested this is the inverse of the foreground
    color, so the two reference colors the classifier later separates
    are far apart in RGB space. Otherwise it is the requested
    background color.

    Notes
    -----
    Inversion is a fixed heuristic. It is not a contrast search: a
    foreground near mid-gray inverts to another mid-gray.
    """
    if options.transparent:
        return invert_color(options.foreground_color)
    return options.background_color
