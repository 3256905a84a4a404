"""
End-to-end QR generation: resolve colors, encode, style, save.

Functions
---------
generate_qr
    Render a payload to styled PNG bytes.
save_qr
    Write PNG bytes to disk and return the absolute path.
describe
    Human-readable summary of a generated code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .colors import hex_to_rgb
from .encoder import QRCodeImage, QRSpec
from .errors import EncodingError, InputValidationError, OutputWriteError
from .recolorer import apply_styling
from .style import ECC_NAMES, StyleOptions, TRANSPARENT, resolve_background

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 50


@dataclass(frozen=True)
class GeneratedQR:
    """PNG bytes plus the encoder state they were rendered from."""

    png: bytes
    qr: QRCodeImage
    resolved_background: str

    @property
    def version(self) -> int:
        return self.qr.version


def render_qr(data: str, options: StyleOptions) -> GeneratedQR:
    """
    Encode `data` and apply the requested styling.

    Raises
    ------
    EncodingError
        If `data` is empty or too large for the requested version and
        error-correction level.
    """
    resolved_background = resolve_background(options)
    try:
        spec = QRSpec.from_options(data, options)
    except InputValidationError as exc:
        raise EncodingError(str(exc)) from exc

    qr = QRCodeImage(spec)
    png = qr.to_png_bytes(
        fg=hex_to_rgb(options.foreground_color),
        bg=hex_to_rgb(resolved_background),
    )

    if options.needs_styling:
        logger.debug(
            "Styling: transparent=%s shape=%s resolved background=%s",
            options.transparent,
            options.module_shape.value,
            resolved_background,
        )
        png = apply_styling(png, options, resolved_background, qr.geometry)

    return GeneratedQR(png=png, qr=qr, resolved_background=resolved_background)


def generate_qr(data: str, options: StyleOptions = StyleOptions()) -> bytes:
    """
    Render `data` to PNG bytes styled according to `options`.

    Styling only runs when transparency or a non-square module shape is
    requested; a styling failure yields the unstyled PNG (see
    ``recolorer.apply_styling``).
    """
    return render_qr(data, options).png


def save_qr(buffer: bytes, filename: Union[str, Path]) -> Path:
    """
    Write PNG bytes to `filename`.

    A '.png' suffix is appended when `filename` has no extension.

    Returns
    -------
    pathlib.Path
        Absolute path of the written file.

    Raises
    ------
    OutputWriteError
        If the file cannot be written.
    """
    path = Path(filename)
    if not path.suffix:
        path = path.with_name(path.name + ".png")
    path = path.resolve()

    try:
        path.write_bytes(buffer)
    except OSError as exc:
        raise OutputWriteError(f"Failed to save file: {exc}") from exc

    logger.debug("Wrote %d bytes to %s", len(buffer), path)
    return path


def describe(data: str, options: StyleOptions, result: GeneratedQR) -> str:
    """Multi-line summary of a generated QR code for console output."""
    side = result.qr.geometry.side
    shown = data[:PREVIEW_CHARS] + ("..." if len(data) > PREVIEW_CHARS else "")
    background = TRANSPARENT if options.transparent else options.background_color
    ecc = options.error_correction

    lines = [
        "QR Code Information:",
        "-" * 30,
        f"Data: {shown}",
        f"Length: {len(data)} characters",
        f"Error Correction: {ecc} ({ECC_NAMES[ecc]})",
        f"Size: {side}x{side} pixels",
        f"Margin: {options.margin} modules",
        f"Colors: {options.foreground_color} / {background}",
        f"Module Shape: {options.module_shape.value}",
        f"Version: {result.version}",
    ]
    return "\n".join(lines)
