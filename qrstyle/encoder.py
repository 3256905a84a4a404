"""
QR module matrix generation and base raster rendering.

The QR structure is generated once with the qrcode library and stored as
a 2D boolean array; rendering is performed explicitly in pixel space so
the output has exactly the requested side length and only ever contains
the two flat colors it was asked to draw.

Classes
-------
QRSpec
    Immutable encoder configuration.
ModuleGeometry
    Mapping between pixel and module coordinates of a rendered raster.
QRCodeImage
    QR code backed by a boolean module matrix.

Functions
---------
encode
    One-shot payload to PNG bytes using StyleOptions.

Notes
-----
OpenCV is optional and required only for ``QRCodeImage.validate``. If it
is unavailable, validation raises RuntimeError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import qrcode
from qrcode.exceptions import DataOverflowError

from .codec import encode_png
from .colors import Color, hex_to_rgb
from .errors import EncodingError, InputValidationError
from .style import (
    DEFAULT_ERROR_CORRECTION,
    DEFAULT_MARGIN,
    DEFAULT_SIZE,
    StyleOptions,
    ecc_level,
    normalize_version,
    resolve_background,
    validate_ecc,
)

logger = logging.getLogger(__name__)

# Pixels per module when the requested size cannot fit one pixel per module.
FALLBACK_SCALE = 4


@dataclass(frozen=True)
class QRSpec:
    """
    Immutable configuration for encoding a payload.

    Parameters
    ----------
    data : str
        Payload encoded into the QR code. Must be a non-empty string.
    error_correction : {'L', 'M', 'Q', 'H'}, optional
        Error-correction level, case-insensitive. The default is 'M'.
    margin : int, optional
        Width, in modules, of the quiet zone. The default is 4.
    size : int, optional
        Requested side of the rendered image in pixels. The default is
        300.
    version : int, optional
        QR version 1-40, or None/0 to let the library pick the smallest
        version that fits.

    Raises
    ------
    InputValidationError
        If `data` is empty or whitespace, or another field is invalid.
    """

    data: str
    error_correction: str = DEFAULT_ERROR_CORRECTION
    margin: int = DEFAULT_MARGIN
    size: int = DEFAULT_SIZE
    version: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.data, str) or not self.data.strip():
            raise InputValidationError("'data' must be a non-empty string")
        if self.margin < 0:
            raise InputValidationError("'margin' must be non-negative")
        if self.size <= 0:
            raise InputValidationError("'size' must be positive")

        object.__setattr__(self, "error_correction", validate_ecc(self.error_correction))
        object.__setattr__(self, "version", normalize_version(self.version))

    @property
    def ecc_level(self) -> int:
        return ecc_level(self.error_correction)

    @classmethod
    def from_options(cls, data: str, options: StyleOptions) -> "QRSpec":
        return cls(
            data=data,
            error_correction=options.error_correction,
            margin=options.margin,
            size=options.size,
            version=options.version,
        )


@dataclass(frozen=True)
class ModuleGeometry:
    """
    Layout of a rendered QR raster.

    Attributes
    ----------
    modules : int
        Number of modules per side of the symbol, excluding the margin.
    margin : int
        Quiet-zone width in modules.
    scale : float
        Pixels per module. May be fractional.
    side : int
        Side of the raster in pixels.
    """

    modules: int
    margin: int
    scale: float
    side: int

    @classmethod
    def for_size(cls, modules: int, margin: int, size: int) -> "ModuleGeometry":
        total = modules + 2 * margin
        if size >= total:
            return cls(modules=modules, margin=margin, scale=size / total, side=size)
        return cls(
            modules=modules,
            margin=margin,
            scale=float(FALLBACK_SCALE),
            side=total * FALLBACK_SCALE,
        )

    @property
    def margin_px(self) -> float:
        return self.margin * self.scale

    def module_index(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Module index of every pixel row/column.

        Returns
        -------
        tuple of numpy.ndarray
            ``(index, inside)``, both of length `side`. ``index`` holds
            the module index (clipped to the symbol) and ``inside`` is
            True for pixels that fall within the symbol area rather than
            the quiet zone.
        """
        px = np.arange(self.side, dtype=np.float64)
        offset = px - self.margin_px
        inside = (offset >= 0) & (px < self.side - self.margin_px)
        index = np.floor(offset / self.scale).astype(np.int64)
        index = np.clip(index, 0, max(self.modules - 1, 0))
        return index, inside


class QRCodeImage:
    """
    Generated QR code backed by a boolean module matrix.

    Parameters
    ----------
    spec : QRSpec
        Payload, error-correction level, margin, size and version.

    Attributes
    ----------
    spec : QRSpec
        Specification used to generate this image.
    matrix : numpy.ndarray
        Boolean (modules, modules) array; True marks a dark module.
    version : int
        QR version actually used.
    geometry : ModuleGeometry
        Pixel layout of the rendered raster.

    Raises
    ------
    EncodingError
        If the payload does not fit the requested version and
        error-correction level.
    """

    def __init__(self, spec: QRSpec) -> None:
        self.spec = spec
        self._matrix, self._version = self._build_matrix()
        self.geometry = ModuleGeometry.for_size(
            self.module_count, spec.margin, spec.size
        )
        logger.debug(
            "Encoded %d chars as version %d (%d modules, %.3f px/module)",
            len(spec.data),
            self._version,
            self.module_count,
            self.geometry.scale,
        )

    # ---------- Core matrix generation ----------

    def _build_matrix(self) -> tuple[np.ndarray, int]:
        qr = qrcode.QRCode(
            version=self.spec.version,
            error_correction=self.spec.ecc_level,
            box_size=1,
            border=0,
        )
        qr.add_data(self.spec.data)
        try:
            # An explicit version must not be bumped by best_fit.
            qr.make(fit=self.spec.version is None)
        except (DataOverflowError, ValueError) as exc:
            raise EncodingError(
                f"payload of {len(self.spec.data)} characters does not fit "
                f"version {self.spec.version or 'auto'} with error correction "
                f"{self.spec.error_correction}: {exc}"
            ) from exc

        return np.array(qr.get_matrix(), dtype=bool), qr.version

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def version(self) -> int:
        return self._version

    @property
    def module_count(self) -> int:
        return self._matrix.shape[0]

    @property
    def pixel_shape(self) -> tuple[int, int]:
        """(height, width) of the rendered raster, quiet zone included."""
        return self.geometry.side, self.geometry.side

    # ---------- Rendering ----------

    def _full_mask(self) -> np.ndarray:
        """
        Full-resolution boolean mask in pixel space.

        Each pixel is mapped back to the module it falls in by
        nearest-neighbour scaling, so fractional module sizes never
        produce intermediate colors.

        Returns
        -------
        numpy.ndarray
            Boolean array of shape (H, W); True marks pixels of dark
            modules. Quiet-zone pixels are False.
        """
        index, inside = self.geometry.module_index()
        mask = self._matrix[np.ix_(index, index)]
        return mask & inside[:, None] & inside[None, :]

    def dark_pixel_count(self) -> int:
        """Number of raster pixels that belong to dark modules."""
        return int(self._full_mask().sum())

    def render_array(
        self,
        *,
        fg: Color = (0, 0, 0),
        bg: Color = (255, 255, 255),
    ) -> np.ndarray:
        """
        Render the QR code to an opaque RGBA array.

        Parameters
        ----------
        fg : Color, optional
            Color of dark modules. The default is (0, 0, 0).
        bg : Color, optional
            Color of light modules and the quiet zone. The default is
            (255, 255, 255).

        Returns
        -------
        numpy.ndarray
            uint8 array of shape (H, W, 4) with alpha 255 everywhere.
        """
        h, w = self.pixel_shape
        img = np.full((h, w, 4), (*bg, 255), dtype=np.uint8)
        img[self._full_mask()] = (*fg, 255)
        return img

    def to_png_bytes(
        self,
        *,
        fg: Color = (0, 0, 0),
        bg: Color = (255, 255, 255),
    ) -> bytes:
        """PNG-encoded bytes of ``render_array(fg=fg, bg=bg)``."""
        return encode_png(self.render_array(fg=fg, bg=bg))

    # ---------- Validation / decoding (with OpenCV) ----------

    def _decode_with_cv2(
        self,
        image: Optional[np.ndarray] = None,
    ) -> tuple[Optional[str], bool]:
        """
        Decode a QR image using OpenCV's QRCodeDetector.

        Parameters
        ----------
        image : numpy.ndarray, optional
            RGB (H, W, 3) or RGBA (H, W, 4) image. RGBA input is
            composited over white first, so transparent backgrounds
            read as light. If None, the plain black-on-white rendering
            of this object is used.

        Returns
        -------
        tuple of (str or None, bool)
            Decoded text (None if nothing was detected) and whether
            OpenCV reported a successful decode.

        Raises
        ------
        RuntimeError
            If OpenCV (cv2) is not installed.
        ValueError
            If `image` has an unsupported shape.
        """
        try:
            import cv2
        except ImportError as exc:
            raise RuntimeError(
                "validate requires OpenCV (cv2) to be installed."
            ) from exc

        img = self.render_array() if image is None else np.asarray(image)
        if img.ndim != 3 or img.shape[2] not in (3, 4):
            raise ValueError("image must be (H, W, 3) or (H, W, 4)")

        if img.shape[2] == 4:
            alpha = img[..., 3:4].astype(np.float32) / 255.0
            rgb = img[..., :3].astype(np.float32) * alpha + 255.0 * (1.0 - alpha)
            rgb = np.round(rgb).astype(np.uint8)
        else:
            rgb = img.astype(np.uint8, copy=False)

        bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

        detector = cv2.QRCodeDetector()
        data, points, _ = detector.detectAndDecode(bgr)

        if points is None or not data:
            return None, False

        return data, True

    def validate(self, image: Optional[np.ndarray] = None) -> bool:
        """
        Check that an image decodes back to this object's payload.

        Parameters
        ----------
        image : numpy.ndarray, optional
            Image to check; see ``_decode_with_cv2``. Defaults to the
            plain rendering.

        Returns
        -------
        bool
            True if the decoded text equals ``self.spec.data``.
        """
        decoded, ok = self._decode_with_cv2(image=image)
        return bool(ok and decoded == self.spec.data)


def encode(
    payload: str,
    options: StyleOptions,
    background: Optional[str] = None,
) -> bytes:
    """
    Render `payload` as an opaque two-tone PNG.

    Parameters
    ----------
    payload : str
        Text to encode.
    options : StyleOptions
        Supplies error correction, size, margin, version and the
        foreground color.
    background : str, optional
        Hex background color to draw. Defaults to
        ``resolve_background(options)``.

    Returns
    -------
    bytes
        PNG bytes.

    Raises
    ------
    EncodingError
        If the payload is empty or does not fit.
    """
    if background is None:
        background = resolve_background(options)
    try:
        spec = QRSpec.from_options(payload, options)
    except InputValidationError as exc:
        raise EncodingError(str(exc)) from exc

    qr = QRCodeImage(spec)
    return qr.to_png_bytes(
        fg=hex_to_rgb(options.foreground_color),
        bg=hex_to_rgb(background),
    )
