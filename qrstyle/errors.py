"""
Exception hierarchy for QR generation and styling.

Classes
-------
QRStyleError
    Base class for every error raised by this package.
InputValidationError
    Invalid option value or prompt answer.
EncodingError
    Payload cannot be encoded with the requested version and
    error-correction level. Fatal for the request.
StylingError
    Failure inside the classify/recolor pass. Recovered by returning the
    unstyled raster.
OutputWriteError
    The output file could not be written. Fatal for the request.
"""

from __future__ import annotations


class QRStyleError(Exception):
    """Base class for qrstyle errors."""


class InputValidationError(QRStyleError, ValueError):
    """Raised when an option value is out of range or malformed."""


class EncodingError(QRStyleError):
    """Raised when the payload does not fit the requested QR symbol."""


class StylingError(QRStyleError):
    """Raised when the pixel styling pass cannot complete."""


class OutputWriteError(QRStyleError, OSError):
    """Raised when the rendered PNG cannot be written to disk."""
