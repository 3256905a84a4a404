"""
Text rendering of a QR symbol for terminal display.
"""

from __future__ import annotations

from io import StringIO

import qrcode
from qrcode.exceptions import DataOverflowError

from .errors import EncodingError
from .style import DEFAULT_ERROR_CORRECTION, ecc_level

QUIET_ZONE = 4
DARK = "██"
LIGHT = "  "


def render_terminal(
    payload: str,
    error_correction: str = DEFAULT_ERROR_CORRECTION,
    compact: bool = False,
) -> str:
    """
    Render `payload` as a block-character string.

    Parameters
    ----------
    payload : str
        Text to encode.
    error_correction : {'L', 'M', 'Q', 'H'}, optional
        The default is 'M'.
    compact : bool, optional
        If True, use qrcode's half-block output, which packs two module
        rows into one text line. Otherwise each module is two full-block
        characters wide. The default is False.

    Returns
    -------
    str
        Multi-line string including a quiet zone, without a trailing
        newline.

    Raises
    ------
    EncodingError
        If the payload is empty or too large for any QR version.
    """
    if not payload.strip():
        raise EncodingError("cannot preview an empty payload")

    qr = qrcode.QRCode(
        error_correction=ecc_level(error_correction),
        box_size=1,
        border=QUIET_ZONE,
    )
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise EncodingError(f"payload too large to preview: {exc}") from exc

    if compact:
        buf = StringIO()
        qr.print_ascii(out=buf)
        return buf.getvalue().rstrip("\n")

    # get_matrix() includes the border configured above
    rows = qr.get_matrix()
    return "\n".join("".join(DARK if cell else LIGHT for cell in row) for row in rows)
