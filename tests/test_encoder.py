import sys

import numpy as np
import pytest

from qrstyle.codec import decode_png
from qrstyle.encoder import FALLBACK_SCALE, ModuleGeometry, QRCodeImage, QRSpec, encode
from qrstyle.errors import EncodingError, InputValidationError
from qrstyle.style import StyleOptions

URL = "https://example.com"


def test_spec_validation():
    with pytest.raises(InputValidationError):
        QRSpec("   ")
    with pytest.raises(InputValidationError):
        QRSpec(URL, error_correction="Z")
    assert QRSpec(URL, error_correction="h").error_correction == "H"
    assert QRSpec(URL, version=0).version is None


def test_matrix_matches_version():
    qr = QRCodeImage(QRSpec(URL))
    assert qr.matrix.dtype == bool
    assert qr.module_count == 17 + 4 * qr.version
    assert qr.matrix.shape == (qr.module_count, qr.module_count)


def test_higher_error_correction_never_needs_a_smaller_version():
    low = QRCodeImage(QRSpec(URL * 3, error_correction="L"))
    high = QRCodeImage(QRSpec(URL * 3, error_correction="H"))
    assert high.version >= low.version


def test_explicit_version_is_kept():
    qr = QRCodeImage(QRSpec(URL, version=5))
    assert qr.version == 5
    assert qr.module_count == 37


def test_payload_too_large_for_version():
    with pytest.raises(EncodingError):
        QRCodeImage(QRSpec("x" * 100, version=1))


def test_payload_too_large_for_any_version():
    with pytest.raises(EncodingError):
        QRCodeImage(QRSpec("x" * 5000, error_correction="H"))


def test_requested_size_is_exact():
    qr = QRCodeImage(QRSpec(URL, size=300))
    assert qr.pixel_shape == (300, 300)
    assert qr.render_array().shape == (300, 300, 4)


def test_small_size_uses_fallback_scale():
    qr = QRCodeImage(QRSpec(URL, size=10, margin=4))
    total = qr.module_count + 8
    assert qr.geometry.scale == FALLBACK_SCALE
    assert qr.pixel_shape == (total * FALLBACK_SCALE, total * FALLBACK_SCALE)


def test_geometry_for_size():
    geometry = ModuleGeometry.for_size(modules=21, margin=4, size=290)
    assert geometry.scale == 10.0
    assert geometry.side == 290
    assert geometry.margin_px == 40.0

    index, inside = geometry.module_index()
    assert not inside[:40].any() and not inside[250:].any()
    assert inside[40:250].all()
    assert index[40] == 0 and index[49] == 0 and index[50] == 1 and index[249] == 20


def test_render_is_two_tone_with_quiet_zone():
    qr = QRCodeImage(QRSpec(URL, size=300))
    img = qr.render_array(fg=(10, 20, 30), bg=(200, 210, 220))
    colors = {tuple(c) for c in img.reshape(-1, 4).tolist()}
    assert colors == {(10, 20, 30, 255), (200, 210, 220, 255)}
    assert tuple(img[0, 0]) == (200, 210, 220, 255)
    assert tuple(img[-1, -1]) == (200, 210, 220, 255)


def test_dark_pixels_scale_with_integer_module_size():
    probe = QRCodeImage(QRSpec(URL))
    size = (probe.module_count + 8) * 10
    qr = QRCodeImage(QRSpec(URL, size=size, margin=4))
    img = qr.render_array()
    assert qr.dark_pixel_count() == int(qr.matrix.sum()) * 100
    assert int((img[..., 0] == 0).sum()) == qr.dark_pixel_count()


def test_finder_pattern_is_dark_at_symbol_origin():
    qr = QRCodeImage(QRSpec(URL, size=330, margin=4))
    margin_px = int(qr.geometry.margin_px)
    img = qr.render_array()
    assert tuple(img[margin_px, margin_px][:3]) == (0, 0, 0)
    assert tuple(img[margin_px - 1, margin_px - 1][:3]) == (255, 255, 255)


def test_png_round_trip_through_codec():
    qr = QRCodeImage(QRSpec(URL, size=120))
    assert np.array_equal(decode_png(qr.to_png_bytes()), qr.render_array())


def test_encode_uses_resolved_background():
    png = encode(URL, StyleOptions(foreground_color="#1a73e8", transparent=True))
    img = decode_png(png)
    assert tuple(img[0, 0]) == (229, 140, 23, 255)


def test_encode_empty_payload():
    with pytest.raises(EncodingError):
        encode("", StyleOptions())


def test_validate_plain_and_transparent():
    pytest.importorskip("cv2")
    from qrstyle.generator import render_qr

    qr = QRCodeImage(QRSpec(URL, size=300))
    assert qr.validate()

    styled = decode_png(render_qr(URL, StyleOptions(transparent=True)).png)
    assert qr.validate(image=styled)


def test_validate_without_opencv(monkeypatch):
    monkeypatch.setitem(sys.modules, "cv2", None)
    qr = QRCodeImage(QRSpec(URL, size=120))
    with pytest.raises(RuntimeError, match="validate requires OpenCV"):
        qr.validate()
