import pytest

from qrstyle.errors import EncodingError
from qrstyle.preview import DARK, LIGHT, QUIET_ZONE, render_terminal


def test_full_size_preview():
    text = render_terminal("hello")
    lines = text.split("\n")
    side = 21 + 2 * QUIET_ZONE
    assert len(lines) == side
    assert all(len(line) == 2 * side for line in lines)
    assert lines[0] == LIGHT * side
    # finder pattern top-left corner
    assert lines[QUIET_ZONE][2 * QUIET_ZONE:2 * QUIET_ZONE + 2] == DARK


def test_compact_preview_halves_rows():
    full = render_terminal("hello").split("\n")
    compact = render_terminal("hello", compact=True).split("\n")
    assert len(compact) < len(full)
    assert not render_terminal("hello", compact=True).endswith("\n")


def test_error_correction_changes_symbol():
    assert render_terminal("https://example.com", "L") != render_terminal("https://example.com", "H")


def test_empty_payload():
    with pytest.raises(EncodingError):
        render_terminal("")


def test_oversized_payload():
    with pytest.raises(EncodingError):
        render_terminal("x" * 5000, "H")


def test_whitespace_payload():
    with pytest.raises(EncodingError):
        render_terminal("   \n")
