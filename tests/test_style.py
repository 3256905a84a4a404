import argparse

import pytest

from qrstyle.errors import InputValidationError
from qrstyle.style import (
    ModuleShape,
    StyleOptions,
    normalize_hex_input,
    parse_background,
    resolve_background,
)


def test_defaults():
    options = StyleOptions()
    assert options.foreground_color == "#000000"
    assert options.background_color == "#FFFFFF"
    assert options.transparent is False
    assert options.module_shape is ModuleShape.SQUARE
    assert options.size == 300
    assert options.margin == 4
    assert options.error_correction == "M"
    assert options.version is None
    assert options.needs_styling is False


def test_options_are_frozen():
    options = StyleOptions()
    with pytest.raises(AttributeError):
        options.size = 10


def test_normalizes_ecc_shape_and_version():
    options = StyleOptions(error_correction="q", module_shape="circle", version=0)
    assert options.error_correction == "Q"
    assert options.module_shape is ModuleShape.CIRCLE
    assert options.version is None
    assert options.needs_styling is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"size": 0},
        {"size": -5},
        {"margin": -1},
        {"error_correction": "X"},
        {"module_shape": "hexagon"},
        {"version": 41},
        {"version": -1},
    ],
)
def test_rejects_invalid_values(kwargs):
    with pytest.raises(InputValidationError):
        StyleOptions(**kwargs)


def test_malformed_color_is_not_an_error():
    options = StyleOptions(foreground_color="bogus")
    assert options.foreground_color == "bogus"


def test_resolve_background_opaque_uses_requested_color():
    assert resolve_background(StyleOptions(background_color="#123456")) == "#123456"


def test_resolve_background_transparent_inverts_foreground():
    assert resolve_background(StyleOptions(transparent=True)) == "#ffffff"
    options = StyleOptions(foreground_color="#1a73e8", background_color="#000000", transparent=True)
    assert resolve_background(options) == "#e58c17"


def test_parse_background():
    assert parse_background("transparent") == ("#FFFFFF", True)
    assert parse_background("Transparent") == ("#FFFFFF", True)
    assert parse_background("#00ff00") == ("#00ff00", False)


def test_normalize_hex_input():
    assert normalize_hex_input("ff0000") == "#ff0000"
    assert normalize_hex_input("#ff0000") == "#ff0000"


def test_from_args():
    args = argparse.Namespace(
        foreground_color="#112233",
        background_color="transparent",
        module_shape="circle",
        size=400,
        margin=2,
        error_correction="H",
        qr_version=7,
    )
    options = StyleOptions.from_args(args)
    assert options.transparent is True
    assert options.background_color == "#FFFFFF"
    assert options.module_shape is ModuleShape.CIRCLE
    assert (options.size, options.margin, options.error_correction, options.version) == (400, 2, "H", 7)
