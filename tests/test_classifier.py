import pytest
import numpy as np

from qrstyle.classifier import PixelClass, classify, classify_pixel

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def _raster(*pixels):
    return np.array([list(pixels)], dtype=np.uint8)


def test_exact_reference_colors():
    raster = _raster((0, 0, 0, 255), (255, 255, 255, 255))
    mask = classify(raster, BLACK, WHITE)
    assert mask.tolist() == [[True, False]]


def test_alpha_is_ignored():
    raster = _raster((0, 0, 0, 0), (255, 255, 255, 0))
    assert classify(raster, BLACK, WHITE).tolist() == [[True, False]]


def test_rgb_input_is_accepted():
    raster = np.array([[[10, 10, 10], [240, 240, 240]]], dtype=np.uint8)
    assert classify(raster, BLACK, WHITE).tolist() == [[True, False]]


def test_midpoint_bracketing():
    blue = (0, 0, 255)
    assert classify_pixel((0, 0, 127), BLACK, blue) is PixelClass.FOREGROUND
    assert classify_pixel((0, 0, 128), BLACK, blue) is PixelClass.BACKGROUND


def test_exact_tie_is_background():
    assert classify_pixel((0, 0, 127), BLACK, (0, 0, 254)) is PixelClass.BACKGROUND
    raster = _raster((0, 0, 127, 255))
    assert classify(raster, BLACK, (0, 0, 254)).tolist() == [[False]]


def test_identical_reference_colors_classify_everything_background():
    rng = np.random.default_rng(0)
    raster = rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)
    mask = classify(raster, (30, 60, 90), (30, 60, 90))
    assert not mask.any()


def test_nearest_color_tolerates_antialiasing():
    raster = _raster((40, 40, 40, 255), (200, 200, 200, 255))
    assert classify(raster, BLACK, WHITE).tolist() == [[True, False]]


def test_rejects_bad_shape():
    with pytest.raises(ValueError):
        classify(np.zeros((4, 4), dtype=np.uint8), BLACK, WHITE)
