import math

import numpy as np
import pytest

from mandelzoom import DEFAULT_VIEWPORT, InvalidDimensionsError, InvalidViewportError, Viewport, check_dimensions


@pytest.mark.parametrize(
    "bounds",
    [
        (1.0, 1.0, -1.0, 1.0),
        (2.0, -2.0, -1.0, 1.0),
        (-1.0, 1.0, 0.5, 0.5),
        (-1.0, 1.0, 1.0, -1.0),
        (math.nan, 1.0, -1.0, 1.0),
        (-1.0, 1.0, -1.0, math.nan),
    ],
)
def test_rejects_non_positive_extents(bounds):
    with pytest.raises(InvalidViewportError):
        Viewport(*bounds)


def test_invalid_viewport_is_value_error():
    with pytest.raises(ValueError):
        Viewport(0.0, 0.0, 0.0, 1.0)


def test_from_center():
    viewport = Viewport.from_center(-0.5, 0.25, 3.0, 2.0)
    assert viewport == Viewport(-2.0, 1.0, -0.75, 1.25)
    assert viewport.center == (-0.5, 0.25)
    assert viewport.width == 3.0
    assert viewport.height == 2.0


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 5), (2.5, 4), (True, 4), ("8", 8)])
def test_check_dimensions_rejects(size):
    with pytest.raises(InvalidDimensionsError):
        check_dimensions(*size)


def test_check_dimensions_accepts_numpy_integers():
    check_dimensions(np.int64(3), 7)


def test_to_plane_corners():
    viewport = Viewport(-1.5, 0.5, -1.0, 1.0)
    assert viewport.to_plane(0, 0, 100, 50) == (-1.5, -1.0)
    assert viewport.to_plane(100, 50, 100, 50) == (0.5, 1.0)
    assert viewport.to_plane(50, 25, 100, 50) == (-0.5, 0.0)


def test_to_plane_rejects_bad_dimensions():
    with pytest.raises(InvalidDimensionsError):
        DEFAULT_VIEWPORT.to_plane(0, 0, 0, 10)


@pytest.mark.parametrize(
    "viewport, width, height",
    [
        (DEFAULT_VIEWPORT, 40, 40),
        (Viewport(-1.5, 0.5, -1.0, 1.0), 37, 23),
        (Viewport(-0.7436447860, -0.7436438870, 0.1318259042, 0.1318264200), 31, 17),
    ],
)
def test_round_trip_within_one_pixel(viewport, width, height):
    for x in range(width):
        for y in range(height):
            re, im = viewport.to_plane(x, y, width, height)
            px, py = viewport.to_pixel(re, im, width, height)
            assert abs(px - x) <= 1
            assert abs(py - y) <= 1


def test_to_pixel_clamps_to_raster():
    viewport = Viewport(-2.0, 2.0, -2.0, 2.0)
    assert viewport.to_pixel(2.0, 2.0, 800, 600) == (799, 599)
    assert viewport.to_pixel(2.5, -3.0, 800, 600) == (799, 0)
    assert viewport.to_pixel(-2.0, -2.0, 800, 600) == (0, 0)


def test_to_pixel_truncates():
    viewport = Viewport(0.0, 1.0, 0.0, 1.0)
    assert viewport.to_pixel(0.0999, 0.5, 10, 10) == (0, 5)
    assert viewport.to_pixel(0.1999, 0.9999, 10, 10) == (1, 9)


def test_to_pixels_matches_scalar_mapping():
    viewport = Viewport(-1.25, 0.75, -0.5, 1.5)
    rng = np.random.default_rng(7)
    res = rng.uniform(-1.5, 1.0, size=200)
    ims = rng.uniform(-0.75, 1.75, size=200)

    xs, ys = viewport.to_pixels(res, ims, 64, 48)

    assert xs.dtype == np.int64
    expected = [viewport.to_pixel(re, im, 64, 48) for re, im in zip(res, ims)]
    assert list(zip(xs.tolist(), ys.tolist())) == expected
