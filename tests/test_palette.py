import numpy as np
import pytest

from mandelzoom import ColorMapper, ColormapMapper


@pytest.mark.parametrize(
    "count, expected",
    [
        (0, (0, 0, 0)),
        (1, (10, 1, 1)),
        (5, (50, 5, 5)),
        (25, (250, 25, 25)),
        (26, (255, 26, 26)),
        (254, (255, 254, 254)),
        (300, (255, 255, 255)),
        (-4, (0, 0, 0)),
    ],
)
def test_reference_gradient(count, expected):
    assert ColorMapper().color_for(count) == expected


def test_vectorized_colors_match_scalar():
    mapper = ColorMapper()
    counts = np.arange(0, 260)

    colors = mapper.colors_for(counts)

    assert colors.dtype == np.uint8
    assert colors.shape == (260, 3)
    assert [tuple(row) for row in colors.tolist()] == [mapper.color_for(c) for c in counts]


def test_colormap_mapper_returns_rgb_bytes():
    mapper = ColormapMapper("viridis", 255)

    colors = mapper.colors_for(np.array([1, 128, 254]))

    assert colors.dtype == np.uint8
    assert colors.shape == (3, 3)
    assert len({tuple(row) for row in colors.tolist()}) == 3
    assert mapper.color_for(128) == tuple(colors[1].tolist())


def test_colormap_mapper_invert():
    plain = ColormapMapper("magma", 100)
    inverted = ColormapMapper("magma", 100, invert=True)
    assert inverted.color_for(0) == plain.color_for(100)
    assert inverted.color_for(100) == plain.color_for(0)


def test_colormap_mapper_rejects_unknown_name():
    with pytest.raises(ValueError):
        ColormapMapper("not-a-colormap", 255)


def test_colormap_mapper_rejects_empty_budget():
    with pytest.raises(ValueError):
        ColormapMapper("viridis", 0)
