"""Escape-count to RGB color mapping."""

from __future__ import annotations

from dataclasses import dataclass

import matplotlib
import numpy as np

RGB = tuple[int, int, int]


def _clamp_channel(value: int) -> int:
    return min(255, max(0, int(value)))


class ColorMapper:
    """Reference dark-to-orange gradient keyed on escape speed."""

    def color_for(self, count: int) -> RGB:
        count = int(count)
        return (
            _clamp_channel(min(255, count * 10)),
            _clamp_channel(count),
            _clamp_channel(count),
        )

    def colors_for(self, counts: np.ndarray) -> np.ndarray:
        counts = np.asarray(counts, dtype=np.int64).reshape(-1)
        channels = np.stack((np.minimum(255, counts * 10), counts, counts), axis=-1)
        return np.clip(channels, 0, 255).astype(np.uint8)


@dataclass(frozen=True)
class ColormapMapper(ColorMapper):
    """Color escape counts through a named matplotlib colormap."""

    name: str
    max_iterations: int
    invert: bool = False

    def __post_init__(self) -> None:
        if self.name not in matplotlib.colormaps:
            raise ValueError(f"unknown matplotlib colormap {self.name!r}")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be positive")

    def colors_for(self, counts: np.ndarray) -> np.ndarray:
        counts = np.asarray(counts, dtype=np.float64).reshape(-1)
        v = np.clip(counts / np.float64(self.max_iterations), 0.0, 1.0)
        if self.invert:
            v = 1.0 - v
        rgba = np.asarray(matplotlib.colormaps[self.name](v), dtype=np.float64).reshape(-1, 4)
        return np.uint8(np.clip(rgba[:, :3] * 255, 0, 255))

    def color_for(self, count: int) -> RGB:
        r, g, b = self.colors_for(np.array([count]))[0]
        return int(r), int(g), int(b)
