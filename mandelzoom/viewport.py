"""Viewport of the complex plane and its mapping onto a pixel raster."""

from __future__ import annotations

import numbers
from dataclasses import dataclass

import numpy as np


class InvalidViewportError(ValueError):
    """Raised for a viewport without a positive extent on both axes."""


class InvalidDimensionsError(ValueError):
    """Raised for a raster size that is not a positive integer pair."""


def check_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidDimensionsError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensionsError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class Viewport:
    """Visible rectangle ``[xmin, xmax] x [ymin, ymax]`` of the complex plane.

    Pixel row ``y`` grows with the imaginary part, so ``ymin`` is drawn on the
    first row of the raster.
    """

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self) -> None:
        if not self.xmin < self.xmax:
            raise InvalidViewportError(f"xmin ({self.xmin!r}) must be smaller than xmax ({self.xmax!r})")
        if not self.ymin < self.ymax:
            raise InvalidViewportError(f"ymin ({self.ymin!r}) must be smaller than ymax ({self.ymax!r})")

    @classmethod
    def from_center(cls, x_center: float, y_center: float, x_width: float, y_width: float) -> "Viewport":
        half_x = np.float64(x_width) / 2.0
        half_y = np.float64(y_width) / 2.0
        return cls(
            xmin=float(x_center - half_x),
            xmax=float(x_center + half_x),
            ymin=float(y_center - half_y),
            ymax=float(y_center + half_y),
        )

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def center(self) -> tuple[float, float]:
        return (self.xmin + self.xmax) / 2.0, (self.ymin + self.ymax) / 2.0

    def to_plane(self, pixel_x: float, pixel_y: float, width: int, height: int) -> tuple[float, float]:
        """Interpolate a pixel position into plane coordinates."""

        check_dimensions(width, height)
        re = ((pixel_x / float(width)) * (self.xmax - self.xmin)) + self.xmin
        im = ((pixel_y / float(height)) * (self.ymax - self.ymin)) + self.ymin
        return re, im

    def to_pixel(self, re: float, im: float, width: int, height: int) -> tuple[int, int]:
        """Truncate a plane coordinate to the pixel holding it.

        Points just past the upper bounds land on the last row/column.
        """

        check_dimensions(width, height)
        x = int(((re - self.xmin) / (self.xmax - self.xmin)) * float(width))
        y = int(((im - self.ymin) / (self.ymax - self.ymin)) * float(height))
        return min(max(x, 0), width - 1), min(max(y, 0), height - 1)

    def to_pixels(self, res: np.ndarray, ims: np.ndarray, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
        """Vectorized :meth:`to_pixel` over matching arrays of samples."""

        check_dimensions(width, height)
        res = np.asarray(res, dtype=np.float64)
        ims = np.asarray(ims, dtype=np.float64)
        xs = np.trunc(((res - self.xmin) / (self.xmax - self.xmin)) * np.float64(width))
        ys = np.trunc(((ims - self.ymin) / (self.ymax - self.ymin)) * np.float64(height))
        xs = np.clip(xs, 0, width - 1).astype(np.int64)
        ys = np.clip(ys, 0, height - 1).astype(np.int64)
        return xs, ys


DEFAULT_VIEWPORT = Viewport(xmin=-2.0, xmax=2.0, ymin=-2.0, ymax=2.0)
