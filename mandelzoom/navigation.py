"""Utilities for moving the viewport around: click zooms and zoom sequences."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .renderer import Frame
from .viewport import InvalidViewportError, Viewport

DEFAULT_ZOOM_RATIO = 0.8


def zoom(viewport: Viewport, click_x: float, click_y: float, width: int, height: int, ratio: float) -> Viewport:
    """Return the viewport centred on the clicked pixel, scaled by ``ratio``.

    ``ratio < 1`` zooms in, ``ratio > 1`` zooms out and ``ratio == 1`` only
    recentres.
    """

    if not (ratio > 0 and math.isfinite(ratio)):
        raise InvalidViewportError(f"zoom ratio must be positive and finite, got {ratio!r}")
    half_x = ((viewport.xmax - viewport.xmin) / 2.0) * ratio
    half_y = ((viewport.ymax - viewport.ymin) / 2.0) * ratio
    x_center, y_center = viewport.to_plane(click_x, click_y, width, height)
    return Viewport(
        xmin=x_center - half_x,
        xmax=x_center + half_x,
        ymin=y_center - half_y,
        ymax=y_center + half_y,
    )


@dataclass(frozen=True)
class ZoomController:
    """Turn click events into viewport updates with a fixed ratio."""

    ratio: float = DEFAULT_ZOOM_RATIO

    def on_click(self, viewport: Viewport, click_x: float, click_y: float, width: int, height: int) -> Viewport:
        return zoom(viewport, click_x, click_y, width, height, self.ratio)

    def zoom_out(self, viewport: Viewport, click_x: float, click_y: float, width: int, height: int) -> Viewport:
        return zoom(viewport, click_x, click_y, width, height, 1.0 / self.ratio)


def compute_zoom_ratios(steps: int, ratio: float, *, final_zoom: Optional[float] = None, easing: str = "ease") -> np.ndarray:
    """Compute per-step zoom ratios for a scripted zoom sequence.

    With ``final_zoom`` the ratios multiply up to ``final_zoom`` over all
    steps, spread along a linear or smoothstep ("ease") curve in log space.
    Otherwise every step uses ``ratio``.
    """

    if steps <= 0:
        return np.array([], dtype=np.float64)

    if final_zoom is not None and final_zoom > 0:
        log_target = np.log(final_zoom)
        easing_mode = easing.lower()
        if easing_mode not in ("linear", "ease"):
            raise ValueError(f"unknown easing {easing!r}; expected 'linear' or 'ease'")

        def ease_in_out(t: float) -> float:
            return 3 * t ** 2 - 2 * t ** 3

        ease = (lambda u: u) if easing_mode == "linear" else ease_in_out
        # The first step already has to move, so the curve is sampled at 1/n .. n/n.
        alphas = np.array([ease((i + 1) / steps) for i in range(steps)], dtype=np.float64)
        alphas = np.clip(alphas, 0.0, 1.0)
        increments = np.diff(np.concatenate(([0.0], alphas)))
        return np.exp(increments * log_target)

    return np.full(steps, np.float64(ratio), dtype=np.float64)


def select_focus(frame: Frame) -> tuple[int, int]:
    """Pick the boundary pixel nearest to the raster centre as ``(x, y)``.

    A boundary cell is one whose coverage differs from the cell above it.
    Falls back to the centre when the frame has no boundary.
    """

    mask = frame.coverage()
    edges = np.logical_xor(np.roll(mask, 1, axis=0), mask)
    height, width = edges.shape
    center_row = height // 2
    center_col = width // 2

    for radius in range(max(height, width)):
        row_start = max(center_row - radius, 0)
        row_end = min(center_row + radius + 1, height)
        col_start = max(center_col - radius, 0)
        col_end = min(center_col + radius + 1, width)
        region = edges[row_start:row_end, col_start:col_end]
        if np.any(region):
            indices = np.argwhere(region)
            indices[:, 0] += row_start
            indices[:, 1] += col_start
            row, col = _nearest_to_center(indices, edges.shape)
            return int(col), int(row)

    return center_col, center_row


def _nearest_to_center(indices: np.ndarray, shape: tuple[int, int]) -> np.ndarray:
    center = np.array([(shape[0] - 1) / 2.0, (shape[1] - 1) / 2.0], dtype=np.float64)
    distances = np.sum((indices.astype(np.float64) - center) ** 2, axis=1)
    return indices[int(np.argmin(distances))]
