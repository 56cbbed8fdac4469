"""Public API for the Mandelbrot zoom engine."""

from .viewport import (
    DEFAULT_VIEWPORT,
    InvalidDimensionsError,
    InvalidViewportError,
    Viewport,
    check_dimensions,
)
from .escape import DEFAULT_ESCAPE_RADIUS, DEFAULT_MAX_ITERATIONS, colorable, escape_counts, evaluate
from .palette import ColorMapper, ColormapMapper
from .renderer import (
    DEFAULT_WORKER_COUNT,
    Frame,
    FrameRenderer,
    Pixel,
    RenderError,
    partition,
    render,
    sample_grid,
)
from .navigation import DEFAULT_ZOOM_RATIO, ZoomController, compute_zoom_ratios, select_focus, zoom
from .session import DEFAULT_HEIGHT, DEFAULT_WIDTH, ExplorerSession
from .display import paint_frame

__all__ = [
    "DEFAULT_ESCAPE_RADIUS",
    "DEFAULT_HEIGHT",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_VIEWPORT",
    "DEFAULT_WIDTH",
    "DEFAULT_WORKER_COUNT",
    "DEFAULT_ZOOM_RATIO",
    "ColorMapper",
    "ColormapMapper",
    "ExplorerSession",
    "Frame",
    "FrameRenderer",
    "InvalidDimensionsError",
    "InvalidViewportError",
    "Pixel",
    "RenderError",
    "Viewport",
    "ZoomController",
    "check_dimensions",
    "colorable",
    "compute_zoom_ratios",
    "escape_counts",
    "evaluate",
    "paint_frame",
    "partition",
    "render",
    "sample_grid",
    "select_focus",
    "zoom",
]
