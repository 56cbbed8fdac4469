"""Long-lived explorer state shared with a windowing collaborator."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .navigation import ZoomController
from .renderer import DEFAULT_WORKER_COUNT, Frame, FrameRenderer
from .viewport import DEFAULT_VIEWPORT, Viewport, check_dimensions

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 800


class ExplorerSession:
    """Hold the current viewport and the most recent frame.

    Render requests are serialized: a click arriving while a frame is being
    computed waits for it to finish. The visible ``frame`` is only replaced
    once its successor is complete, and a failed render leaves the viewport
    and frame untouched.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        *,
        viewport: Viewport = DEFAULT_VIEWPORT,
        renderer: Optional[FrameRenderer] = None,
        controller: Optional[ZoomController] = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
    ):
        check_dimensions(width, height)
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")
        self.width = width
        self.height = height
        self.initial_viewport = viewport
        self.viewport = viewport
        self.renderer = renderer if renderer is not None else FrameRenderer()
        self.controller = controller if controller is not None else ZoomController()
        self.worker_count = worker_count
        self.frame: Optional[Frame] = None
        self._lock = threading.Lock()

    def _show(self, viewport: Viewport, width: int, height: int) -> Frame:
        # Caller holds self._lock.
        frame = self.renderer.render(viewport, width, height, self.worker_count)
        self.viewport = viewport
        self.width = width
        self.height = height
        self.frame = frame
        logger.debug("showing %d pixels for %s", len(frame), viewport)
        return frame

    def refresh(self) -> Frame:
        with self._lock:
            return self._show(self.viewport, self.width, self.height)

    def click(self, x: float, y: float, ratio: Optional[float] = None) -> Frame:
        """Zoom toward pixel ``(x, y)`` and render the new viewport."""

        controller = self.controller if ratio is None else ZoomController(ratio)
        with self._lock:
            target = controller.on_click(self.viewport, x, y, self.width, self.height)
            return self._show(target, self.width, self.height)

    def resize(self, width: int, height: int) -> Frame:
        check_dimensions(width, height)
        with self._lock:
            return self._show(self.viewport, width, height)

    def reset(self) -> Frame:
        with self._lock:
            return self._show(self.initial_viewport, self.width, self.height)
