"""Rendering of full Mandelbrot frames over a fixed pool of worker threads."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional, Sequence

import numpy as np

from .escape import DEFAULT_ESCAPE_RADIUS, DEFAULT_MAX_ITERATIONS, colorable, escape_counts
from .palette import RGB, ColorMapper
from .viewport import InvalidViewportError, Viewport, check_dimensions

logger = logging.getLogger(__name__)

DEFAULT_WORKER_COUNT = 10


class RenderError(RuntimeError):
    """Raised when a frame could not be completed."""


class Pixel(NamedTuple):
    screen_x: int
    screen_y: int
    color: RGB


@dataclass(frozen=True, eq=False)
class Frame:
    """Colored pixels produced by one render pass.

    Cells of the raster without a pixel are background. ``evaluated_samples``
    counts the samples that went through the escape-time loop, out of
    ``total_samples`` in the sample grid.
    """

    screen_x: np.ndarray
    screen_y: np.ndarray
    colors: np.ndarray
    width: int
    height: int
    viewport: Viewport
    total_samples: int = 0
    evaluated_samples: int = 0

    @classmethod
    def empty(cls, viewport: Viewport, width: int, height: int, total_samples: int = 0) -> "Frame":
        return cls(
            screen_x=np.zeros(0, dtype=np.int64),
            screen_y=np.zeros(0, dtype=np.int64),
            colors=np.zeros((0, 3), dtype=np.uint8),
            width=width,
            height=height,
            viewport=viewport,
            total_samples=total_samples,
        )

    @classmethod
    def concatenate(cls, parts: Sequence["Frame"], viewport: Viewport, width: int, height: int, total_samples: int) -> "Frame":
        if not parts:
            return cls.empty(viewport, width, height, total_samples)
        return cls(
            screen_x=np.concatenate([part.screen_x for part in parts]),
            screen_y=np.concatenate([part.screen_y for part in parts]),
            colors=np.concatenate([part.colors for part in parts], axis=0),
            width=width,
            height=height,
            viewport=viewport,
            total_samples=total_samples,
            evaluated_samples=sum(part.evaluated_samples for part in parts),
        )

    def __len__(self) -> int:
        return int(self.screen_x.size)

    def __iter__(self) -> Iterator[Pixel]:
        for x, y, (r, g, b) in zip(self.screen_x.tolist(), self.screen_y.tolist(), self.colors.tolist()):
            yield Pixel(x, y, (r, g, b))

    def coverage(self) -> np.ndarray:
        """Boolean ``(height, width)`` mask of cells that received a pixel."""

        mask = np.zeros((self.height, self.width), dtype=bool)
        mask[self.screen_y, self.screen_x] = True
        return mask


def sample_axis(lo: float, hi: float, count: int) -> np.ndarray:
    """Step from ``lo`` to ``hi`` inclusive by ``(hi - lo) / count``.

    The step is accumulated, so drift may add or drop the sample at ``hi``.
    """

    step = (hi - lo) / float(count)
    values = []
    value = lo
    while value <= hi:
        values.append(value)
        following = value + step
        if following == value:
            raise InvalidViewportError(
                f"viewport extent {hi - lo!r} is below floating-point resolution at {value!r}"
            )
        value = following
    return np.array(values, dtype=np.float64)


def sample_grid(viewport: Viewport, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Flattened sample coordinates, every ``im`` for the first ``re`` first."""

    check_dimensions(width, height)
    xs = sample_axis(viewport.xmin, viewport.xmax, width)
    ys = sample_axis(viewport.ymin, viewport.ymax, height)
    return np.repeat(xs, ys.size), np.tile(ys, xs.size)


def partition(total: int, worker_count: int) -> list[tuple[int, int]]:
    """Split ``total`` samples into ``worker_count`` equal contiguous ranges.

    The ``total % worker_count`` trailing samples are left out.
    """

    if worker_count < 1:
        raise ValueError(f"worker_count must be at least 1, got {worker_count}")
    size = total // worker_count
    return [(size * block, size * (block + 1)) for block in range(worker_count)]


@dataclass(frozen=True)
class FrameRenderer:
    """Render frames by fanning chunks of the sample grid out to threads."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    escape_radius: float = DEFAULT_ESCAPE_RADIUS
    color_mapper: ColorMapper = field(default_factory=ColorMapper)
    device: Optional[str] = None

    def render_chunk(
        self,
        viewport: Viewport,
        res: np.ndarray,
        ims: np.ndarray,
        width: int,
        height: int,
    ) -> Frame:
        """Evaluate one chunk of samples and keep the colorable ones."""

        if res.size == 0:
            return Frame.empty(viewport, width, height)
        counts = escape_counts(res, ims, self.max_iterations, self.escape_radius, device=self.device)
        keep = colorable(counts, self.max_iterations)
        xs, ys = viewport.to_pixels(res[keep], ims[keep], width, height)
        return Frame(
            screen_x=xs,
            screen_y=ys,
            colors=self.color_mapper.colors_for(counts[keep]),
            width=width,
            height=height,
            viewport=viewport,
            evaluated_samples=int(res.size),
        )

    def render(
        self,
        viewport: Viewport,
        width: int,
        height: int,
        worker_count: int = DEFAULT_WORKER_COUNT,
    ) -> Frame:
        """Render a complete frame, blocking until every worker has finished."""

        check_dimensions(width, height)
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")

        started = time.perf_counter()
        res, ims = sample_grid(viewport, width, height)
        chunks = partition(res.size, worker_count)
        logger.debug(
            "rendering %dx%d over %s: %d samples in %d chunks of %d",
            width, height, viewport, res.size, worker_count, chunks[0][1],
        )

        try:
            with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="mandelzoom-render") as executor:
                futures = [
                    executor.submit(self.render_chunk, viewport, res[start:stop], ims[start:stop], width, height)
                    for start, stop in chunks
                ]
                parts = [future.result() for future in futures]
        except Exception as exc:
            raise RenderError(f"render of {width}x{height} frame failed: {exc}") from exc

        frame = Frame.concatenate(parts, viewport, width, height, total_samples=int(res.size))
        logger.debug(
            "rendered %d pixels from %d/%d samples in %.3fs",
            len(frame), frame.evaluated_samples, frame.total_samples, time.perf_counter() - started,
        )
        return frame


def render(
    viewport: Viewport,
    width: int,
    height: int,
    worker_count: int = DEFAULT_WORKER_COUNT,
    **kwargs,
) -> Frame:
    """Render ``viewport`` with a :class:`FrameRenderer` built from ``kwargs``."""

    return FrameRenderer(**kwargs).render(viewport, width, height, worker_count)
