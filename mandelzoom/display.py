"""Paint frames onto Pillow images for display."""

from __future__ import annotations

import numpy as np
import PIL.Image

from .palette import RGB
from .renderer import Frame


def paint_frame(frame: Frame, background: RGB = (0, 0, 0)) -> PIL.Image.Image:
    """Return an RGB image of ``frame``; cells without a pixel get ``background``."""

    canvas = np.empty((frame.height, frame.width, 3), dtype=np.uint8)
    canvas[...] = np.asarray(background, dtype=np.uint8)
    # Later pixels win where two samples share an edge cell.
    canvas[frame.screen_y, frame.screen_x] = frame.colors
    return PIL.Image.fromarray(canvas)
