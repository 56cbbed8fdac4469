"""Escape-time iteration of the Mandelbrot recurrence.

``evaluate`` handles one sample and is the reference definition. The batched
``escape_counts`` runs the same recurrence for a whole chunk of samples as a
TensorFlow while loop and reports raw counts, ``max_iterations`` standing for
"did not escape".
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import tensorflow as tf

DEFAULT_MAX_ITERATIONS = 255
DEFAULT_ESCAPE_RADIUS = 2.0


def _check_budget(max_iterations: int, escape_radius: float) -> None:
    if int(max_iterations) != max_iterations or max_iterations < 1:
        raise ValueError(f"max_iterations must be a positive integer, got {max_iterations!r}")
    if not escape_radius > 0:
        raise ValueError(f"escape_radius must be positive, got {escape_radius!r}")


def evaluate(
    c: complex,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    escape_radius: float = DEFAULT_ESCAPE_RADIUS,
) -> Optional[int]:
    """Return the iteration at which the orbit of ``c`` escapes.

    The orbit is seeded with ``c`` itself. Escaping on iteration 0, never
    escaping, or escaping through a float overflow all give ``None``: those
    samples are not colored.
    """

    _check_budget(max_iterations, escape_radius)
    c = complex(c)
    cx, cy = c.real, c.imag
    zx, zy = cx, cy
    for count in range(max_iterations):
        x = zx * zx - zy * zy + cx
        y = 2.0 * (zx * zy) + cy
        magnitude = math.sqrt(x * x + y * y)
        if magnitude > escape_radius:
            if count > 0 and math.isfinite(magnitude):
                return count
            return None
        zx, zy = x, y
    # NaN orbits end up here as well: NaN never compares above the radius.
    return None


def _escape_step(i, zx, zy, cx, cy, counts, active, max_iterations, escape_radius):
    x = zx * zx - zy * zy + cx
    y = 2.0 * (zx * zy) + cy
    magnitude = tf.sqrt(x * x + y * y)
    escaped = tf.logical_and(active, magnitude > escape_radius)
    escape_count = tf.where(tf.math.is_finite(magnitude), i, max_iterations)
    counts = tf.where(escaped, escape_count, counts)
    zx = tf.where(active, x, zx)
    zy = tf.where(active, y, zy)
    active = tf.logical_and(active, tf.logical_not(escaped))
    return zx, zy, counts, active


@tf.function(
    input_signature=[
        tf.TensorSpec(shape=[None], dtype=tf.float64),
        tf.TensorSpec(shape=[None], dtype=tf.float64),
        tf.TensorSpec(shape=[], dtype=tf.int32),
        tf.TensorSpec(shape=[], dtype=tf.float64),
    ]
)
def _escape_run(cx: tf.Tensor, cy: tf.Tensor, max_iterations: tf.Tensor, escape_radius: tf.Tensor) -> tf.Tensor:
    """Iterate every sample until it escapes or the budget runs out."""

    i = tf.constant(0, dtype=tf.int32)
    counts = tf.fill(tf.shape(cx), max_iterations)
    active = tf.ones_like(cx, dtype=tf.bool)

    def cond(i, zx, zy, counts, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zx, zy, counts, active):
        zx, zy, counts, active = _escape_step(i, zx, zy, cx, cy, counts, active, max_iterations, escape_radius)
        return i + 1, zx, zy, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, cx, cy, counts, active))
    return counts


def escape_counts(
    re: np.ndarray,
    im: np.ndarray,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    escape_radius: float = DEFAULT_ESCAPE_RADIUS,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Raw escape counts for matching 1-D arrays of real and imaginary parts."""

    _check_budget(max_iterations, escape_radius)
    re = np.ascontiguousarray(re, dtype=np.float64).reshape(-1)
    im = np.ascontiguousarray(im, dtype=np.float64).reshape(-1)
    if re.shape != im.shape:
        raise ValueError(f"sample arrays differ in length: {re.size} != {im.size}")

    with tf.device(device if device is not None else "/CPU:0"):
        counts = _escape_run(
            tf.convert_to_tensor(re, dtype=tf.float64),
            tf.convert_to_tensor(im, dtype=tf.float64),
            tf.constant(int(max_iterations), dtype=tf.int32),
            tf.constant(float(escape_radius), dtype=tf.float64),
        )
    return counts.numpy()


def colorable(counts: np.ndarray, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> np.ndarray:
    """Mask of raw counts that produce a pixel: ``0 < count < max_iterations``."""

    counts = np.asarray(counts)
    return (counts > 0) & (counts < max_iterations)
