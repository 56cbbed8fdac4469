import logging
import os
import sys
import warnings
from dataclasses import dataclass

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import numpy as np

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

import matplotlib.pyplot as plt

from mandelzoom import (
    DEFAULT_ESCAPE_RADIUS,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_VIEWPORT,
    DEFAULT_WIDTH,
    DEFAULT_WORKER_COUNT,
    DEFAULT_ZOOM_RATIO,
    ColorMapper,
    ColormapMapper,
    ExplorerSession,
    Frame,
    FrameRenderer,
    InvalidViewportError,
    RenderError,
    Viewport,
    ZoomController,
    compute_zoom_ratios,
    paint_frame,
    select_focus,
)

from argparse import ArgumentParser


def select_device():
    """Use the first GPU TensorFlow can see, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Memory growth can only be set before the GPUs are initialized.
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


@dataclass
class ZoomPlan:
    clicks: tuple[tuple[int, int], ...]
    autofocus_steps: int
    ratios: np.ndarray

    def __len__(self) -> int:
        return len(self.clicks) + self.autofocus_steps


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set and zoom into it by clicking.')

    parser.add_argument('--width', type=int,
                        dest='width', help='raster width in pixels',
                        metavar='WIDTH', default=DEFAULT_WIDTH)

    parser.add_argument('--height', type=int,
                        dest='height', help='raster height in pixels',
                        metavar='HEIGHT', default=DEFAULT_HEIGHT)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration budget of the escape-time loop',
                        metavar='MAX_ITERATIONS', default=DEFAULT_MAX_ITERATIONS)

    parser.add_argument('--escape-radius', type=float,
                        dest='escape_radius', help='magnitude past which an orbit counts as escaped',
                        metavar='ESCAPE_RADIUS', default=DEFAULT_ESCAPE_RADIUS)

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of worker threads per frame',
                        metavar='WORKERS', default=DEFAULT_WORKER_COUNT)

    parser.add_argument('--xmin', type=float, default=DEFAULT_VIEWPORT.xmin,
                        help='left edge of the starting window in the complex plane')
    parser.add_argument('--xmax', type=float, default=DEFAULT_VIEWPORT.xmax,
                        help='right edge of the starting window in the complex plane')
    parser.add_argument('--ymin', type=float, default=DEFAULT_VIEWPORT.ymin,
                        help='lower imaginary bound of the starting window')
    parser.add_argument('--ymax', type=float, default=DEFAULT_VIEWPORT.ymax,
                        help='upper imaginary bound of the starting window')

    parser.add_argument('--zoom-ratio', type=float,
                        dest='zoom_ratio', help='the factor by which each click multiplies the window size. Choose < 1 for zoom in, >1 for zoom out',
                        metavar='ZOOM_RATIO', default=DEFAULT_ZOOM_RATIO)

    parser.add_argument('--click', type=int, nargs=2, action='append', dest='clicks', metavar=('X', 'Y'),
                        help='replay a click at pixel X Y without opening a window. May be repeated.')

    parser.add_argument('--steps', type=int, default=0,
                        help='additional zoom steps toward the set boundary nearest the centre, after any --click.')

    parser.add_argument('--final-zoom', type=float, default=None,
                        help='Overall scale reached after the last click or step (e.g., 1e-4 narrows the window by 10000x). If set, overrides --zoom-ratio.')

    parser.add_argument('--easing', type=str, default='ease', choices=['linear', 'ease'],
                        help='Curve used to spread --final-zoom over the steps: "linear" or "ease" for smooth ease-in-out.')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap to colorize the fractal (e.g. "viridis", "inferno") instead of the default gradient',
                        metavar='COLORMAP', default=None)

    parser.add_argument('--invert', action='store_true', help='Invert the selected colormap.')

    parser.add_argument('--interactive', action='store_true',
                        help='Open a window; left click zooms in, right click zooms out.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_zoom_plan(opt, parser: ArgumentParser) -> ZoomPlan:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.workers < 1:
        parser.error("--workers must be at least 1.")
    if opt.max_iterations < 1:
        parser.error("--max-iterations must be at least 1.")
    if not opt.escape_radius > 0:
        parser.error("--escape-radius must be positive.")
    if not opt.zoom_ratio > 0:
        parser.error("--zoom-ratio must be positive.")
    if opt.steps < 0:
        parser.error("--steps must not be negative.")
    if opt.final_zoom is not None and opt.final_zoom <= 0:
        parser.error("--final-zoom must be positive.")

    clicks = tuple((int(x), int(y)) for x, y in (opt.clicks or []))
    for x, y in clicks:
        if not (0 <= x < opt.width and 0 <= y < opt.height):
            parser.error(f"--click {x} {y} lies outside the {opt.width}x{opt.height} raster.")

    if opt.interactive and (clicks or opt.steps):
        parser.error("--interactive cannot be combined with --click or --steps.")
    if opt.final_zoom is not None and not (clicks or opt.steps):
        parser.error("--final-zoom requires --click or --steps.")

    ratios = compute_zoom_ratios(
        len(clicks) + opt.steps,
        opt.zoom_ratio,
        final_zoom=opt.final_zoom,
        easing=opt.easing,
    )
    return ZoomPlan(clicks=clicks, autofocus_steps=opt.steps, ratios=ratios)


def build_session(opt, parser: ArgumentParser, device) -> ExplorerSession:
    try:
        viewport = Viewport(xmin=opt.xmin, xmax=opt.xmax, ymin=opt.ymin, ymax=opt.ymax)
    except InvalidViewportError as exc:
        parser.error(str(exc))

    if opt.colormap:
        try:
            color_mapper = ColormapMapper(opt.colormap, opt.max_iterations, invert=opt.invert)
        except ValueError as exc:
            parser.error(str(exc))
    else:
        if opt.invert:
            parser.error("--invert requires --colormap.")
        color_mapper = ColorMapper()

    renderer = FrameRenderer(
        max_iterations=opt.max_iterations,
        escape_radius=opt.escape_radius,
        color_mapper=color_mapper,
        device=device,
    )
    return ExplorerSession(
        opt.width,
        opt.height,
        viewport=viewport,
        renderer=renderer,
        controller=ZoomController(opt.zoom_ratio),
        worker_count=opt.workers,
    )


def describe(frame: Frame) -> str:
    vp = frame.viewport
    return (
        f"X: [{vp.xmin:.6g}, {vp.xmax:.6g}] Y: [{vp.ymin:.6g}, {vp.ymax:.6g}] "
        f"{len(frame)} pixels from {frame.evaluated_samples}/{frame.total_samples} samples"
    )


def run_headless(session: ExplorerSession, plan: ZoomPlan) -> None:
    total = len(plan) + 1
    frame = session.refresh()
    print("frame {0} out of {1}: {2}".format(0, total, describe(frame)))

    for i, ratio in enumerate(plan.ratios):
        if i < len(plan.clicks):
            x, y = plan.clicks[i]
        else:
            x, y = select_focus(session.frame)
        log("zooming by %.6g at pixel (%d, %d)" % (ratio, x, y))
        frame = session.click(x, y, float(ratio))
        print("frame {0} out of {1}: {2}".format(i + 1, total, describe(frame)))


def run_interactive(session: ExplorerSession, zoom_ratio: float) -> None:
    dpi = 100
    fig, ax = plt.subplots(figsize=(session.width / dpi, session.height / dpi), dpi=dpi)
    fig.canvas.manager.set_window_title("Mandelbrot")
    fig.subplots_adjust(left=0, right=1, bottom=0, top=1)
    ax.set_axis_off()

    frame = session.refresh()
    image = ax.imshow(paint_frame(frame), interpolation='nearest')
    log(describe(frame))

    def on_press(event):
        if event.inaxes is not ax or event.xdata is None or event.ydata is None:
            return
        if event.button == 1:
            ratio = zoom_ratio
        elif event.button == 3:
            ratio = 1.0 / zoom_ratio
        else:
            return
        x = int(np.clip(np.floor(event.xdata + 0.5), 0, session.width - 1))
        y = int(np.clip(np.floor(event.ydata + 0.5), 0, session.height - 1))
        try:
            frame = session.click(x, y, ratio)
        except (InvalidViewportError, RenderError) as exc:
            print(f"zoom at ({x}, {y}) failed: {exc}", file=sys.stderr)
            return
        image.set_data(paint_frame(frame))
        fig.canvas.draw_idle()
        log(describe(frame))

    fig.canvas.mpl_connect('button_press_event', on_press)
    plt.show()


def main():
    parser = build_parser()
    opt = parser.parse_args()

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    if VERBOSE:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    log("TensorFlow version: %s" % tf.__version__)

    plan = resolve_zoom_plan(opt, parser)
    device = select_device()
    session = build_session(opt, parser, device)

    try:
        if opt.interactive:
            run_interactive(session, opt.zoom_ratio)
        else:
            run_headless(session, plan)
    except (InvalidViewportError, RenderError) as exc:
        parser.exit(1, f"{parser.prog}: error: {exc}\n")


if __name__ == '__main__':
    main()
