import numpy as np

from mandelzoom import DEFAULT_VIEWPORT, Frame, paint_frame, render


def test_paint_frame_fills_background_and_pixels():
    frame = Frame(
        screen_x=np.array([0, 3]),
        screen_y=np.array([1, 0]),
        colors=np.array([[10, 1, 1], [200, 20, 20]], dtype=np.uint8),
        width=4,
        height=2,
        viewport=DEFAULT_VIEWPORT,
    )

    image = paint_frame(frame, background=(7, 8, 9))

    assert image.mode == "RGB"
    assert image.size == (4, 2)
    assert image.getpixel((0, 1)) == (10, 1, 1)
    assert image.getpixel((3, 0)) == (200, 20, 20)
    assert image.getpixel((1, 1)) == (7, 8, 9)


def test_paint_rendered_frame():
    frame = render(DEFAULT_VIEWPORT, 64, 48, worker_count=4)

    image = np.asarray(paint_frame(frame))

    assert image.shape == (48, 64, 3)
    painted = np.any(image != 0, axis=-1)
    assert painted.sum() <= frame.coverage().sum()
    assert not painted[24, 32]
