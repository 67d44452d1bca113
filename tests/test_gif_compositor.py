import pytest

import gifbuilder as gb
from gif_color_table import ColorTable
from gif_compositor import Compositor, interlaced_rows, new_canvas
from gif_frame import DisposeMethod, Frame, Rect
from gif_header import GifHeader

RED, GREEN, BLUE, YELLOW = (gb.argb(*rgb) for rgb in gb.FOUR_COLORS)


def make_header(width, height, background=0):
    header = GifHeader()
    header.width = width
    header.height = height
    header.global_color_table = ColorTable.from_rgb(gb.FOUR_COLORS)
    header.background_color_index = background
    header.background_color = header.global_color_table.color(background)
    return header


def make_frame(header, bounds, dispose=DisposeMethod.LEAVE_IN_PLACE, interlaced=False, transparent=None):
    frame = Frame()
    frame.bounds = Rect(*bounds)
    frame.dispose_method = dispose
    frame.is_interlaced = interlaced
    frame.color_table = header.global_color_table
    frame.background_color = header.background_color
    if transparent is not None:
        frame.has_transparency = True
        frame.transparency_index = transparent
    return frame


def compose(compositor, header, frame, previous, indexes):
    with frame.color_table.transparency(frame.active_transparency_index):
        return compositor.compose(header, frame, previous, bytearray(indexes))


def test_interlace_schedule_eight_rows():
    rows = list(interlaced_rows(8))
    assert rows[:4] == [0, 4, 2, 6]
    assert rows == [0, 4, 2, 6, 1, 3, 5, 7]


@pytest.mark.parametrize('height', [1, 2, 3, 5, 9, 17])
def test_interlace_visits_every_row_once(height):
    assert sorted(interlaced_rows(height)) == list(range(height))


def test_single_frame_is_palette_lookup():
    header = make_header(3, 2)
    frame = make_frame(header, (0, 0, 3, 2), dispose=DisposeMethod.NO_ACTION)
    indexes = [0, 1, 2, 3, 2, 1]
    canvas = compose(Compositor(), header, frame, None, indexes)
    assert frame.pixel_data is canvas
    assert list(canvas) == [header.global_color_table.color(i) for i in indexes]


def test_interlaced_frame_rows_are_reordered():
    header = make_header(1, 8)
    frame = make_frame(header, (0, 0, 1, 8), interlaced=True)
    # Stored rows carry their own row number modulo the palette
    stored = [0, 1, 2, 3, 0, 1, 2, 3]
    canvas = compose(Compositor(), header, frame, None, stored)
    colors = [RED, GREEN, BLUE, YELLOW]
    expected = [None] * 8
    for source_row, target_row in enumerate([0, 4, 2, 6, 1, 3, 5, 7]):
        expected[target_row] = colors[stored[source_row]]
    assert list(canvas) == expected


def test_transparent_index_leaves_canvas_alone():
    header = make_header(2, 1)
    compositor = Compositor()
    first = make_frame(header, (0, 0, 2, 1))
    compose(compositor, header, first, None, [1, 1])
    second = make_frame(header, (0, 0, 2, 1), transparent=3)
    canvas = compose(compositor, header, second, first, [3, 2])
    assert list(canvas) == [GREEN, BLUE]
    assert header.global_color_table.color(3) == YELLOW


def test_frame_is_clipped_to_canvas():
    header = make_header(3, 3)
    frame = make_frame(header, (2, 2, 2, 2))
    canvas = compose(Compositor(), header, frame, None, [1, 2, 3, 0])
    assert list(canvas) == [0] * 8 + [GREEN]


def test_frame_outside_canvas():
    header = make_header(2, 2)
    frame = make_frame(header, (5, 0, 2, 2))
    canvas = compose(Compositor(), header, frame, None, [1] * 4)
    assert list(canvas) == [0] * 4


def test_no_action_starts_from_fresh_canvas():
    header = make_header(2, 1)
    compositor = Compositor()
    first = make_frame(header, (0, 0, 2, 1), dispose=DisposeMethod.NO_ACTION)
    compose(compositor, header, first, None, [1, 1])
    second = make_frame(header, (0, 0, 1, 1))
    canvas = compose(compositor, header, second, first, [2])
    assert canvas is not first.pixel_data
    assert list(canvas) == [BLUE, 0]


def test_leave_in_place_reuses_canvas():
    header = make_header(2, 1)
    compositor = Compositor()
    first = make_frame(header, (0, 0, 2, 1))
    first_canvas = compose(compositor, header, first, None, [1, 1])
    second = make_frame(header, (1, 0, 1, 1))
    canvas = compose(compositor, header, second, first, [2])
    assert canvas is first_canvas
    assert list(canvas) == [GREEN, BLUE]


def test_restore_to_background_fills_previous_bounds_only():
    header = make_header(4, 3, background=3)
    compositor = Compositor()
    first = make_frame(header, (0, 0, 4, 3))
    compose(compositor, header, first, None, [1] * 12)
    second = make_frame(header, (1, 1, 2, 1), dispose=DisposeMethod.RESTORE_TO_BACKGROUND)
    compose(compositor, header, second, first, [2, 2])
    third = make_frame(header, (0, 0, 1, 1))
    canvas = compose(compositor, header, third, second, [0])
    assert list(canvas) == [
        RED, GREEN, GREEN, GREEN,
        GREEN, YELLOW, YELLOW, GREEN,
        GREEN, GREEN, GREEN, GREEN,
    ]


def test_restore_to_background_uses_zero_for_transparent_frame():
    header = make_header(3, 1, background=3)
    compositor = Compositor()
    first = make_frame(header, (0, 0, 3, 1), dispose=DisposeMethod.RESTORE_TO_BACKGROUND)
    compose(compositor, header, first, None, [1, 1, 1])
    second = make_frame(header, (0, 0, 1, 1), transparent=0)
    canvas = compose(compositor, header, second, first, [0])
    assert list(canvas) == [0, 0, 0]


def test_restore_to_previous():
    header = make_header(3, 1)
    compositor = Compositor()
    first = make_frame(header, (0, 0, 3, 1))
    compose(compositor, header, first, None, [1, 1, 1])
    second = make_frame(header, (1, 0, 2, 1), dispose=DisposeMethod.RESTORE_TO_PREVIOUS)
    canvas = compose(compositor, header, second, first, [2, 3])
    assert list(canvas) == [GREEN, BLUE, YELLOW]
    third = make_frame(header, (0, 0, 1, 1))
    canvas = compose(compositor, header, third, second, [0])
    assert list(canvas) == [RED, GREEN, GREEN]


def test_new_canvas_is_zeroed():
    canvas = new_canvas(4, 2)
    assert len(canvas) == 8
    assert canvas.itemsize == 4
    assert not any(canvas)
