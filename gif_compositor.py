"""Draws decoded frames onto the running canvas."""

import logging
from array import array

from gif_frame import DisposeMethod

logger = logging.getLogger(__name__)

# One packed ARGB value per pixel
CANVAS_TYPECODE = 'I' if array('I').itemsize == 4 else 'L'

INTERLACE_PASSES = ((0, 8), (4, 8), (2, 4), (1, 2))


def interlaced_rows(height):
    """Yield the target row for each stored row of an interlaced image."""
    for start, step in INTERLACE_PASSES:
        yield from range(start, height, step)


def new_canvas(width, height):
    return array(CANVAS_TYPECODE, bytes(4 * width * height))


def clip(bounds, width, height):
    """Return (x0, y0, x1, y1) of ``bounds`` clipped to the canvas."""
    x0 = min(bounds.x, width)
    y0 = min(bounds.y, height)
    x1 = min(bounds.x + bounds.width, width)
    y1 = min(bounds.y + bounds.height, height)
    return x0, y0, x1, y1


def fill_rect(canvas, width, height, bounds, color):
    x0, y0, x1, y1 = clip(bounds, width, height)
    if x1 <= x0:
        return
    row = array(CANVAS_TYPECODE, [color]) * (x1 - x0)
    for y in range(y0, y1):
        canvas[y * width + x0:y * width + x1] = row


class Compositor:
    """Keeps the one live canvas of a decode call.

    Consecutive frames share the same buffer whenever the previous frame's
    disposal method allows it, so a frame's ``pixel_data`` is only stable
    until the next frame is composited.
    """

    def __init__(self):
        self.canvas = None
        self._saved_rect = None
        self._saved_rows = None

    def _save(self, canvas, width, height, bounds):
        x0, y0, x1, y1 = clip(bounds, width, height)
        self._saved_rect = (x0, y0, x1, y1)
        self._saved_rows = [canvas[y * width + x0:y * width + x1] for y in range(y0, y1)]

    def _restore(self, canvas, width):
        x0, y0, x1, y1 = self._saved_rect
        for y, row in zip(range(y0, y1), self._saved_rows):
            canvas[y * width + x0:y * width + x1] = row

    def base_canvas(self, header, frame, previous):
        width, height = header.width, header.height
        canvas = None
        if (previous is not None and previous.pixel_data is not None
                and previous.dispose_method != DisposeMethod.NO_ACTION):
            canvas = previous.pixel_data
            if previous.dispose_method == DisposeMethod.RESTORE_TO_BACKGROUND:
                # A transparent frame must not bring the background fill back
                color = 0 if frame.has_transparency else previous.background_color
                fill_rect(canvas, width, height, previous.bounds, color)
            elif previous.dispose_method == DisposeMethod.RESTORE_TO_PREVIOUS and self._saved_rows is not None:
                self._restore(canvas, width)
        if canvas is None:
            canvas = new_canvas(width, height)
        self._saved_rect = self._saved_rows = None
        return canvas

    def compose(self, header, frame, previous, pixels):
        """Draw ``pixels`` (palette indexes for frame.bounds) and return the canvas."""
        width, height = header.width, header.height
        canvas = self.base_canvas(header, frame, previous)
        if frame.dispose_method == DisposeMethod.RESTORE_TO_PREVIOUS:
            self._save(canvas, width, height, frame.bounds)

        bounds = frame.bounds
        colors = frame.color_table.colors
        x0 = bounds.x
        x1 = min(bounds.x + bounds.width, width)
        if x0 < x1:
            rows = interlaced_rows(bounds.height) if frame.is_interlaced else range(bounds.height)
            for source_row, target_row in enumerate(rows):
                y = bounds.y + target_row
                if y >= height:
                    continue
                src = source_row * bounds.width - x0
                base = y * width
                for x in range(x0, x1):
                    color = colors[pixels[src + x]]
                    # 0 marks the transparent index
                    if color:
                        canvas[base + x] = color
        else:
            logger.debug('frame %r lies outside the %dx%d canvas', bounds, width, height)

        frame.pixel_data = canvas
        self.canvas = canvas
        return canvas
