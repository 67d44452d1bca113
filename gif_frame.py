"""Per-frame metadata: image descriptors and the extensions in front of them."""

import copy
import logging
from collections import namedtuple
from enum import IntEnum

from bitstring import ConstBitStream

from gif_color_table import ColorTable
from gif_errors import EndOfStreamError, GifFormatError, UnexpectedBlockError
from gif_options import DecoderOptions

logger = logging.getLogger(__name__)

IMAGE_SEPARATOR = 0x2C
EXTENSION_INTRODUCER = 0x21
TRAILER = 0x3B

GRAPHIC_CONTROL_LABEL = 0xF9
APPLICATION_LABEL = 0xFF

IMAGE_DESCRIPTOR = 'uintle:16, uintle:16, uintle:16, uintle:16, bool, bool, bool, pad:2, uint:3'
GRAPHIC_CONTROL = 'pad:3, uint:3, bool, bool, uintle:16, uint:8'

NETSCAPE_ID = 'NETSCAPE2.0'


Rect = namedtuple('Rect', 'x y width height')


class DisposeMethod(IntEnum):
    NO_ACTION = 0
    LEAVE_IN_PLACE = 1
    RESTORE_TO_BACKGROUND = 2
    RESTORE_TO_PREVIOUS = 3

    @classmethod
    def from_flags(cls, value):
        # 0 ("unspecified") and the reserved values 4-7 keep the frame in place
        if value in (cls.RESTORE_TO_BACKGROUND, cls.RESTORE_TO_PREVIOUS):
            return cls(value)
        return cls.LEAVE_IN_PLACE


class Frame:
    """One image of the stream and the control data that came with it.

    ``color_table`` is either the frame's own ``local_color_table`` or the
    header's global table, which the frame only borrows.
    """

    def __init__(self, loop_count=0):
        self.bounds = Rect(0, 0, 0, 0)
        self.dispose_method = DisposeMethod.NO_ACTION
        self.has_transparency = False
        self.transparency_index = 0
        self.is_interlaced = False
        self.delay_ms = 0
        self.loop_count = loop_count
        self.background_color = 0
        self.local_color_table = None
        self.color_table = None
        self.pixel_data = None
        self.has_graphic_control = False
        self.has_loop_count = False

    @property
    def active_transparency_index(self):
        return self.transparency_index if self.has_transparency else None

    def snapshot(self):
        """Shallow copy whose pixel buffer is detached from the live canvas."""
        frame = copy.copy(self)
        if self.pixel_data is not None:
            frame.pixel_data = copy.copy(self.pixel_data)
        return frame

    def __repr__(self):
        return '<Frame {0.x},{0.y} {0.width}x{0.height} {1} {2}ms>'.format(
            self.bounds, self.dispose_method.name, self.delay_ms)


def read_graphic_control(reader, frame, options):
    data = reader.read_block()
    if len(data) < 4:
        logger.warning('graphic control extension has %d bytes, expected 4', len(data))
    else:
        disposal, _user_input, transparent, delay, index = \
            ConstBitStream(bytes=data[:4]).readlist(GRAPHIC_CONTROL)
        frame.has_graphic_control = True
        frame.dispose_method = DisposeMethod.from_flags(disposal)
        frame.has_transparency = transparent
        frame.transparency_index = index
        frame.delay_ms = max(options.min_delay_ms, delay * 10)
    if data:
        reader.skip_block()


def read_netscape_loop(reader, frame):
    data = reader.read_block()
    while data:
        if data[0] == 1 and len(data) >= 3:
            frame.loop_count = data[1] | (data[2] << 8)
            frame.has_loop_count = True
            logger.debug('loop count %d', frame.loop_count)
        data = reader.read_block()


def read_application_extension(reader, frame):
    identifier = reader.read_block()
    if not identifier:
        return
    name = identifier.decode('latin-1')
    if name.upper() == NETSCAPE_ID:
        read_netscape_loop(reader, frame)
        return
    logger.debug('skipping application extension %r', name)
    reader.skip_block()


def read_extension(reader, frame, options):
    label = reader.read_byte()
    if label == GRAPHIC_CONTROL_LABEL:
        read_graphic_control(reader, frame, options)
    elif label == APPLICATION_LABEL:
        read_application_extension(reader, frame)
    else:
        logger.debug('skipping extension 0x%02X', label)
        reader.skip_block()


def read_image(reader, header, frame, decoder, compositor, previous, options):
    (x, y, width, height, has_palette, interlaced, _sorted,
     size_exponent) = reader.read_fields(9, IMAGE_DESCRIPTOR)
    frame.bounds = Rect(x, y, width, height)
    frame.is_interlaced = interlaced
    if has_palette:
        frame.local_color_table = ColorTable.read(reader, 2 << size_exponent)
    frame.color_table = frame.local_color_table
    if frame.color_table is None:
        frame.color_table = header.global_color_table

    if (options.legacy_background_reset and not has_palette
            and frame.transparency_index == header.background_color_index):
        header.background_color = 0
    frame.background_color = header.background_color
    logger.debug('image %r, interlaced %s, local palette %s', frame.bounds, interlaced, has_palette)

    if options.discard_data:
        reader.read_byte()
        reader.skip_block()
        return

    if frame.color_table is None:
        raise GifFormatError('frame at {},{} has no color table'.format(x, y))

    with frame.color_table.transparency(frame.active_transparency_index):
        decoder.decode(reader, width * height, strict=options.strict_lzw)
        if not (decoder.saw_terminator or decoder.saw_end_of_stream):
            reader.skip_block()
        compositor.compose(header, frame, previous, decoder.pixels)


def read_frame(reader, header, decoder, compositor, previous=None, options=None, loop_count=0):
    """Read blocks until the next image has been composited.

    Returns the new Frame, or None once the trailer (or the end of the
    source, in place of a missing trailer) is reached.
    """
    if options is None:
        options = DecoderOptions()
    frame = None
    while True:
        try:
            code = reader.read_byte()
        except EndOfStreamError:
            logger.warning('stream ended without a trailer')
            return None

        if code == IMAGE_SEPARATOR:
            if frame is None:
                frame = Frame(loop_count)
            read_image(reader, header, frame, decoder, compositor, previous, options)
            return frame
        elif code == EXTENSION_INTRODUCER:
            if frame is None:
                frame = Frame(loop_count)
            read_extension(reader, frame, options)
        elif code == TRAILER:
            return None
        elif code == 0:
            # Stray padding between blocks
            continue
        else:
            raise UnexpectedBlockError(code)
