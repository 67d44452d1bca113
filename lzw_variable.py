"""Variable-width LZW decoding, GIF flavour."""

import logging
from array import array

from gif_errors import CorruptLzwStreamError, EndOfStreamError, GifFormatError

logger = logging.getLogger(__name__)

MAX_CODE_LEN = 12
MAX_DICT_ENTRIES = 2**MAX_CODE_LEN


class LzwDecoder:
    """Turns a frame's image data sub-blocks into palette indexes.

    The string table and the pixel buffer are kept between frames and only
    ever grow, so one decoder should serve one decode call at a time.
    """

    def __init__(self):
        self.prefix = array('H', bytes(2 * MAX_DICT_ENTRIES))
        self.suffix = bytearray(MAX_DICT_ENTRIES)
        self.pixel_stack = bytearray(MAX_DICT_ENTRIES + 1)
        self.pixels = bytearray()
        # Set after each decode()
        self.decoded = 0
        self.corrupt_code = None
        self.saw_terminator = False
        self.saw_end_of_stream = False

    def _initialize(self, pixel_count):
        if len(self.pixels) < pixel_count:
            self.pixels = bytearray(pixel_count)
        self.decoded = 0
        self.corrupt_code = None
        self.saw_terminator = False
        self.saw_end_of_stream = False

    def decode(self, reader, pixel_count, strict=False):
        """Decode up to ``pixel_count`` indexes into ``self.pixels``.

        Returns the number of indexes actually produced; the rest of the
        buffer up to ``pixel_count`` is zero-filled. The caller is left
        positioned somewhere inside the image data unless the zero-length
        terminator was consumed (``saw_terminator``).
        """
        self._initialize(pixel_count)
        prefix = self.prefix
        suffix = self.suffix
        stack = self.pixel_stack
        pixels = self.pixels

        data_size = reader.read_byte()
        if data_size >= MAX_CODE_LEN:
            logger.warning('LZW minimum code size %d is out of range', data_size)
            if strict:
                raise GifFormatError('LZW minimum code size {} is out of range'.format(data_size))
            self.corrupt_code = data_size
            pixels[:pixel_count] = bytes(pixel_count)
            return 0

        clear_code = 1 << data_size
        end_code = clear_code + 1
        code_size = data_size + 1
        code_mask = (1 << code_size) - 1
        available = clear_code + 2
        old_code = None
        first = 0

        for code in range(clear_code):
            prefix[code] = 0
            suffix[code] = code

        datum = 0
        bits = 0
        block = b''
        pos = 0
        top = 0
        i = 0
        while i < pixel_count:
            if top == 0:
                if bits < code_size:
                    # Refill the bit accumulator one byte at a time
                    if pos >= len(block):
                        try:
                            block = reader.read_block()
                        except EndOfStreamError:
                            self.saw_end_of_stream = True
                            break
                        pos = 0
                        if not block:
                            self.saw_terminator = True
                            break
                    datum |= block[pos] << bits
                    bits += 8
                    pos += 1
                    continue

                code = datum & code_mask
                datum >>= code_size
                bits -= code_size

                if code > available or code == end_code:
                    if code != end_code:
                        self.corrupt_code = code
                        if strict:
                            raise CorruptLzwStreamError(code, available, i)
                    break

                if code == clear_code:
                    code_size = data_size + 1
                    code_mask = (1 << code_size) - 1
                    available = clear_code + 2
                    old_code = None
                    continue

                if old_code is None:
                    stack[top] = suffix[code]
                    top += 1
                    old_code = first = code
                    continue

                in_code = code
                if code == available:
                    # KwKwK: the code being defined right now
                    stack[top] = first
                    top += 1
                    code = old_code

                while code > clear_code:
                    stack[top] = suffix[code]
                    top += 1
                    code = prefix[code]
                first = suffix[code]
                stack[top] = first
                top += 1

                # A full table stops growing until the next clear code
                if available < MAX_DICT_ENTRIES:
                    prefix[available] = old_code
                    suffix[available] = first
                    available += 1
                    if available & code_mask == 0 and available < MAX_DICT_ENTRIES:
                        code_size += 1
                        code_mask += available
                old_code = in_code

            top -= 1
            pixels[i] = stack[top]
            i += 1

        self.decoded = i
        if i < pixel_count:
            pixels[i:pixel_count] = bytes(pixel_count - i)
            if self.corrupt_code is not None or self.saw_end_of_stream:
                logger.warning('LZW data ended after %d of %d pixels, padding with zeros', i, pixel_count)
            else:
                logger.debug('LZW data ended after %d of %d pixels', i, pixel_count)
        return i
