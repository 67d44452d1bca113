"""Assembles small GIF byte strings for tests.

Image data is written as literal LZW codes with a clear code before the
code width would grow, which any conforming decoder accepts.
"""

import io
import struct

TRAILER = b';'

BLACK_WHITE = [(0, 0, 0), (255, 255, 255)]
FOUR_COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]


class NonSeekable:
    """A source that only supports read(), handing out at most ``chunk`` bytes."""

    def __init__(self, data, chunk=3):
        self._buf = io.BytesIO(data)
        self._chunk = chunk

    def read(self, n):
        return self._buf.read(min(n, self._chunk))


def pack_codes(codes, width):
    """Pack fixed-width codes least significant bit first."""
    return pack_varwidth((code, width) for code in codes)


def pack_varwidth(pairs):
    """Pack (code, width) pairs least significant bit first."""
    out = bytearray()
    acc = 0
    nbits = 0
    for code, width in pairs:
        acc |= code << nbits
        nbits += width
        while nbits >= 8:
            out.append(acc & 0xFF)
            acc >>= 8
            nbits -= 8
    if nbits:
        out.append(acc & 0xFF)
    return bytes(out)


def sub_blocks(data, terminate=True):
    out = bytearray()
    for i in range(0, len(data), 255):
        chunk = data[i:i + 255]
        out.append(len(chunk))
        out += chunk
    if terminate:
        out.append(0)
    return bytes(out)


def literal_codes(indexes, data_size):
    clear = 1 << data_size
    run = (1 << data_size) - 2
    codes = []
    for i in range(0, len(indexes), run):
        codes.append(clear)
        codes.extend(indexes[i:i + run])
    codes.append(clear + 1)
    return codes


def lzw_data(indexes, data_size=2):
    """Minimum code size byte plus the terminated sub-block train."""
    packed = pack_codes(literal_codes(list(indexes), data_size), data_size + 1)
    return bytes([data_size]) + sub_blocks(packed)


def palette_bytes(palette):
    return b''.join(bytes(rgb) for rgb in palette)


def size_exponent(palette):
    n = len(palette)
    assert n >= 2 and n & (n - 1) == 0, 'palette size must be a power of two'
    return n.bit_length() - 2


def header(width, height, palette=None, background=0, aspect=0, signature=b'GIF89a'):
    flags = 0x70
    if palette:
        flags |= 0x80 | size_exponent(palette)
    out = signature + struct.pack('<HHBBB', width, height, flags, background, aspect)
    if palette:
        out += palette_bytes(palette)
    return out


def graphic_control(disposal=0, transparent=None, delay=0):
    flags = (disposal & 7) << 2
    if transparent is not None:
        flags |= 1
    return b'!\xf9\x04' + struct.pack('<BHB', flags, delay, transparent or 0) + b'\x00'


def netscape_loop(count):
    return b'!\xff\x0bNETSCAPE2.0\x03\x01' + struct.pack('<H', count) + b'\x00'


def comment(text):
    return b'!\xfe' + sub_blocks(text)


def image(x, y, width, height, indexes, palette=None, interlaced=False, data_size=2):
    flags = 0
    if palette:
        flags |= 0x80 | size_exponent(palette)
    if interlaced:
        flags |= 0x40
    out = b',' + struct.pack('<HHHHB', x, y, width, height, flags)
    if palette:
        out += palette_bytes(palette)
    return out + lzw_data(indexes, data_size)


def gif(*parts):
    return b''.join(parts)


def argb(r, g, b):
    return 0xFF000000 | (r << 16) | (g << 8) | b
