"""Sequential byte and sub-block reader over a GIF byte source."""

import io
import logging
import os

from bitstring import Bits, ConstBitStream

from gif_errors import EndOfStreamError, TruncatedBlockError

logger = logging.getLogger(__name__)

MAX_BLOCK_SIZE = 255


class GifStreamReader:
    """Reads bytes, little-endian shorts and length-prefixed sub-blocks.

    The source only needs a ``read(n)`` method. When it also reports
    ``seekable()`` as true, skipped sub-blocks are seeked over instead of
    being read.
    """

    def __init__(self, source):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self.source = source
        self.block_buffer = bytearray(MAX_BLOCK_SIZE + 1)
        self.block_size = 0
        self.bytes_read = 0
        try:
            self.can_seek = bool(source.seekable())
        except (AttributeError, OSError, ValueError):
            self.can_seek = False

    def read_upto(self, n):
        # Non-blocking and network sources may hand back short reads
        chunks = []
        remaining = n
        while remaining > 0:
            chunk = self.source.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b''.join(chunks)
        self.bytes_read += len(data)
        return data

    def read_byte(self):
        data = self.read_upto(1)
        if not data:
            raise EndOfStreamError('unexpected end of stream after {} bytes'.format(self.bytes_read))
        return data[0]

    def read_bytes(self, n):
        data = self.read_upto(n)
        if len(data) < n:
            raise EndOfStreamError('wanted {} bytes, stream ended after {}'.format(n, len(data)))
        return data

    def read_u16le(self):
        return Bits(bytes=self.read_bytes(2)).uintle

    def read_string(self, n):
        # Each byte widened to one character, no decoding
        return self.read_bytes(n).decode('latin-1')

    def read_fields(self, n, fmt):
        """Read an ``n`` byte record and unpack it with bitstring tokens."""
        return ConstBitStream(bytes=self.read_bytes(n)).readlist(fmt)

    def read_block(self):
        """Read one sub-block and return its payload.

        A zero-length block (the terminator of a sub-block train) returns
        ``b''``.
        """
        size = self.read_byte()
        self.block_size = size
        data = self.read_upto(size)
        if len(data) < size:
            raise TruncatedBlockError(size, len(data))
        self.block_buffer[:size] = data
        return data

    def skip_block(self):
        """Discard sub-blocks up to and including the zero-length terminator."""
        size = self.read_byte()
        self.block_size = size
        while size > 0:
            if self.can_seek:
                self._seek_forward(size)
            else:
                data = self.read_upto(size)
                if len(data) < size:
                    raise TruncatedBlockError(size, len(data))
            size = self.read_byte()
            self.block_size = size

    def _seek_forward(self, size):
        # seek() happily moves past the end, so measure what is left first
        pos = self.source.tell()
        end = self.source.seek(0, os.SEEK_END)
        available = min(size, max(end - pos, 0))
        self.source.seek(pos + available)
        self.bytes_read += available
        if available < size:
            raise TruncatedBlockError(size, available)
