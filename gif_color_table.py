"""GIF palettes as packed ARGB colors."""

from contextlib import contextmanager

from gif_errors import InvalidColorTableError

MAX_COLORS = 256
OPAQUE = 0xFF000000


def pack_rgb(r, g, b):
    return OPAQUE | (r << 16) | (g << 8) | b


def unpack_argb(color):
    """Split a packed color into an (r, g, b, a) tuple."""
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF, (color >> 24) & 0xFF


class ColorTable:
    """A palette of ``size`` colors, ``size`` being a power of two up to 256.

    Lookups past ``size`` read as 0, the compositor's "leave the canvas
    alone" value, so a stray index from a sloppy encoder never raises.
    """

    def __init__(self, size):
        if size < 2 or size > MAX_COLORS or size & (size - 1):
            raise ValueError('color table size must be a power of two in [2, 256], not {}'.format(size))
        self.size = size
        self.raw = bytearray(3 * size)
        self.colors = [0] * MAX_COLORS
        self.transparency_index = None
        self._saved_color = None

    @classmethod
    def read(cls, reader, size):
        table = cls(size)
        table.parse(reader)
        return table

    @classmethod
    def from_rgb(cls, triplets):
        """Build a table from an iterable of (r, g, b), mostly for tests."""
        triplets = list(triplets)
        table = cls(len(triplets))
        for i, (r, g, b) in enumerate(triplets):
            table.raw[3 * i:3 * i + 3] = bytes((r, g, b))
            table.colors[i] = pack_rgb(r, g, b)
        return table

    def parse(self, reader):
        expected = len(self.raw)
        data = reader.read_upto(expected)
        if len(data) < expected:
            raise InvalidColorTableError(expected, len(data))
        self.raw[:] = data
        self.transparency_index = self._saved_color = None
        colors = self.colors
        for i in range(self.size):
            r, g, b = data[3 * i:3 * i + 3]
            colors[i] = pack_rgb(r, g, b)
        for i in range(self.size, MAX_COLORS):
            colors[i] = 0

    def color(self, index):
        return self.colors[index]

    def __getitem__(self, index):
        return self.colors[index]

    def __len__(self):
        return self.size

    def set_transparency(self, index):
        """Force slot ``index`` to 0 until reset_transparency() is called."""
        self.reset_transparency()
        self._saved_color = self.colors[index]
        self.colors[index] = 0
        self.transparency_index = index

    def reset_transparency(self):
        if self.transparency_index is not None:
            self.colors[self.transparency_index] = self._saved_color
            self.transparency_index = self._saved_color = None

    @contextmanager
    def transparency(self, index):
        """Scope a transparency override; a None index is a no-op."""
        if index is None:
            yield self
            return
        self.set_transparency(index)
        try:
            yield self
        finally:
            self.reset_transparency()
