"""GIF signature and logical screen descriptor."""

import logging

from gif_color_table import ColorTable
from gif_errors import NotAGifError

logger = logging.getLogger(__name__)

SIGNATURE = 'GIF'

SCREEN_DESCRIPTOR = 'uintle:16, uintle:16, bool, uint:3, bool, uint:3, uint:8, uint:8'


class GifHeader:
    def __init__(self):
        self.signature = SIGNATURE
        self.version = ''
        self.width = 0
        self.height = 0
        self.color_resolution = 0
        self.sort_flag = False
        self.background_color_index = 0
        self.background_color = 0
        self.global_color_table = None
        self.pixel_aspect_ratio = 0

    @classmethod
    def read(cls, reader, skip_type_identifier=False):
        header = cls()
        header.parse(reader, skip_type_identifier)
        return header

    def parse(self, reader, skip_type_identifier=False):
        if not skip_type_identifier:
            self.signature = reader.read_string(3)
        if not self.signature.upper().startswith(SIGNATURE):
            raise NotAGifError(self.signature)
        self.version = reader.read_string(3)

        (self.width, self.height, has_palette, color_resolution, self.sort_flag,
         size_exponent, self.background_color_index,
         self.pixel_aspect_ratio) = reader.read_fields(7, SCREEN_DESCRIPTOR)
        self.color_resolution = color_resolution + 1

        if has_palette:
            self.global_color_table = ColorTable.read(reader, 2 << size_exponent)
            self.background_color = self.global_color_table.color(self.background_color_index)
        logger.debug('GIF%s %dx%d, global palette %s, background index %d',
                     self.version, self.width, self.height,
                     len(self.global_color_table) if self.global_color_table else None,
                     self.background_color_index)

    @property
    def pixel_count(self):
        return self.width * self.height

    def __repr__(self):
        return '<GifHeader {}{} {}x{}>'.format(self.signature, self.version, self.width, self.height)
