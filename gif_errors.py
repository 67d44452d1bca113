"""Exceptions raised while decoding a GIF stream."""


class GifFormatError(ValueError):
    """Base class for everything that is wrong with a GIF stream."""


class NotAGifError(GifFormatError):
    def __init__(self, signature=''):
        super().__init__('not a GIF (signature {!r})'.format(signature))
        self.signature = signature


class EndOfStreamError(GifFormatError):
    def __init__(self, message='unexpected end of stream'):
        super().__init__(message)


class TruncatedBlockError(GifFormatError):
    def __init__(self, expected, actual):
        super().__init__('block truncated: expected {} bytes, got {}'.format(expected, actual))
        self.expected = expected
        self.actual = actual


class InvalidColorTableError(GifFormatError):
    def __init__(self, expected, actual):
        super().__init__('invalid color table size: expected {} bytes, got {}'.format(expected, actual))
        self.expected = expected
        self.actual = actual


class UnexpectedBlockError(GifFormatError):
    def __init__(self, code):
        super().__init__('unexpected block code 0x{:02X}'.format(code))
        self.code = code


class CorruptLzwStreamError(GifFormatError):
    """An LZW code fell outside the current dictionary."""

    def __init__(self, code, available_code, decoded):
        super().__init__('corrupt LZW stream: code {} > available {} after {} pixels'.format(
            code, available_code, decoded))
        self.code = code
        self.available_code = available_code
        self.decoded = decoded
