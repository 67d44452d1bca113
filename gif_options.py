"""Decoder settings."""

DEFAULT_MIN_DELAY_MS = 10


class DecoderOptions:
    """Knobs for one decode call.

    skip_type_identifier: the caller already consumed the ``GIF`` token.
    discard_data: parse frame metadata only, never decode or composite pixels.
    legacy_background_reset: zero the header background color when a frame
        without a local palette marks the background index transparent.
    strict_lzw: raise CorruptLzwStreamError instead of zero-padding a frame.
    min_delay_ms: floor applied to graphic control delays.
    """

    def __init__(self, skip_type_identifier=False, discard_data=False,
                 legacy_background_reset=False, strict_lzw=False,
                 min_delay_ms=DEFAULT_MIN_DELAY_MS):
        if min_delay_ms < 0:
            raise ValueError('min_delay_ms must not be negative')
        self.skip_type_identifier = skip_type_identifier
        self.discard_data = discard_data
        self.legacy_background_reset = legacy_background_reset
        self.strict_lzw = strict_lzw
        self.min_delay_ms = min_delay_ms

    def __repr__(self):
        fields = ', '.join('{}={!r}'.format(k, v) for k, v in vars(self).items())
        return 'DecoderOptions({})'.format(fields)
