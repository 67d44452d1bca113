"""A streaming GIF decoder."""

import argparse
import logging
import sys
import threading
from pathlib import Path

from gif_compositor import Compositor
from gif_errors import GifFormatError
from gif_frame import read_frame
from gif_header import GifHeader
from gif_options import DecoderOptions
from gif_sinks import FrameCollector, FrameSink, frame_to_image
from gif_stream import GifStreamReader
from lzw_variable import LzwDecoder

logger = logging.getLogger(__name__)

# Loop count reported when the stream carries no NETSCAPE2.0 block
DEFAULT_LOOP_COUNT = 1


class GifDecoder:
    """Decodes one stream at a time into composited frames.

    Working buffers (LZW tables, index buffer, canvas) belong to the
    instance and are reused from frame to frame. Use one instance per
    thread.
    """

    def __init__(self, options=None):
        self.options = options or DecoderOptions()
        self.lzw = LzwDecoder()
        self.compositor = Compositor()
        self.header = None
        self.loop_count = DEFAULT_LOOP_COUNT
        self.frame_count = 0
        self._cancelled = threading.Event()

    def cancel(self):
        """Stop after the frame currently being decoded."""
        self._cancelled.set()

    @property
    def cancelled(self):
        return self._cancelled.is_set()

    def decode(self, source, sink=None):
        """Decode ``source`` and hand every frame to ``sink`` in order.

        ``source`` is bytes or any object with ``read(n)``. Returns the
        number of frames delivered. A GifFormatError aborts the call; frames
        already delivered stay valid.
        """
        if source is None:
            raise ValueError('source must not be None')
        if sink is None:
            sink = FrameSink()
        self._cancelled.clear()
        self.header = None
        self.loop_count = DEFAULT_LOOP_COUNT
        self.frame_count = 0
        self.compositor = Compositor()

        reader = GifStreamReader(source)
        sink.on_start()
        header = self.header = GifHeader.read(reader, self.options.skip_type_identifier)

        previous = None
        loop_count = 0
        saw_loop_count = False
        while not self._cancelled.is_set():
            frame = read_frame(reader, header, self.lzw, self.compositor,
                               previous, self.options, loop_count)
            if frame is None:
                break
            if frame.has_loop_count:
                saw_loop_count = True
            loop_count = frame.loop_count
            self.frame_count += 1
            sink.on_frame(header, frame)
            previous = frame
        else:
            logger.info('decode cancelled after %d frames', self.frame_count)

        if saw_loop_count:
            self.loop_count = loop_count
        logger.debug('decoded %d frames, loop count %d', self.frame_count, self.loop_count)
        sink.on_finish(self.loop_count)
        return self.frame_count


def decode_gif(source, options=None):
    """Decode a whole GIF from a path, bytes or a binary file object.

    Returns (header, frames, loop_count) with frames detached from the
    decoder's canvas.
    """
    collector = FrameCollector()
    decoder = GifDecoder(options)
    if isinstance(source, (str, Path)):
        with open(source, 'rb') as f:
            decoder.decode(f, collector)
    else:
        decoder.decode(source, collector)
    return decoder.header, collector.frames, collector.loop_count

################################################################################

def print_info(header, frames, loop_count, out=None):
    out = out or sys.stdout
    print('Header:', file=out)
    print('  Version: {}{}'.format(header.signature, header.version), file=out)
    print('  Canvas: {}x{}'.format(header.width, header.height), file=out)
    table = header.global_color_table
    print('  Global color table: {}'.format(len(table) if table else 'absent'), file=out)
    print('  Background: index {} color 0x{:08X}'.format(
        header.background_color_index, header.background_color), file=out)
    print('  Pixel aspect ratio: {}'.format(header.pixel_aspect_ratio), file=out)
    print('  Loop count: {}'.format('infinite' if loop_count == 0 else loop_count), file=out)
    print('Frames: {}'.format(len(frames)), file=out)
    for i, frame in enumerate(frames):
        b = frame.bounds
        print('  {}: {}x{} at ({},{}) delay {}ms dispose {}{}{}{}'.format(
            i, b.width, b.height, b.x, b.y, frame.delay_ms, frame.dispose_method.name,
            ' interlaced' if frame.is_interlaced else '',
            ' transparent={}'.format(frame.transparency_index) if frame.has_transparency else '',
            ' local palette' if frame.local_color_table is not None else ''), file=out)


def export_frames(header, frames, pattern):
    paths = []
    for i, frame in enumerate(frames):
        path = pattern % i if '%' in pattern else pattern
        frame_to_image(header, frame).save(path)
        paths.append(path)
    return paths


def build_arg_parser():
    p = argparse.ArgumentParser(description='Decode GIF files into composited frames')
    p.add_argument('-v', '--verbose', action='store_true', help='Log debug output')
    p.add_argument('--legacy-background', action='store_true',
                   help='Zero the background color when a frame marks its index transparent')
    p.add_argument('--strict', action='store_true', help='Fail on corrupt LZW data instead of padding')
    p.add_argument('--min-delay', type=int, default=10, help='Minimum frame delay in ms')
    sub = p.add_subparsers(dest='cmd', required=True)

    p_info = sub.add_parser('info', help='Print header and frame metadata')
    p_info.add_argument('gif', type=Path)

    p_export = sub.add_parser('export', help='Write every composited frame as an image')
    p_export.add_argument('gif', type=Path)
    p_export.add_argument('--out', required=True, help='Output path; use %%d for the frame index')

    p_show = sub.add_parser('show', help='Open the first frame in the image viewer')
    p_show.add_argument('gif', type=Path)
    return p


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')
    options = DecoderOptions(discard_data=args.cmd == 'info',
                             legacy_background_reset=args.legacy_background,
                             strict_lzw=args.strict,
                             min_delay_ms=args.min_delay)
    try:
        header, frames, loop_count = decode_gif(args.gif, options)
    except FileNotFoundError:
        logger.error('%s: file not found', args.gif)
        return 2
    except GifFormatError as e:
        logger.error('%s: %s', args.gif, e)
        return 2

    if args.cmd == 'info':
        print_info(header, frames, loop_count)
    elif args.cmd == 'export':
        for path in export_frames(header, frames, args.out):
            logger.info('wrote %s', path)
    elif args.cmd == 'show':
        if not frames:
            logger.error('%s: no frames', args.gif)
            return 1
        frame_to_image(header, frames[0]).show()
    return 0


if __name__ == '__main__':
    sys.exit(main())
