"""Consumers of decoded frames."""

import sys

from PIL import Image

# Byte order of a packed ARGB canvas in memory
RAW_MODE = 'BGRA' if sys.byteorder == 'little' else 'ARGB'


def frame_to_image(header, frame):
    """Convert a composited frame into an RGBA Pillow image."""
    if frame.pixel_data is None:
        raise ValueError('frame has no pixel data (decoded with discard_data?)')
    return Image.frombytes('RGBA', (header.width, header.height),
                           frame.pixel_data.tobytes(), 'raw', RAW_MODE)


class FrameSink:
    """Receives frames in stream order; override what you need."""

    def on_start(self):
        pass

    def on_frame(self, header, frame):
        pass

    def on_finish(self, loop_count):
        pass


class CallbackSink(FrameSink):
    def __init__(self, on_frame, on_start=None, on_finish=None):
        self._on_frame = on_frame
        self._on_start = on_start
        self._on_finish = on_finish

    def on_start(self):
        if self._on_start is not None:
            self._on_start()

    def on_frame(self, header, frame):
        self._on_frame(header, frame)

    def on_finish(self, loop_count):
        if self._on_finish is not None:
            self._on_finish(loop_count)


class FrameCollector(FrameSink):
    """Keeps a detached copy of every frame."""

    def __init__(self):
        self.header = None
        self.frames = []
        self.loop_count = None
        self.finished = False

    def on_start(self):
        self.header = None
        self.frames = []
        self.loop_count = None
        self.finished = False

    def on_frame(self, header, frame):
        self.header = header
        self.frames.append(frame.snapshot())

    def on_finish(self, loop_count):
        self.loop_count = loop_count
        self.finished = True

    def __len__(self):
        return len(self.frames)

    def __iter__(self):
        return iter(self.frames)


class ImageCollector(FrameSink):
    """Turns every frame into a Pillow image as it arrives."""

    def __init__(self):
        self.images = []
        self.durations = []
        self.loop_count = None

    def on_start(self):
        self.images = []
        self.durations = []
        self.loop_count = None

    def on_frame(self, header, frame):
        self.images.append(frame_to_image(header, frame))
        self.durations.append(frame.delay_ms)

    def on_finish(self, loop_count):
        self.loop_count = loop_count
