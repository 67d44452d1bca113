import io

import pytest

from gif_stream import GifStreamReader
from gifbuilder import NonSeekable


@pytest.fixture
def make_reader():
    def make(data, seekable=True):
        if seekable:
            return GifStreamReader(io.BytesIO(data))
        return GifStreamReader(NonSeekable(data))
    return make
