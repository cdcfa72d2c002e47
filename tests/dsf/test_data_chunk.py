"""
Tests for the data chunk module.
"""

import io
import struct

import pytest

from pydsf.common.constants import DATA_CHUNK_SIZE
from pydsf.dsf.data_chunk import DataChunk
from pydsf.dsf.errors import (
    DsfChunkHeaderError,
    DsfChunkOrderError,
    DsfChunkSizeError,
    DsfIOError,
)


def data_header(size: int, header: bytes = b"data") -> bytes:
    return header + struct.pack("<Q", size)


class TestDataChunk:
    """Test cases for DataChunk."""

    def test_valid_header(self):
        chunk = DataChunk.unpack(data_header(12 + 8192), expected_sample_data_size=8192)
        assert chunk.sample_data_size == 8192
        assert chunk.size == 12 + 8192

    def test_empty_sample_data(self):
        chunk = DataChunk.unpack(data_header(12), expected_sample_data_size=0)
        assert chunk.sample_data_size == 0

    @pytest.mark.parametrize("size", [0, 11, 12 + 8191, 12 + 8193])
    def test_bad_size(self, size):
        with pytest.raises(DsfChunkSizeError, match=f"data: bad chunk size: {size}"):
            DataChunk.unpack(data_header(size), expected_sample_data_size=8192)

    @pytest.mark.parametrize("header,found", [(b"DSD ", "DSD"), (b"fmt ", "fmt")])
    def test_known_chunk_out_of_order(self, header, found):
        with pytest.raises(DsfChunkOrderError, match=f"expected data chunk but found {found} chunk"):
            DataChunk.unpack(data_header(12, header), expected_sample_data_size=0)

    @pytest.mark.parametrize("header", [b"DATA", b"ID3\x03"])
    def test_bad_header(self, header):
        with pytest.raises(DsfChunkHeaderError, match="data: bad chunk header"):
            DataChunk.unpack(data_header(12, header), expected_sample_data_size=0)

    def test_pack(self):
        raw = DataChunk(4096).pack()
        assert len(raw) == DATA_CHUNK_SIZE
        assert raw == b"data" + struct.pack("<Q", 4108)

    def test_read_truncated(self):
        with pytest.raises(DsfIOError):
            DataChunk.read_from_stream(io.BytesIO(b"data\x0c\x00"), expected_sample_data_size=0)
