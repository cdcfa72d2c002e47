"""
Handles the data chunk of a DSD stream file.
Only the 12-byte chunk header is represented here; the sample data that
follows it is typically tens or hundreds of MB and is read straight into the
Audio buffer by the reader.
"""

import struct
from typing import BinaryIO

from pydsf.common.constants import DATA_CHUNK_HEADER, DATA_CHUNK_SIZE
from pydsf.common.debug_logger import DsfDebugLogger
from pydsf.common.utils import check_chunk_header, read_exact, write_all
from pydsf.dsf.errors import DsfChunkSizeError


class DataChunk:
    """
    Represents the data chunk header.
    """

    HEADER_OFFSET = 0
    SIZE_OFFSET = 4

    def __init__(self, sample_data_size: int = 0):
        self.sample_data_size = sample_data_size

    @property
    def size(self) -> int:
        """Size of the whole chunk, including the header and the samples."""
        return DATA_CHUNK_SIZE + self.sample_data_size

    def pack(self) -> bytes:
        chunk = bytearray(DATA_CHUNK_SIZE)
        chunk[self.HEADER_OFFSET : self.HEADER_OFFSET + 4] = DATA_CHUNK_HEADER
        struct.pack_into("<Q", chunk, self.SIZE_OFFSET, self.size)
        return bytes(chunk)

    @classmethod
    def unpack(cls, raw: bytes, expected_sample_data_size: int) -> "DataChunk":
        """
        Unpacks a 12-byte data chunk header and checks the declared size
        against the sample data size computed from the fmt chunk.
        """
        if len(raw) != DATA_CHUNK_SIZE:
            raise DsfChunkSizeError(
                f"data: chunk bytes must be {DATA_CHUNK_SIZE} bytes long, got {len(raw)}",
                raw=raw,
                chunk="data",
            )

        check_chunk_header("data", DATA_CHUNK_HEADER, raw)

        (size,) = struct.unpack_from("<Q", raw, cls.SIZE_OFFSET)
        if size != DATA_CHUNK_SIZE + expected_sample_data_size:
            raise DsfChunkSizeError(
                f"data: bad chunk size: {size}, expected "
                f"{DATA_CHUNK_SIZE + expected_sample_data_size}",
                raw=raw,
                chunk="data",
            )

        return cls(sample_data_size=size - DATA_CHUNK_SIZE)

    @classmethod
    def read_from_stream(cls, stream: BinaryIO, expected_sample_data_size: int) -> "DataChunk":
        return cls.unpack(read_exact(stream, DATA_CHUNK_SIZE, "data"), expected_sample_data_size)

    def write_to_stream(self, stream: BinaryIO):
        write_all(stream, self.pack(), "data")

    def log(self, logger: DsfDebugLogger, samples: bytes = b""):
        logger.log_chunk(
            "Data Chunk",
            [
                ("Chunk header", repr(DATA_CHUNK_HEADER.decode("ascii"))),
                ("Size of this chunk", self.size),
            ],
        )
        logger.log_samples("Sample data", samples)
