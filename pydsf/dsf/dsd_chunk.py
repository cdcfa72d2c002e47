"""
Handles the DSD chunk, the first chunk of a DSD stream file.
See "DSF File Format Specification" v1.01. All data is little-endian.
"""

import struct
from typing import BinaryIO

from pydsf.common.constants import (
    DSD_CHUNK_HEADER,
    DSD_CHUNK_SIZE,
    MANDATORY_CHUNKS_SIZE,
)
from pydsf.common.debug_logger import DsfDebugLogger
from pydsf.common.utils import check_chunk_header, read_exact, write_all
from pydsf.dsf.errors import DsfChunkSizeError, DsfValueError


class DsdChunk:
    """
    Represents and handles the DSD chunk.
    """

    HEADER_OFFSET = 0
    SIZE_OFFSET = 4
    TOTAL_FILE_SIZE_OFFSET = 12
    METADATA_POINTER_OFFSET = 20

    def __init__(self, total_file_size: int = MANDATORY_CHUNKS_SIZE, metadata_pointer: int = 0):
        self.total_file_size = total_file_size
        # Offset of the metadata chunk, 0 if the file has none
        self.metadata_pointer = metadata_pointer

    @property
    def metadata_size(self) -> int:
        """Length of the metadata chunk, which runs to the end of the file."""
        if self.metadata_pointer == 0:
            return 0
        return self.total_file_size - self.metadata_pointer

    @classmethod
    def for_payload(cls, sample_data_size: int, metadata_size: int) -> "DsdChunk":
        """Builds the DSD chunk for a file holding the given payload sizes."""
        total_file_size = MANDATORY_CHUNKS_SIZE + sample_data_size + metadata_size
        metadata_pointer = total_file_size - metadata_size if metadata_size > 0 else 0
        return cls(total_file_size=total_file_size, metadata_pointer=metadata_pointer)

    def pack(self) -> bytes:
        """
        Packs the chunk into its 28-byte representation.
        """
        chunk = bytearray(DSD_CHUNK_SIZE)
        chunk[self.HEADER_OFFSET : self.HEADER_OFFSET + 4] = DSD_CHUNK_HEADER
        struct.pack_into("<Q", chunk, self.SIZE_OFFSET, DSD_CHUNK_SIZE)
        struct.pack_into("<Q", chunk, self.TOTAL_FILE_SIZE_OFFSET, self.total_file_size)
        struct.pack_into("<Q", chunk, self.METADATA_POINTER_OFFSET, self.metadata_pointer)
        return bytes(chunk)

    @classmethod
    def unpack(cls, raw: bytes) -> "DsdChunk":
        """
        Unpacks and validates a 28-byte DSD chunk.
        """
        if len(raw) != DSD_CHUNK_SIZE:
            raise DsfChunkSizeError(
                f"DSD: chunk bytes must be {DSD_CHUNK_SIZE} bytes long, got {len(raw)}",
                raw=raw,
                chunk="DSD",
            )

        check_chunk_header("DSD", DSD_CHUNK_HEADER, raw)

        (size,) = struct.unpack_from("<Q", raw, cls.SIZE_OFFSET)
        if size != DSD_CHUNK_SIZE:
            raise DsfChunkSizeError(f"DSD: bad chunk size: {size}", raw=raw, chunk="DSD")

        (total_file_size,) = struct.unpack_from("<Q", raw, cls.TOTAL_FILE_SIZE_OFFSET)
        if total_file_size < MANDATORY_CHUNKS_SIZE:
            raise DsfChunkSizeError(
                f"DSD: bad total file size: {total_file_size}", raw=raw, chunk="DSD"
            )

        # The metadata, if any, follows the DSD, fmt and data chunks
        (metadata_pointer,) = struct.unpack_from("<Q", raw, cls.METADATA_POINTER_OFFSET)
        if metadata_pointer != 0 and not (
            MANDATORY_CHUNKS_SIZE < metadata_pointer < total_file_size
        ):
            raise DsfValueError(
                f"DSD: bad pointer to metadata chunk: {metadata_pointer}",
                raw=raw,
                chunk="DSD",
            )

        return cls(total_file_size=total_file_size, metadata_pointer=metadata_pointer)

    @classmethod
    def read_from_stream(cls, stream: BinaryIO) -> "DsdChunk":
        """Reads and unpacks the DSD chunk from a binary stream."""
        return cls.unpack(read_exact(stream, DSD_CHUNK_SIZE, "DSD"))

    def write_to_stream(self, stream: BinaryIO):
        """Packs and writes the DSD chunk to a binary stream."""
        write_all(stream, self.pack(), "DSD")

    def log(self, logger: DsfDebugLogger):
        logger.log_chunk(
            "DSD Chunk",
            [
                ("Chunk header", repr(DSD_CHUNK_HEADER.decode("ascii"))),
                ("Size of this chunk", DSD_CHUNK_SIZE),
                ("Total file size", self.total_file_size),
                ("Pointer to Metadata chunk", self.metadata_pointer),
            ],
        )
