"""
Handles the optional metadata chunk at the end of a DSD stream file,
typically an ID3v2 tag. Its contents are kept as raw bytes.
"""

from typing import BinaryIO

from pydsf.common.constants import CHUNK_HEADER_SIZE
from pydsf.common.debug_logger import DsfDebugLogger
from pydsf.common.utils import KNOWN_CHUNK_HEADERS, read_into, write_all
from pydsf.dsf.errors import DsfChunkOrderError


class MetadataChunk:
    """
    Represents the metadata chunk.
    """

    def __init__(self, data: bytearray):
        self.data = data

    def check(self):
        """
        Checks that the metadata is not one of the mandatory chunks,
        which would mean the metadata pointer is corrupt.
        """
        found = KNOWN_CHUNK_HEADERS.get(bytes(self.data[:CHUNK_HEADER_SIZE]))
        if found is not None:
            raise DsfChunkOrderError(
                f"metadata: expected metadata chunk but found {found} chunk",
                expected="metadata",
                found=found,
                raw=self.data[:CHUNK_HEADER_SIZE],
            )

    @classmethod
    def read_from_stream(cls, stream: BinaryIO, buffer: bytearray) -> "MetadataChunk":
        """Fills the pre-allocated `buffer` from the stream and checks it."""
        read_into(stream, buffer, "metadata")
        chunk = cls(buffer)
        chunk.check()
        return chunk

    def write_to_stream(self, stream: BinaryIO):
        write_all(stream, bytes(self.data), "metadata")

    def log(self, logger: DsfDebugLogger):
        if not self.data:
            return
        logger.log_chunk("Metadata Chunk", [("Size of metadata", f"{len(self.data)} bytes")])
        logger.log_bytes("Metadata", self.data)
