"""
Common utility functions for the pydsf project.
"""

from types import MappingProxyType
from typing import BinaryIO, Mapping

from pydsf.common.constants import (
    CHUNK_HEADER_SIZE,
    DATA_CHUNK_HEADER,
    DSD_CHUNK_HEADER,
    FMT_CHUNK_HEADER,
    LOG_PREVIEW_BYTES,
)
from pydsf.dsf.errors import DsfChunkHeaderError, DsfChunkOrderError, DsfIOError

# Chunk headers of the mandatory chunks and the names used in messages
KNOWN_CHUNK_HEADERS: Mapping[bytes, str] = MappingProxyType(
    {
        DSD_CHUNK_HEADER: "DSD",
        FMT_CHUNK_HEADER: "fmt",
        DATA_CHUNK_HEADER: "data",
    }
)


def check_chunk_header(chunk_name: str, expected: bytes, raw: bytes) -> None:
    """
    Checks the 4-byte header at the start of `raw`.

    Args:
        chunk_name: Name of the chunk being read, used in messages.
        expected: The header the chunk must start with.
        raw: The raw bytes of the chunk.

    Raises:
        DsfChunkOrderError: If another known chunk header was found.
        DsfChunkHeaderError: If the header is not recognized at all.
    """
    header = bytes(raw[:CHUNK_HEADER_SIZE])
    if header == expected:
        return
    found = KNOWN_CHUNK_HEADERS.get(header)
    if found is not None:
        raise DsfChunkOrderError(
            f"{chunk_name}: expected {chunk_name} chunk but found {found} chunk",
            expected=chunk_name,
            found=found,
            raw=raw,
        )
    raise DsfChunkHeaderError(
        f"{chunk_name}: bad chunk header: {header!r}", raw=raw, chunk=chunk_name
    )


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    """
    Reads exactly `size` bytes or raises DsfIOError.
    Short reads are continued until `size` bytes arrive or the stream ends.
    """
    data = bytearray()
    try:
        while len(data) < size:
            chunk = stream.read(size - len(data))
            if not chunk:
                break
            data += chunk
    except OSError as e:
        raise DsfIOError(f"{what}: failed to read {size} bytes") from e
    if len(data) != size:
        raise DsfIOError(
            f"{what}: unexpected end of stream, expected {size} bytes, got {len(data)}",
            expected=size,
            got=len(data),
        )
    return bytes(data)


def read_into(stream: BinaryIO, buffer: bytearray, what: str) -> None:
    """
    Fills a pre-allocated buffer from the stream.
    Partial reads are continued until the buffer is full or the stream ends.
    """
    view = memoryview(buffer)
    filled = 0
    try:
        while filled < len(buffer):
            n = stream.readinto(view[filled:])
            if not n:
                break
            filled += n
    except OSError as e:
        raise DsfIOError(f"{what}: failed to read {len(buffer)} bytes") from e
    finally:
        view.release()

    if filled != len(buffer):
        raise DsfIOError(
            f"{what}: unexpected end of stream, expected {len(buffer)} bytes, got {filled}",
            expected=len(buffer),
            got=filled,
        )


def write_all(stream: BinaryIO, data: bytes, what: str) -> None:
    """Writes `data` to the stream, wrapping stream failures in DsfIOError."""
    try:
        stream.write(data)
    except OSError as e:
        raise DsfIOError(f"{what}: failed to write {len(data)} bytes") from e


def round_up(value: int, multiple: int) -> int:
    """Rounds `value` up to the next multiple of `multiple`."""
    return -(-value // multiple) * multiple


def hex_preview(data: bytes, limit: int = LOG_PREVIEW_BYTES) -> str:
    """
    Formats the first `limit` bytes as space separated hex,
    followed by '...' when the data was truncated.
    """
    preview = bytes(data[:limit]).hex(" ")
    if len(data) > limit:
        preview += "..."
    return preview
