"""
Handles writing of DSF (DSD Stream File) files.
The chunks are written in the order the reader expects them: DSD, fmt, data
and, when the audio carries any, metadata.
"""

import io
from types import TracebackType
from typing import BinaryIO, Optional, TextIO, Type

from pydsf.audio import Audio, Encoding
from pydsf.common.constants import MANDATORY_CHUNKS_SIZE
from pydsf.common.debug_logger import DsfDebugLogger
from pydsf.common.utils import round_up, write_all
from pydsf.dsf.data_chunk import DataChunk
from pydsf.dsf.dsd_chunk import DsdChunk
from pydsf.dsf.errors import (
    DsfConsistencyError,
    DsfIOError,
    DsfUnsupportedEncodingError,
)
from pydsf.dsf.fmt_chunk import FmtChunk
from pydsf.dsf.metadata_chunk import MetadataChunk


class DsfEncoder:
    """
    Encodes one Audio as a DSD stream file. An instance is used for a single
    encode call and never modifies the Audio.
    """

    def __init__(self, audio: Audio, logger: Optional[DsfDebugLogger] = None):
        self.audio = audio
        self.logger = logger or DsfDebugLogger()

    def _build_chunks(self):
        """
        Builds and validates every chunk before anything is written,
        so that a validation error leaves the output untouched.
        """
        audio = self.audio
        if audio.encoding != Encoding.DSD:
            raise DsfUnsupportedEncodingError(
                f"unsupported audio encoding: {getattr(audio.encoding, 'name', audio.encoding)}"
            )
        self.fmt_chunk = FmtChunk.from_audio(audio)

        # Audio samples should be a multiple of the block size, padded with zero
        sample_data_size = round_up(len(audio.encoded_samples), audio.block_size)
        self.padding = sample_data_size - len(audio.encoded_samples)

        # Channels are stored as interleaved blocks, one block per channel in turn
        channel_blocks = self.fmt_chunk.block_size * self.fmt_chunk.channel_num
        if sample_data_size % channel_blocks:
            raise DsfConsistencyError(
                "data: sample data must hold whole blocks for every channel, "
                f"{sample_data_size} bytes is not a multiple of "
                f"{self.fmt_chunk.channel_num} x {self.fmt_chunk.block_size} bytes"
            )

        if self.fmt_chunk.sample_data_size != sample_data_size:
            raise DsfConsistencyError(
                f"fmt: sample count {self.fmt_chunk.sample_count} for "
                f"{self.fmt_chunk.channel_num} channels needs "
                f"{self.fmt_chunk.sample_data_size} bytes of sample data, got {sample_data_size}"
            )

        metadata = bytes(audio.metadata) if audio.metadata else b""
        self.metadata_chunk = MetadataChunk(bytearray(metadata)) if metadata else None
        if self.metadata_chunk is not None:
            self.metadata_chunk.check()
            if sample_data_size == 0:
                raise DsfConsistencyError(
                    f"DSD: metadata cannot be placed at offset {MANDATORY_CHUNKS_SIZE} "
                    f"without sample data"
                )

        self.dsd_chunk = DsdChunk.for_payload(sample_data_size, len(metadata))
        self.data_chunk = DataChunk(sample_data_size)

    def encode(self, stream: BinaryIO):
        self._build_chunks()

        if self.padding > 0:
            self.logger.log_message(
                f"Padding the audio samples with {self.padding} zero bytes"
            )

        self.dsd_chunk.log(self.logger)
        self.dsd_chunk.write_to_stream(stream)

        self.fmt_chunk.log(self.logger)
        self.fmt_chunk.write_to_stream(stream)

        self.data_chunk.log(self.logger, self.audio.encoded_samples)
        self.data_chunk.write_to_stream(stream)
        write_all(stream, bytes(self.audio.encoded_samples), "data")
        if self.padding > 0:
            write_all(stream, bytes(self.padding), "data")

        if self.metadata_chunk is not None:
            self.metadata_chunk.log(self.logger)
            self.metadata_chunk.write_to_stream(stream)


def encode(audio: Audio, stream: BinaryIO, log_to: Optional[TextIO] = None):
    """
    Writes `audio` to `stream` as a DSD stream file.

    Args:
        audio: The audio to write. Only Encoding.DSD is supported.
        stream: A writable binary stream.
        log_to: Optional text stream for chunk diagnostics.

    Raises:
        DsfError: If the audio cannot be represented, in which case nothing
            has been written, or if writing fails part way, in which case the
            output is truncated and must be discarded.
    """
    DsfEncoder(audio, DsfDebugLogger(log_to)).encode(stream)


def encode_bytes(audio: Audio, log_to: Optional[TextIO] = None) -> bytes:
    """Encodes `audio` into an in-memory DSD stream file."""
    buffer = io.BytesIO()
    encode(audio, buffer, log_to)
    return buffer.getvalue()


class DsfWriter:
    """
    Writes an Audio to a DSF file.
    """

    def __init__(self, filepath_or_stream: str | BinaryIO, log_to: Optional[TextIO] = None):
        """
        Initializes the DSF writer.

        Args:
            filepath_or_stream: Path to the DSF file to create/overwrite or an
                                already open binary stream for writing.
            log_to: Optional text stream for chunk diagnostics.
        """
        if isinstance(filepath_or_stream, str):
            try:
                self.stream: BinaryIO = open(filepath_or_stream, "wb")
            except OSError as e:
                raise DsfIOError(
                    f"Failed to open DSF file for writing: {filepath_or_stream}"
                ) from e
            self._close_on_exit = True
        else:
            self.stream = filepath_or_stream
            self._close_on_exit = False
        self.log_to = log_to

    def write(self, audio: Audio):
        """Encodes `audio` and flushes the stream."""
        encode(audio, self.stream, self.log_to)
        try:
            self.stream.flush()
        except OSError as e:
            raise DsfIOError("Failed to flush DSF file.") from e

    def close(self):
        """Closes the stream if it was opened by this writer."""
        if self._close_on_exit and not self.stream.closed:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Optional[bool]:
        self.close()
        return False
