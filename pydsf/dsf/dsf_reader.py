"""
Handles reading of DSF (DSD Stream File) files.
The chunks are read in the fixed order DSD, fmt, data and, when the DSD chunk
points to one, metadata. The whole file is decoded into a single Audio.
"""

from types import TracebackType
from typing import BinaryIO, Optional, TextIO, Type

from pydsf.audio import Audio, Encoding
from pydsf.common.constants import MAX_METADATA_SIZE, MAX_SAMPLE_DATA_SIZE
from pydsf.common.debug_logger import DsfDebugLogger
from pydsf.common.utils import read_into
from pydsf.dsf.data_chunk import DataChunk
from pydsf.dsf.dsd_chunk import DsdChunk
from pydsf.dsf.errors import DsfError, DsfIOError, DsfLimitError
from pydsf.dsf.fmt_chunk import FmtChunk
from pydsf.dsf.metadata_chunk import MetadataChunk


class DsfDecoder:
    """
    Decodes one DSD stream file. An instance is used for a single decode call.
    """

    def __init__(
        self,
        stream: BinaryIO,
        logger: Optional[DsfDebugLogger] = None,
        max_sample_data_size: int = MAX_SAMPLE_DATA_SIZE,
        max_metadata_size: int = MAX_METADATA_SIZE,
    ):
        self.stream = stream
        self.logger = logger or DsfDebugLogger()
        self.max_sample_data_size = max_sample_data_size
        self.max_metadata_size = max_metadata_size

        self.audio = Audio()
        self.dsd_chunk: Optional[DsdChunk] = None
        self.fmt_chunk: Optional[FmtChunk] = None
        self.data_chunk: Optional[DataChunk] = None
        self.metadata_chunk: Optional[MetadataChunk] = None

    def read_dsd_chunk(self):
        """Reads the DSD chunk and prepares the metadata buffer."""
        self.dsd_chunk = DsdChunk.read_from_stream(self.stream)
        self.dsd_chunk.log(self.logger)

        metadata_size = self.dsd_chunk.metadata_size
        if metadata_size > self.max_metadata_size:
            raise DsfLimitError(
                f"DSD: metadata size {metadata_size} exceeds the limit of "
                f"{self.max_metadata_size} bytes",
                raw=self.dsd_chunk.pack(),
                chunk="DSD",
            )
        if metadata_size > 0:
            self.audio.metadata = bytearray(metadata_size)

    def read_fmt_chunk(self):
        """Reads the fmt chunk, fills in the audio format and prepares the sample buffer."""
        fmt = FmtChunk.read_from_stream(self.stream)
        self.fmt_chunk = fmt
        fmt.log(self.logger)

        self.audio.encoding = Encoding.DSD
        self.audio.num_channels = fmt.channel_num
        self.audio.channel_order = list(fmt.channel_order)
        self.audio.sampling_frequency = fmt.sampling_frequency
        self.audio.bits_per_sample = fmt.bits_per_sample
        self.audio.block_size = fmt.block_size
        self.audio.sample_count = fmt.sample_count

        sample_data_size = fmt.sample_data_size
        if sample_data_size > self.max_sample_data_size:
            raise DsfLimitError(
                f"fmt: sample data size {sample_data_size} exceeds the limit of "
                f"{self.max_sample_data_size} bytes",
                raw=fmt.pack(),
                chunk="fmt",
            )
        self.audio.encoded_samples = bytearray(sample_data_size)

    def read_data_chunk(self):
        """Reads the data chunk straight into the prepared sample buffer."""
        samples = self.audio.encoded_samples
        self.data_chunk = DataChunk.read_from_stream(self.stream, len(samples))
        read_into(self.stream, samples, "data")
        self.data_chunk.log(self.logger, samples)

    def read_metadata_chunk(self):
        """Reads the metadata chunk straight into the prepared metadata buffer."""
        self.metadata_chunk = MetadataChunk.read_from_stream(self.stream, self.audio.metadata)
        self.metadata_chunk.log(self.logger)

    def decode(self) -> Audio:
        # 1st chunk should be DSD
        self.read_dsd_chunk()
        # 2nd chunk should be fmt
        self.read_fmt_chunk()
        # 3rd chunk should be data
        self.read_data_chunk()
        # 4th chunk should be metadata, but may be omitted
        if self.audio.metadata is not None:
            self.read_metadata_chunk()
        return self.audio


def decode(
    stream: BinaryIO,
    log_to: Optional[TextIO] = None,
    *,
    max_sample_data_size: int = MAX_SAMPLE_DATA_SIZE,
    max_metadata_size: int = MAX_METADATA_SIZE,
) -> Audio:
    """
    Reads a DSD stream file from `stream` and returns it as an Audio.

    Args:
        stream: A readable binary stream positioned at the DSD chunk.
        log_to: Optional text stream for chunk diagnostics.
        max_sample_data_size: Largest sample buffer the header may ask for.
        max_metadata_size: Largest metadata buffer the header may ask for.

    Raises:
        DsfError: On the first invalid field or failed read. No partial
            result is returned.
    """
    decoder = DsfDecoder(
        stream,
        DsfDebugLogger(log_to),
        max_sample_data_size=max_sample_data_size,
        max_metadata_size=max_metadata_size,
    )
    return decoder.decode()


class DsfReader:
    """
    Reads a DSF file and exposes the decoded Audio and the parsed chunks.
    """

    def __init__(self, filepath_or_stream: str | BinaryIO, log_to: Optional[TextIO] = None):
        """
        Initializes the DSF reader and decodes the file.

        Args:
            filepath_or_stream: Path to the DSF file or an already open binary stream.
            log_to: Optional text stream for chunk diagnostics.
        """
        if isinstance(filepath_or_stream, str):
            try:
                self.stream: BinaryIO = open(filepath_or_stream, "rb")
            except OSError as e:
                raise DsfIOError(f"Failed to open DSF file: {filepath_or_stream}") from e
            self._close_on_exit = True
        else:
            self.stream = filepath_or_stream
            self._close_on_exit = False

        self.audio: Optional[Audio] = None
        self._decoder = DsfDecoder(self.stream, DsfDebugLogger(log_to))
        try:
            self.audio = self._decoder.decode()
        except BaseException:
            self.close()
            raise

    @property
    def dsd_chunk(self) -> Optional[DsdChunk]:
        return self._decoder.dsd_chunk

    @property
    def fmt_chunk(self) -> Optional[FmtChunk]:
        return self._decoder.fmt_chunk

    @property
    def data_chunk(self) -> Optional[DataChunk]:
        return self._decoder.data_chunk

    def get_audio(self) -> Audio:
        """Returns the decoded Audio."""
        if self.audio is None:
            raise DsfError("Audio not decoded.")
        return self.audio

    def close(self):
        """Closes the stream if it was opened by this reader."""
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
        return False  # Do not suppress exceptions
