"""
Handles the fmt chunk of a DSD stream file, which describes the format of the
sample data. See "DSF File Format Specification" v1.01. All data is
little-endian.
"""

import struct
from typing import BinaryIO, Tuple

from pydsf.audio import Audio, Channel, describe_channel_order
from pydsf.common.constants import (
    FMT_BLOCK_SIZE,
    FMT_CHUNK_HEADER,
    FMT_CHUNK_SIZE,
    FMT_FORMAT_ID,
    FMT_RESERVED,
    FMT_VERSION,
)
from pydsf.common.debug_logger import DsfDebugLogger
from pydsf.common.utils import check_chunk_header, read_exact, round_up, write_all
from pydsf.dsf.errors import DsfChunkSizeError, DsfConsistencyError, DsfValueError
from pydsf.tables.fmt_tables import (
    FMT_BITS_PER_SAMPLE,
    FMT_CHANNEL_NUM,
    FMT_CHANNEL_ORDER,
    FMT_CHANNEL_TYPE,
    FMT_SAMPLING_FREQUENCY,
    channel_type_for_order,
)


class FmtChunk:
    """
    Represents and handles the 52-byte fmt chunk.
    """

    HEADER_OFFSET = 0
    SIZE_OFFSET = 4
    VERSION_OFFSET = 12
    FORMAT_ID_OFFSET = 16
    CHANNEL_TYPE_OFFSET = 20
    CHANNEL_NUM_OFFSET = 24
    SAMPLING_FREQUENCY_OFFSET = 28
    BITS_PER_SAMPLE_OFFSET = 32
    SAMPLE_COUNT_OFFSET = 36
    BLOCK_SIZE_OFFSET = 44
    RESERVED_OFFSET = 48

    def __init__(
        self,
        channel_type: int = 2,
        channel_num: int = 2,
        sampling_frequency: int = 2822400,
        bits_per_sample: int = 1,
        sample_count: int = 0,
        block_size: int = FMT_BLOCK_SIZE,
    ):
        self.channel_type = channel_type
        self.channel_num = channel_num
        self.sampling_frequency = sampling_frequency
        self.bits_per_sample = bits_per_sample
        self.sample_count = sample_count  # Per channel
        self.block_size = block_size

    @property
    def channel_order(self) -> Tuple[Channel, ...]:
        return FMT_CHANNEL_ORDER[self.channel_type]

    @property
    def sample_data_size(self) -> int:
        """
        Length in bytes of the sample data described by this chunk:
        the samples of each channel rounded up to whole blocks, for every channel.
        """
        samples_per_byte = 8 // self.bits_per_sample
        bytes_per_channel = -(-self.sample_count // samples_per_byte)
        return round_up(bytes_per_channel, self.block_size) * self.channel_num

    def pack(self) -> bytes:
        """
        Packs the chunk into its 52-byte representation.
        """
        chunk = bytearray(FMT_CHUNK_SIZE)
        chunk[self.HEADER_OFFSET : self.HEADER_OFFSET + 4] = FMT_CHUNK_HEADER
        struct.pack_into("<Q", chunk, self.SIZE_OFFSET, FMT_CHUNK_SIZE)
        struct.pack_into("<I", chunk, self.VERSION_OFFSET, FMT_VERSION)
        struct.pack_into("<I", chunk, self.FORMAT_ID_OFFSET, FMT_FORMAT_ID)
        struct.pack_into("<I", chunk, self.CHANNEL_TYPE_OFFSET, self.channel_type)
        struct.pack_into("<I", chunk, self.CHANNEL_NUM_OFFSET, self.channel_num)
        struct.pack_into("<I", chunk, self.SAMPLING_FREQUENCY_OFFSET, self.sampling_frequency)
        struct.pack_into("<I", chunk, self.BITS_PER_SAMPLE_OFFSET, self.bits_per_sample)
        struct.pack_into("<Q", chunk, self.SAMPLE_COUNT_OFFSET, self.sample_count)
        struct.pack_into("<I", chunk, self.BLOCK_SIZE_OFFSET, self.block_size)
        struct.pack_into("<I", chunk, self.RESERVED_OFFSET, FMT_RESERVED)
        return bytes(chunk)

    @classmethod
    def unpack(cls, raw: bytes) -> "FmtChunk":
        """
        Unpacks and validates a 52-byte fmt chunk.
        """
        if len(raw) != FMT_CHUNK_SIZE:
            raise DsfChunkSizeError(
                f"fmt: chunk bytes must be {FMT_CHUNK_SIZE} bytes long, got {len(raw)}",
                raw=raw,
                chunk="fmt",
            )

        check_chunk_header("fmt", FMT_CHUNK_HEADER, raw)

        def field(fmt: str, offset: int) -> int:
            return struct.unpack_from(fmt, raw, offset)[0]

        size = field("<Q", cls.SIZE_OFFSET)
        if size != FMT_CHUNK_SIZE:
            raise DsfChunkSizeError(f"fmt: bad chunk size: {size}", raw=raw, chunk="fmt")

        version = field("<I", cls.VERSION_OFFSET)
        if version != FMT_VERSION:
            raise DsfValueError(f"fmt: bad format version: {version}", raw=raw, chunk="fmt")

        format_id = field("<I", cls.FORMAT_ID_OFFSET)
        if format_id != FMT_FORMAT_ID:
            raise DsfValueError(f"fmt: bad format id: {format_id}", raw=raw, chunk="fmt")

        channel_type = field("<I", cls.CHANNEL_TYPE_OFFSET)
        if channel_type not in FMT_CHANNEL_TYPE:
            raise DsfValueError(
                f"fmt: bad channel type: {channel_type}", raw=raw, chunk="fmt"
            )
        order = FMT_CHANNEL_ORDER[channel_type]

        channel_num = field("<I", cls.CHANNEL_NUM_OFFSET)
        if channel_num not in FMT_CHANNEL_NUM:
            raise DsfValueError(f"fmt: bad channel num: {channel_num}", raw=raw, chunk="fmt")
        if channel_num != len(order):
            raise DsfConsistencyError(
                f"fmt: mismatch between channel type {channel_type} and channel num {channel_num}",
                raw=raw,
                chunk="fmt",
            )

        sampling_frequency = field("<I", cls.SAMPLING_FREQUENCY_OFFSET)
        if sampling_frequency not in FMT_SAMPLING_FREQUENCY:
            raise DsfValueError(
                f"fmt: bad sampling frequency: {sampling_frequency}", raw=raw, chunk="fmt"
            )

        bits_per_sample = field("<I", cls.BITS_PER_SAMPLE_OFFSET)
        if bits_per_sample not in FMT_BITS_PER_SAMPLE:
            raise DsfValueError(
                f"fmt: bad bits per sample: {bits_per_sample}", raw=raw, chunk="fmt"
            )

        # Any sample count is valid
        sample_count = field("<Q", cls.SAMPLE_COUNT_OFFSET)

        block_size = field("<I", cls.BLOCK_SIZE_OFFSET)
        if block_size != FMT_BLOCK_SIZE:
            raise DsfValueError(f"fmt: bad block size: {block_size}", raw=raw, chunk="fmt")

        reserved = field("<I", cls.RESERVED_OFFSET)
        if reserved != FMT_RESERVED:
            raise DsfValueError(
                f"fmt: bad reserved bytes: {reserved:#x}", raw=raw, chunk="fmt"
            )

        return cls(
            channel_type=channel_type,
            channel_num=channel_num,
            sampling_frequency=sampling_frequency,
            bits_per_sample=bits_per_sample,
            sample_count=sample_count,
            block_size=block_size,
        )

    @classmethod
    def from_audio(cls, audio: Audio) -> "FmtChunk":
        """
        Builds the fmt chunk describing `audio`.

        The channel type is found from the channel order, and the sample count
        is taken as is from the audio. Only when the audio carries no sample
        count is it derived from the length of the encoded samples.

        Raises:
            DsfConsistencyError: If the channel order, channel count, sample
                count and sample data disagree.
            DsfValueError: If a field holds a value the format does not permit.
        """
        channel_type = channel_type_for_order(audio.channel_order)
        if channel_type is None:
            raise DsfConsistencyError(
                f"fmt: unsupported channel ordering: {describe_channel_order(audio.channel_order)}"
            )

        channel_num = audio.num_channels
        if channel_num != len(audio.channel_order):
            raise DsfConsistencyError(
                f"fmt: mismatch between num channels and channel order: {channel_num}, "
                f"[{describe_channel_order(audio.channel_order)}]"
            )

        if audio.sampling_frequency not in FMT_SAMPLING_FREQUENCY:
            raise DsfValueError(
                f"fmt: unsupported sampling frequency: {audio.sampling_frequency}"
            )

        if audio.bits_per_sample not in FMT_BITS_PER_SAMPLE:
            raise DsfValueError(f"fmt: unsupported bits per sample: {audio.bits_per_sample}")

        if audio.block_size != FMT_BLOCK_SIZE:
            raise DsfValueError(f"fmt: unsupported block size: {audio.block_size}")

        sample_count = audio.sample_count
        if sample_count is None:
            bytes_per_channel = len(audio.encoded_samples) // channel_num
            sample_count = bytes_per_channel * (8 // audio.bits_per_sample)

        return cls(
            channel_type=channel_type,
            channel_num=channel_num,
            sampling_frequency=audio.sampling_frequency,
            bits_per_sample=audio.bits_per_sample,
            sample_count=sample_count,
            block_size=audio.block_size,
        )

    @classmethod
    def read_from_stream(cls, stream: BinaryIO) -> "FmtChunk":
        """Reads and unpacks the fmt chunk from a binary stream."""
        return cls.unpack(read_exact(stream, FMT_CHUNK_SIZE, "fmt"))

    def write_to_stream(self, stream: BinaryIO):
        """Packs and writes the fmt chunk to a binary stream."""
        write_all(stream, self.pack(), "fmt")

    def log(self, logger: DsfDebugLogger):
        fields = [
            ("Chunk header", repr(FMT_CHUNK_HEADER.decode("ascii"))),
            ("Size of this chunk", f"{FMT_CHUNK_SIZE} bytes"),
            ("Format version", FMT_VERSION),
            ("Format id", FMT_FORMAT_ID),
            (
                "Channel type",
                f"{self.channel_type} ({FMT_CHANNEL_TYPE.get(self.channel_type, 'unknown')})",
            ),
            ("Channel num", self.channel_num),
        ]
        order = FMT_CHANNEL_ORDER.get(self.channel_type, ())
        if len(order) > 1:
            fields.append(("Channel order", describe_channel_order(order)))
        fields += [
            (
                "Sampling frequency",
                f"{self.sampling_frequency}Hz "
                f"({FMT_SAMPLING_FREQUENCY.get(self.sampling_frequency, 'unknown')})",
            ),
            ("Bits per sample", self.bits_per_sample),
            ("Sample count", self.sample_count),
            ("Block size per channel", f"{self.block_size} bytes"),
        ]
        logger.log_chunk("Fmt Chunk", fields)
