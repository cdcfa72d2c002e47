"""
Tests for the fmt chunk module.
"""

import io
import struct

import pytest

from pydsf.audio import Audio, Channel, Encoding
from pydsf.common.constants import FMT_CHUNK_SIZE
from pydsf.dsf.errors import (
    DsfChunkHeaderError,
    DsfChunkOrderError,
    DsfChunkSizeError,
    DsfConsistencyError,
    DsfIOError,
    DsfValueError,
)
from pydsf.dsf.fmt_chunk import FmtChunk

# Stereo, 2822400 Hz, 1 bit per sample, sample count 1, block size 4096
VALID_FMT_CHUNK = (
    b"fmt "
    + struct.pack("<Q", 52)
    + struct.pack("<IIIIII", 1, 0, 2, 2, 2822400, 1)
    + struct.pack("<Q", 1)
    + struct.pack("<II", 4096, 0)
)


def patched(offset: int, data: bytes) -> bytes:
    chunk = bytearray(VALID_FMT_CHUNK)
    chunk[offset : offset + len(data)] = data
    return bytes(chunk)


def u32(value: int) -> bytes:
    return struct.pack("<I", value)


class TestFmtChunkUnpack:
    """Test cases for reading the fmt chunk."""

    def test_valid_chunk(self):
        chunk = FmtChunk.unpack(VALID_FMT_CHUNK)
        assert chunk.channel_type == 2
        assert chunk.channel_num == 2
        assert chunk.channel_order == (Channel.FRONT_LEFT, Channel.FRONT_RIGHT)
        assert chunk.sampling_frequency == 2822400
        assert chunk.bits_per_sample == 1
        assert chunk.sample_count == 1
        assert chunk.block_size == 4096

    @pytest.mark.parametrize("header", [b"fmtx", b"FMT ", b"ID3\x03"])
    def test_bad_header(self, header):
        with pytest.raises(DsfChunkHeaderError, match="fmt: bad chunk header") as exc_info:
            FmtChunk.unpack(patched(0, header))
        assert exc_info.value.raw[:4] == header

    @pytest.mark.parametrize("header,found", [(b"DSD ", "DSD"), (b"data", "data")])
    def test_known_chunk_out_of_order(self, header, found):
        with pytest.raises(DsfChunkOrderError, match=f"expected fmt chunk but found {found} chunk"):
            FmtChunk.unpack(patched(0, header))

    @pytest.mark.parametrize("size", [51, 53, 28])
    def test_bad_chunk_size(self, size):
        with pytest.raises(DsfChunkSizeError, match=f"bad chunk size: {size}"):
            FmtChunk.unpack(patched(4, struct.pack("<Q", size)))

    def test_bad_version(self):
        with pytest.raises(DsfValueError, match="bad format version: 0"):
            FmtChunk.unpack(patched(12, u32(0)))

    def test_bad_format_id(self):
        with pytest.raises(DsfValueError, match="bad format id: 1"):
            FmtChunk.unpack(patched(16, u32(1)))

    @pytest.mark.parametrize("channel_type", [0, 8])
    def test_bad_channel_type(self, channel_type):
        with pytest.raises(DsfValueError, match=f"bad channel type: {channel_type}"):
            FmtChunk.unpack(patched(20, u32(channel_type)))

    @pytest.mark.parametrize(
        "channel_type,channel_num,order",
        [
            (1, 1, (Channel.CENTER,)),
            (2, 2, (Channel.FRONT_LEFT, Channel.FRONT_RIGHT)),
            (3, 3, (Channel.FRONT_LEFT, Channel.FRONT_RIGHT, Channel.CENTER)),
            (4, 4, (Channel.FRONT_LEFT, Channel.FRONT_RIGHT, Channel.BACK_LEFT, Channel.BACK_RIGHT)),
            (5, 4, (Channel.FRONT_LEFT, Channel.FRONT_RIGHT, Channel.CENTER, Channel.LOW_FREQUENCY)),
            (
                6,
                5,
                (
                    Channel.FRONT_LEFT,
                    Channel.FRONT_RIGHT,
                    Channel.CENTER,
                    Channel.BACK_LEFT,
                    Channel.BACK_RIGHT,
                ),
            ),
            (
                7,
                6,
                (
                    Channel.FRONT_LEFT,
                    Channel.FRONT_RIGHT,
                    Channel.CENTER,
                    Channel.LOW_FREQUENCY,
                    Channel.BACK_LEFT,
                    Channel.BACK_RIGHT,
                ),
            ),
        ],
    )
    def test_matched_channel_type_and_num(self, channel_type, channel_num, order):
        chunk = FmtChunk.unpack(patched(20, u32(channel_type) + u32(channel_num)))
        assert chunk.channel_num == channel_num
        assert chunk.channel_order == order

    @pytest.mark.parametrize("channel_num", [0, 7])
    def test_bad_channel_num(self, channel_num):
        with pytest.raises(DsfValueError, match=f"bad channel num: {channel_num}"):
            FmtChunk.unpack(patched(24, u32(channel_num)))

    @pytest.mark.parametrize(
        "channel_type,channel_num", [(1, 2), (2, 1), (3, 2), (4, 3), (5, 3), (6, 4), (7, 5)]
    )
    def test_mismatched_channel_type_and_num(self, channel_type, channel_num):
        with pytest.raises(
            DsfConsistencyError,
            match=f"mismatch between channel type {channel_type} and channel num {channel_num}",
        ):
            FmtChunk.unpack(patched(20, u32(channel_type) + u32(channel_num)))

    @pytest.mark.parametrize("frequency", [2822400, 5644800, 11289600, 22579200])
    def test_valid_sampling_frequency(self, frequency):
        assert FmtChunk.unpack(patched(28, u32(frequency))).sampling_frequency == frequency

    @pytest.mark.parametrize("frequency", [44100, 0, 2822401])
    def test_bad_sampling_frequency(self, frequency):
        with pytest.raises(DsfValueError, match=f"bad sampling frequency: {frequency}"):
            FmtChunk.unpack(patched(28, u32(frequency)))

    @pytest.mark.parametrize("bits", [1, 8])
    def test_valid_bits_per_sample(self, bits):
        assert FmtChunk.unpack(patched(32, u32(bits))).bits_per_sample == bits

    @pytest.mark.parametrize("bits", [0, 2, 16])
    def test_bad_bits_per_sample(self, bits):
        with pytest.raises(DsfValueError, match=f"bad bits per sample: {bits}"):
            FmtChunk.unpack(patched(32, u32(bits)))

    def test_bad_block_size(self):
        with pytest.raises(DsfValueError, match="bad block size: 1024"):
            FmtChunk.unpack(patched(44, u32(1024)))

    def test_bad_reserved(self):
        with pytest.raises(DsfValueError, match="bad reserved bytes: 0x4030201"):
            FmtChunk.unpack(patched(48, b"\x01\x02\x03\x04"))

    def test_read_truncated(self):
        with pytest.raises(DsfIOError):
            FmtChunk.read_from_stream(io.BytesIO(VALID_FMT_CHUNK[:40]))


class TestFmtChunkSampleDataSize:
    """Test cases for the sample buffer size computed from the fmt chunk."""

    @pytest.mark.parametrize(
        "sample_count,bits,channels,expected",
        [
            (0, 1, 2, 0),
            (1, 1, 2, 8192),
            (8 * 4096, 1, 2, 8192),
            (8 * 4096 + 1, 1, 2, 16384),
            (4096, 8, 1, 4096),
            (4097, 8, 1, 8192),
            (2822400, 1, 6, 6 * 87 * 4096),
        ],
    )
    def test_sample_data_size(self, sample_count, bits, channels, expected):
        chunk = FmtChunk(
            channel_type={1: 1, 2: 2, 6: 7}[channels],
            channel_num=channels,
            bits_per_sample=bits,
            sample_count=sample_count,
        )
        assert chunk.sample_data_size == expected


class TestFmtChunkFromAudio:
    """Test cases for building the fmt chunk from an Audio."""

    def make_audio(self, **kwargs) -> Audio:
        values = dict(
            encoding=Encoding.DSD,
            num_channels=2,
            channel_order=[Channel.FRONT_LEFT, Channel.FRONT_RIGHT],
            sampling_frequency=2822400,
            bits_per_sample=1,
            block_size=4096,
            encoded_samples=bytearray(8192),
            sample_count=8 * 4096,
        )
        values.update(kwargs)
        return Audio(**values)

    def test_from_audio(self):
        chunk = FmtChunk.from_audio(self.make_audio())
        assert chunk.channel_type == 2
        assert chunk.channel_num == 2
        assert chunk.sample_count == 8 * 4096

    def test_sample_count_taken_verbatim(self):
        chunk = FmtChunk.from_audio(self.make_audio(sample_count=12345))
        assert chunk.sample_count == 12345

    def test_sample_count_derived_when_missing(self):
        chunk = FmtChunk.from_audio(self.make_audio(sample_count=None))
        assert chunk.sample_count == 4096 * 8

    def test_unsupported_channel_ordering(self):
        audio = self.make_audio(channel_order=[Channel.FRONT_RIGHT, Channel.FRONT_LEFT])
        with pytest.raises(
            DsfConsistencyError, match="unsupported channel ordering: front right, front left"
        ):
            FmtChunk.from_audio(audio)

    def test_mismatched_channel_count(self):
        with pytest.raises(DsfConsistencyError, match="mismatch between num channels"):
            FmtChunk.from_audio(self.make_audio(num_channels=3))

    def test_unsupported_sampling_frequency(self):
        with pytest.raises(DsfValueError, match="unsupported sampling frequency: 44100"):
            FmtChunk.from_audio(self.make_audio(sampling_frequency=44100))

    def test_unsupported_bits_per_sample(self):
        with pytest.raises(DsfValueError, match="unsupported bits per sample: 16"):
            FmtChunk.from_audio(self.make_audio(bits_per_sample=16))

    def test_unsupported_block_size(self):
        with pytest.raises(DsfValueError, match="unsupported block size: 0"):
            FmtChunk.from_audio(self.make_audio(block_size=0))

    def test_pack_then_unpack(self):
        chunk = FmtChunk.from_audio(self.make_audio())
        raw = chunk.pack()
        assert len(raw) == FMT_CHUNK_SIZE
        again = FmtChunk.unpack(raw)
        assert vars(again) == vars(chunk)
