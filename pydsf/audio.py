"""
The Audio value shared by the DSF decoder and encoder.
"""

from enum import IntEnum
from typing import List, Optional, Sequence

import numpy as np


class Encoding(IntEnum):
    """The set of possible audio encodings."""

    DSD = 0  # Direct Stream Digital, uncompressed
    DST = 1  # Direct Stream Transfer, compressed


class Channel(IntEnum):
    """The set of possible audio channels."""

    FRONT_LEFT = 0
    FRONT_RIGHT = 1
    CENTER = 2
    LOW_FREQUENCY = 3
    BACK_LEFT = 4
    BACK_RIGHT = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


def describe_channel_order(order: Sequence[Channel]) -> str:
    """Returns a comma separated list of channel names, e.g. 'front left, front right'."""
    return ", ".join(str(channel) for channel in order)


class Audio:
    """
    A set of encoded audio samples of a particular encoding.

    The samples are stored as the container stores them: for each block index,
    one block of ``block_size`` bytes per channel, in channel order.
    """

    def __init__(
        self,
        encoding: Encoding = Encoding.DSD,
        num_channels: int = 0,
        channel_order: Optional[List[Channel]] = None,
        sampling_frequency: int = 0,
        bits_per_sample: int = 0,
        block_size: int = 0,
        encoded_samples: Optional[bytearray] = None,
        metadata: Optional[bytearray] = None,
        sample_count: Optional[int] = None,
    ):
        self.encoding = encoding
        self.num_channels = num_channels
        self.channel_order: List[Channel] = list(channel_order or [])
        self.sampling_frequency = sampling_frequency
        self.bits_per_sample = bits_per_sample
        self.block_size = block_size
        self.encoded_samples = (
            encoded_samples if encoded_samples is not None else bytearray()
        )
        self.metadata = metadata
        # Samples per channel; None means derive it from encoded_samples
        self.sample_count = sample_count

    @property
    def duration(self) -> float:
        """Duration in seconds, or 0.0 when the sample count is unknown."""
        if not self.sample_count or not self.sampling_frequency:
            return 0.0
        return self.sample_count / self.sampling_frequency

    def _blocks(self) -> np.ndarray:
        if self.num_channels < 1 or self.block_size < 1:
            raise ValueError(
                f"Audio needs channels and a block size, got {self.num_channels} "
                f"channels and block size {self.block_size}"
            )
        stride = self.num_channels * self.block_size
        if len(self.encoded_samples) % stride != 0:
            raise ValueError(
                f"Encoded samples length {len(self.encoded_samples)} is not a "
                f"multiple of {stride} ({self.num_channels} channels x {self.block_size} bytes)"
            )
        data = np.frombuffer(self.encoded_samples, dtype=np.uint8)
        return data.reshape(-1, self.num_channels, self.block_size)

    def channel_samples(self, index: int) -> np.ndarray:
        """
        Returns the encoded bytes of one channel with the block interleaving removed.

        Args:
            index: Channel index, 0 <= index < num_channels.

        Returns:
            A 1-D uint8 array holding every block of the channel in order.
        """
        if not 0 <= index < self.num_channels:
            raise IndexError(
                f"Channel index {index} out of range for {self.num_channels} channels"
            )
        return self._blocks()[:, index, :].reshape(-1)

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[np.ndarray],
        channel_order: List[Channel],
        sampling_frequency: int,
        bits_per_sample: int = 1,
        block_size: int = 4096,
        metadata: Optional[bytearray] = None,
        sample_count: Optional[int] = None,
    ) -> "Audio":
        """
        Builds an Audio by block-interleaving per-channel byte arrays.
        Each channel is zero padded to a multiple of the block size.
        """
        if not channels:
            raise ValueError("At least one channel is required")
        if block_size < 1 or bits_per_sample < 1:
            raise ValueError(
                "Audio needs a block size and bits per sample, got block size "
                f"{block_size} and {bits_per_sample} bits per sample"
            )
        length = len(channels[0])
        for ch in channels:
            if len(ch) != length:
                raise ValueError(
                    f"All channels must have the same length, got {[len(c) for c in channels]}"
                )

        padded_length = -(-length // block_size) * block_size
        stacked = np.zeros((len(channels), padded_length), dtype=np.uint8)
        for i, ch in enumerate(channels):
            stacked[i, :length] = np.asarray(ch, dtype=np.uint8)

        interleaved = stacked.reshape(len(channels), -1, block_size).transpose(1, 0, 2)

        if sample_count is None:
            sample_count = length * 8 // bits_per_sample

        return cls(
            encoding=Encoding.DSD,
            num_channels=len(channels),
            channel_order=channel_order,
            sampling_frequency=sampling_frequency,
            bits_per_sample=bits_per_sample,
            block_size=block_size,
            encoded_samples=bytearray(interleaved.tobytes()),
            metadata=metadata,
            sample_count=sample_count,
        )

    def __repr__(self) -> str:
        return (
            f"Audio(encoding={self.encoding.name}, num_channels={self.num_channels}, "
            f"channel_order=[{describe_channel_order(self.channel_order)}], "
            f"sampling_frequency={self.sampling_frequency}, "
            f"bits_per_sample={self.bits_per_sample}, block_size={self.block_size}, "
            f"sample_count={self.sample_count}, "
            f"encoded_samples={len(self.encoded_samples)} bytes, "
            f"metadata={len(self.metadata) if self.metadata else 0} bytes)"
        )
