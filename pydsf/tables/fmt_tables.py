"""
Lookup tables for the fields of the DSF fmt chunk.
Permitted values map to their descriptive labels; every table is read-only.
"""

from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from pydsf.audio import Channel

FMT_CHANNEL_TYPE: Mapping[int, str] = MappingProxyType(
    {
        1: "mono",
        2: "stereo",
        3: "3 channels",
        4: "quad",
        5: "4 channels",
        6: "5 channels",
        7: "5.1 channels",
    }
)

# Mono is not given an order by the format specification; center is used so
# that the channel type and channel num can be cross-checked.
FMT_CHANNEL_ORDER: Mapping[int, Tuple[Channel, ...]] = MappingProxyType(
    {
        1: (Channel.CENTER,),
        2: (Channel.FRONT_LEFT, Channel.FRONT_RIGHT),
        3: (Channel.FRONT_LEFT, Channel.FRONT_RIGHT, Channel.CENTER),
        4: (
            Channel.FRONT_LEFT,
            Channel.FRONT_RIGHT,
            Channel.BACK_LEFT,
            Channel.BACK_RIGHT,
        ),
        5: (
            Channel.FRONT_LEFT,
            Channel.FRONT_RIGHT,
            Channel.CENTER,
            Channel.LOW_FREQUENCY,
        ),
        6: (
            Channel.FRONT_LEFT,
            Channel.FRONT_RIGHT,
            Channel.CENTER,
            Channel.BACK_LEFT,
            Channel.BACK_RIGHT,
        ),
        7: (
            Channel.FRONT_LEFT,
            Channel.FRONT_RIGHT,
            Channel.CENTER,
            Channel.LOW_FREQUENCY,
            Channel.BACK_LEFT,
            Channel.BACK_RIGHT,
        ),
    }
)

FMT_CHANNEL_NUM: Mapping[int, str] = MappingProxyType(
    {
        1: "mono",
        2: "stereo",
        3: "3 channels",
        4: "4 channels",
        5: "5 channels",
        6: "6 channels",
    }
)

# Only DSD64 and DSD128 are defined by the format specification; the higher
# rates and all of the labels are in common use.
FMT_SAMPLING_FREQUENCY: Mapping[int, str] = MappingProxyType(
    {
        2822400: "DSD64",
        5644800: "DSD128",
        11289600: "DSD256",
        22579200: "DSD512",
    }
)

FMT_BITS_PER_SAMPLE = frozenset({1, 8})


def channel_type_for_order(order: Sequence[Channel]) -> Optional[int]:
    """
    Reverse lookup of FMT_CHANNEL_ORDER.

    Returns:
        The channel type whose canonical order equals `order` exactly, or None.
    """
    wanted = tuple(order)
    for channel_type, canonical in FMT_CHANNEL_ORDER.items():
        if canonical == wanted:
            return channel_type
    return None
