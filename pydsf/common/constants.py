"""
Global constants for the DSF (DSD Stream File) container.
These constants define the chunk headers, the fixed chunk sizes and the fixed
field values of the format, based on "DSF File Format Specification" v1.01.
"""

DSD_CHUNK_HEADER = b"DSD "
FMT_CHUNK_HEADER = b"fmt "
DATA_CHUNK_HEADER = b"data"
CHUNK_HEADER_SIZE = 4

DSD_CHUNK_SIZE = 28
FMT_CHUNK_SIZE = 52
DATA_CHUNK_SIZE = 12  # Header and size field only, excluding the samples
MANDATORY_CHUNKS_SIZE = DSD_CHUNK_SIZE + FMT_CHUNK_SIZE + DATA_CHUNK_SIZE

FMT_VERSION = 1
FMT_FORMAT_ID = 0  # DSD raw
FMT_BLOCK_SIZE = 4096
FMT_RESERVED = 0

# Upper bounds on buffers sized from header fields
MAX_SAMPLE_DATA_SIZE = 1 << 34
MAX_METADATA_SIZE = 1 << 26

LOG_PREVIEW_BYTES = 20
