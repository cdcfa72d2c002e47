"""
Exceptions raised while decoding or encoding DSF files.
"""

from typing import Optional


class DsfError(Exception):
    """
    Base class for DSF codec errors.

    Attributes:
        raw: The offending raw bytes, empty when no chunk bytes are involved.
    """

    def __init__(self, message: str, raw: bytes = b"", chunk: str = ""):
        self.raw = bytes(raw)
        self.chunk = chunk
        if self.raw:
            message = f"{message}\n{chunk or 'raw'} chunk: {self.raw.hex(' ')}"
        super().__init__(message)


class DsfChunkHeaderError(DsfError):
    """An unrecognized chunk header was found."""

    pass


class DsfChunkOrderError(DsfChunkHeaderError):
    """A known chunk was found where a different chunk was expected."""

    def __init__(self, message: str, expected: str, found: str, raw: bytes = b""):
        self.expected = expected
        self.found = found
        super().__init__(message, raw, expected)


class DsfChunkSizeError(DsfError):
    """A declared size disagrees with the fixed or computed size."""

    pass


class DsfValueError(DsfError):
    """A field holds a value that is not permitted."""

    pass


class DsfLimitError(DsfValueError):
    """A buffer sized from header fields would exceed the configured bound."""

    pass


class DsfConsistencyError(DsfError):
    """Two or more fields disagree with each other."""

    pass


class DsfUnsupportedEncodingError(DsfConsistencyError):
    """The audio encoding cannot be written as a DSF file."""

    pass


class DsfIOError(DsfError):
    """Reading from or writing to the underlying stream failed."""

    def __init__(self, message: str, expected: Optional[int] = None, got: Optional[int] = None):
        self.expected = expected
        self.got = got
        super().__init__(message)
