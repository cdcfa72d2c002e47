"""
Diagnostic logging for the DSF decoder and encoder.
Prints the fields of each chunk as it is read or written, for inspecting files
and comparing them with other DSF tools. Logging has no effect on decoding or
encoding.
"""

from typing import Iterable, Optional, TextIO, Tuple, Any

import numpy as np

from pydsf.common.constants import LOG_PREVIEW_BYTES
from pydsf.common.utils import hex_preview

LABEL_WIDTH = 27


class DsfDebugLogger:
    """
    Writes chunk diagnostics to a text sink.
    A logger without a sink is disabled and every call is a no-op.
    """

    def __init__(self, sink: Optional[TextIO] = None, enabled: Optional[bool] = None):
        self.sink = sink
        self.enabled = sink is not None if enabled is None else enabled and sink is not None

    def _write(self, text: str) -> None:
        self.sink.write(text)

    def log_message(self, message: str) -> None:
        """Log a free-form line."""
        if not self.enabled:
            return
        self._write(f"{message}\n")

    def log_chunk(self, title: str, fields: Iterable[Tuple[str, Any]]) -> None:
        """
        Log a chunk as an underlined title followed by aligned fields.

        Args:
            title: Chunk title, e.g. 'DSD Chunk'.
            fields: (label, value) pairs in the order they appear in the chunk.
        """
        if not self.enabled:
            return
        lines = [f"\n{title}\n{'=' * len(title)}"]
        for label, value in fields:
            lines.append(f"{label + ':':<{LABEL_WIDTH}}{value}")
        self._write("\n".join(lines) + "\n")

    def log_bytes(self, label: str, data: bytes, limit: int = LOG_PREVIEW_BYTES) -> None:
        """Log a hex preview of raw bytes."""
        if not self.enabled or not data:
            return
        self._write(f"{label + ':':<{LABEL_WIDTH}}{hex_preview(data, limit)}\n")

    def log_samples(self, label: str, samples: bytes) -> None:
        """
        Log a hex preview of sample data together with simple statistics.
        """
        if not self.enabled or not samples:
            return
        values = np.frombuffer(samples, dtype=np.uint8)
        nonzero = int(np.count_nonzero(values))
        self._write(
            f"{label + ':':<{LABEL_WIDTH}}{hex_preview(samples)} "
            f"|META: size={values.size} nonzero={nonzero}\n"
        )

    def enable(self):
        """Enable logging, if a sink is set."""
        self.enabled = self.sink is not None

    def disable(self):
        """Disable logging."""
        self.enabled = False
