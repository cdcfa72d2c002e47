import unittest
from pydsf.common import constants as c


class TestDsfConstants(unittest.TestCase):
    def test_chunk_headers(self):
        self.assertEqual(c.DSD_CHUNK_HEADER, b"DSD ", "DSD chunk header includes 1 space")
        self.assertEqual(c.FMT_CHUNK_HEADER, b"fmt ", "fmt chunk header includes 1 space")
        self.assertEqual(c.DATA_CHUNK_HEADER, b"data")

    def test_chunk_sizes(self):
        self.assertEqual(c.DSD_CHUNK_SIZE, 28, "DSD chunk should be 28 bytes")
        self.assertEqual(c.FMT_CHUNK_SIZE, 52, "fmt chunk should be 52 bytes")
        self.assertEqual(
            c.DATA_CHUNK_SIZE, 12, "data chunk header should be 12 bytes excluding samples"
        )

    def test_mandatory_chunks_size(self):
        self.assertEqual(
            c.MANDATORY_CHUNKS_SIZE,
            92,
            "DSD, fmt and data chunk headers should total 92 bytes",
        )

    def test_fmt_fixed_values(self):
        self.assertEqual(c.FMT_VERSION, 1)
        self.assertEqual(c.FMT_FORMAT_ID, 0, "Format id 0 is DSD raw")
        self.assertEqual(c.FMT_BLOCK_SIZE, 4096, "Block size per channel should be 4096")
        self.assertEqual(c.FMT_RESERVED, 0)

    def test_allocation_limits(self):
        self.assertGreater(c.MAX_SAMPLE_DATA_SIZE, c.FMT_BLOCK_SIZE * 6)
        self.assertGreater(c.MAX_METADATA_SIZE, 0)


if __name__ == "__main__":
    unittest.main()
