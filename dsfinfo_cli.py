import argparse
import io
import sys
from typing import List, Optional

from pydsf.audio import describe_channel_order
from pydsf.dsf.dsf_reader import DsfReader
from pydsf.dsf.dsf_writer import DsfWriter, encode
from pydsf.dsf.errors import DsfError
from pydsf.tables.fmt_tables import FMT_SAMPLING_FREQUENCY


class _DiscardingSink(io.RawIOBase):
    """A writable binary stream that drops everything written to it."""

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return len(b)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dsfinfo",
        description="Read a DSF (DSD Stream File) and print information about its contents",
    )
    parser.add_argument("file", type=str, help="Path to the .dsf file")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print the fields of each chunk while decoding",
    )
    parser.add_argument(
        "--debug-log",
        type=str,
        help="Write the fields of each chunk to the specified file (e.g., --debug-log dsf_debug.log)",
    )
    parser.add_argument(
        "--check-encode",
        action="store_true",
        help="Encode the decoded audio again, discarding the output, to check it can be written",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Encode the decoded audio again and write it to the specified .dsf file",
    )
    return parser


def print_audio_info(audio, out=sys.stdout):
    label = FMT_SAMPLING_FREQUENCY.get(audio.sampling_frequency, "unknown")
    metadata_size = len(audio.metadata) if audio.metadata else 0
    print(f"Encoding:           {audio.encoding.name}", file=out)
    print(f"Channels:           {audio.num_channels}", file=out)
    print(f"Channel order:      {describe_channel_order(audio.channel_order)}", file=out)
    print(f"Sampling frequency: {audio.sampling_frequency} Hz ({label})", file=out)
    print(f"Bits per sample:    {audio.bits_per_sample}", file=out)
    print(f"Block size:         {audio.block_size} bytes", file=out)
    print(f"Sample count:       {audio.sample_count}", file=out)
    print(f"Duration:           {audio.duration:.2f} s", file=out)
    print(f"Sample data:        {len(audio.encoded_samples)} bytes", file=out)
    print(f"Metadata:           {metadata_size} bytes", file=out)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    debug_log = None
    log_to = sys.stdout if args.verbose else None
    try:
        if args.debug_log:
            try:
                debug_log = open(args.debug_log, "w", encoding="utf-8")
            except OSError as e:
                print(f"Error: cannot open debug log {args.debug_log}: {e}", file=sys.stderr)
                return 1
            log_to = debug_log
            print(f"Debug logging enabled to: {args.debug_log}")

        with DsfReader(args.file, log_to=log_to) as reader:
            audio = reader.get_audio()

        if log_to is sys.stdout:
            print()
        print_audio_info(audio)

        if args.check_encode:
            encode(audio, _DiscardingSink(), log_to)
            print("Encode check:       ok")

        if args.output:
            with DsfWriter(args.output, log_to=log_to) as writer:
                writer.write(audio)
            print(f"Written to:         {args.output}")

    except DsfError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if debug_log is not None:
            debug_log.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
