import argparse
import logging
import pprint
import sys
from typing import BinaryIO

from .bencode import DEFAULT_MAX_DEPTH, Decoder, Value
from .errors import MalformedInput

logger = logging.getLogger(__name__)


class HexBytes:
    """Non-printable byte string, shown as hex."""

    def __init__(self, data: bytes):
        self.data = data

    def __repr__(self):
        return f"hex({len(self.data)} bytes):'{self.data.hex()}'"


def printable(value: Value):
    match value:
        case bytes() if all(0x20 <= b <= 0x7E for b in value):
            return value.decode("ascii")

        case bytes():
            return HexBytes(value)

        case list():
            return [printable(v) for v in value]

        case dict():
            return {printable(k): printable(v) for k, v in value.items()}

        case _:
            return value


def load(
    stream: BinaryIO, strict: bool, max_depth: int | None, everything: bool
) -> list[Value]:
    decoder = Decoder(stream, strict=strict, max_depth=max_depth)
    if everything:
        return list(decoder)

    value = decoder.decode()
    return [] if value is None else [value]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bdecode", description="Pretty-print the contents of bencoded files."
    )
    parser.add_argument("files", nargs="+", metavar="FILE", help="file to decode, - for stdin")
    parser.add_argument("--strict", action="store_true", help="only accept canonical encodings")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"maximum container nesting, 0 for unbounded (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--all", action="store_true", help="decode every concatenated value, not only the first"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(levelname)s:%(name)s:%(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    max_depth = args.max_depth or None

    failed = False
    for file in args.files:
        try:
            if file == "-":
                values = load(sys.stdin.buffer, args.strict, max_depth, args.all)
            else:
                with open(file, "rb") as f:
                    values = load(f, args.strict, max_depth, args.all)
        except (MalformedInput, OSError) as e:
            logger.error(f"{file}: {e}")
            failed = True
            continue

        if not values:
            logger.warning(f"{file}: empty input")

        for value in values:
            pprint.pprint(printable(value), indent=2, sort_dicts=False)

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
