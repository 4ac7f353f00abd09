import logging
import re
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from .cursor import Cursor
from .errors import MalformedInput, Stage

logger = logging.getLogger(__name__)

# Stays below the default interpreter recursion limit.
DEFAULT_MAX_DEPTH = 256

Value = bytes | int | list | dict

LENGTH = re.compile(rb"[0-9]+")
INTEGER = re.compile(rb"-?[0-9]+")
CANONICAL_LENGTH = re.compile(rb"0|[1-9][0-9]*")
CANONICAL_INTEGER = re.compile(rb"0|-?[1-9][0-9]*")


class Decoder:
    """Recursive-descent bencode decoder.

    Each call to `decode` consumes exactly one value and leaves the cursor
    right after it, so trailing data can be read with `read_remaining` or
    further values decoded by iterating over the decoder.

    In strict mode only the canonical form is accepted: no leading zeros in
    integers or string lengths, no `i-0e`, and dictionary keys strictly
    increasing by byte value.
    """

    def __init__(
        self,
        source: bytes | bytearray | memoryview | BinaryIO | Cursor,
        *,
        strict: bool = False,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
    ):
        self.cursor = source if isinstance(source, Cursor) else Cursor(source)
        self.strict = strict
        self.max_depth = max_depth
        self.depth = 0

    def __iter__(self) -> Iterator[Value]:
        while (value := self.decode()) is not None:
            yield value

    @property
    def position(self) -> int:
        return self.cursor.position

    def is_at_end(self) -> bool:
        return self.cursor.is_at_end()

    def read_remaining(self) -> bytes:
        return self.cursor.read_remaining()

    def decode(self) -> Value | None:
        """Decode one value, or return None if the input is exhausted."""
        start = self.cursor.position

        try:
            at_end = self.cursor.is_at_end()
        except OSError as e:
            raise self.error(Stage.STRUCTURE_PREFIX, e) from e

        if at_end:
            logger.debug(f"No value left to decode at offset {start}")
            return None

        value = self.decode_one()
        logger.debug(
            f"Decoded {type(value).__name__} from offset {start} to {self.cursor.position}"
        )
        return value

    def decode_one(self) -> Value:
        try:
            c = self.cursor.read_byte()
        except (EOFError, OSError) as e:
            raise self.error(Stage.STRUCTURE_PREFIX, e) from e

        match c:
            case b"d":
                return self.read_dict()

            case b"l":
                return self.read_list()

            case b"i":
                return self.read_integer()

            case _:
                # First digit of a string length
                self.cursor.unread_byte()
                return self.read_string()

    def read_string(self) -> bytes:
        try:
            prefix = self.cursor.read_until(b":")
        except (EOFError, OSError) as e:
            raise self.error(Stage.STRING_LENGTH, e) from e

        length = self.read_number(
            prefix[:-1], Stage.STRING_LENGTH, LENGTH, CANONICAL_LENGTH
        )
        if length == 0:
            return b""

        try:
            return self.cursor.read_exact(length)
        except (EOFError, OSError) as e:
            raise self.error(Stage.STRING_VALUE, e) from e

    def read_integer(self) -> int:
        try:
            body = self.cursor.read_until(b"e")
        except (EOFError, OSError) as e:
            raise self.error(Stage.INTEGER_VALUE, e) from e

        return self.read_number(
            body[:-1], Stage.INTEGER_VALUE, INTEGER, CANONICAL_INTEGER
        )

    def read_list(self) -> list:
        lst = []
        with self.nested():
            while not self.at_suffix(Stage.LIST_SUFFIX):
                lst.append(self.decode_one())

        return lst

    def read_dict(self) -> dict:
        d = {}
        last_key = None

        with self.nested():
            while not self.at_suffix(Stage.DICT_SUFFIX):
                start = self.cursor.position

                match self.decode_one():
                    case bytes() as key:
                        pass

                    case other:
                        e = TypeError(
                            f"dictionary key must be a byte string, got {type(other).__name__}"
                        )
                        raise self.error(Stage.DICT_KEY, e, start) from e

                if self.strict and last_key is not None and key <= last_key:
                    e = ValueError(f"key {key!r} after {last_key!r} is not in canonical order")
                    raise self.error(Stage.DICT_KEY, e, start) from e
                last_key = key

                try:
                    c = self.cursor.peek()
                except (EOFError, OSError) as e:
                    raise self.error(Stage.DICT_VAL, e) from e

                if c == b"e":
                    e = ValueError(f"missing value for key {key!r}")
                    raise self.error(Stage.DICT_VAL, e) from e

                d[key] = self.decode_one()

        return d

    def read_number(
        self, digits: bytes, stage: Stage, pattern: re.Pattern, canonical: re.Pattern
    ) -> int:
        if not pattern.fullmatch(digits):
            e = ValueError(f"invalid number {digits!r}")
            raise self.error(stage, e) from e

        if self.strict and not canonical.fullmatch(digits):
            e = ValueError(f"non-canonical number {digits!r}")
            raise self.error(stage, e) from e

        try:
            return int(digits)
        except ValueError as e:
            # Beyond the interpreter's integer string conversion limit
            raise self.error(stage, e) from e

    def at_suffix(self, stage: Stage) -> bool:
        """Consume the closing `e` of a container if it is next."""
        try:
            c = self.cursor.peek()
        except (EOFError, OSError) as e:
            raise self.error(stage, e) from e

        if c != b"e":
            return False

        self.cursor.read_byte()
        return True

    @contextmanager
    def nested(self):
        if self.max_depth is not None and self.depth >= self.max_depth:
            e = ValueError(f"nesting deeper than {self.max_depth} levels")
            raise self.error(Stage.NESTING_DEPTH, e) from e

        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def error(self, stage: Stage, cause: BaseException, offset: int | None = None) -> MalformedInput:
        if offset is None:
            offset = self.cursor.position
        return MalformedInput(stage, cause, offset)


def decode(
    source: bytes | bytearray | memoryview | BinaryIO,
    *,
    strict: bool = False,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
) -> Value | None:
    """Decode the first bencoded value in `source`.

    Returns None when `source` is empty. Raises `MalformedInput` when the
    input does not follow the grammar.
    """
    return Decoder(source, strict=strict, max_depth=max_depth).decode()
