import io
from typing import BinaryIO

# Upper bound on a single read from the underlying stream.
CHUNK_SIZE = 64 * 2**10


class Cursor:
    """Forward-only reader with one byte of lookahead.

    Wraps a bytes-like object or any binary stream with a `read(n)` method.
    `peek` looks at the next byte without consuming it and `unread_byte`
    gives back the byte just returned by `read_byte`. Nothing else is
    buffered.
    """

    def __init__(self, source: bytes | bytearray | memoryview | BinaryIO):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(source)
        self.stream = source
        self.position = 0
        self._pending = b""
        self._last: bytes | None = None

    def read_byte(self) -> bytes:
        if self._pending:
            c, self._pending = self._pending, b""
        else:
            c = self._read(1)
            if not c:
                raise EOFError("unexpected end of stream")

        self.position += 1
        self._last = c
        return c

    def unread_byte(self) -> None:
        if self._last is None or self._pending:
            raise ValueError("only the byte just read can be unread")

        self._pending, self._last = self._last, None
        self.position -= 1

    def peek(self) -> bytes:
        if not self._pending:
            c = self._read(1)
            if not c:
                raise EOFError("unexpected end of stream")
            self._pending = c

        self._last = None
        return self._pending

    def read_until(self, delimiter: bytes) -> bytes:
        """Read up to and including `delimiter`."""
        data = bytearray()
        while True:
            try:
                c = self.read_byte()
            except EOFError:
                raise EOFError(
                    f"expected {delimiter!r}, stream ended after {bytes(data)!r}"
                ) from None

            data += c
            if c == delimiter:
                return bytes(data)

    def read_exact(self, n: int) -> bytes:
        data = bytearray(self._pending)
        self._pending = b""

        while len(data) < n:
            chunk = self._read(min(n - len(data), CHUNK_SIZE))
            if not chunk:
                self.position += len(data)
                raise EOFError(f"expected {n} bytes, only {len(data)} available")
            data += chunk

        self.position += n
        self._last = None
        return bytes(data)

    def read_remaining(self) -> bytes:
        data = self._pending + self._read()
        self._pending = b""
        self._last = None
        self.position += len(data)
        return data

    def is_at_end(self) -> bool:
        try:
            self.peek()
        except EOFError:
            return True
        return False

    def _read(self, n: int = -1) -> bytes:
        # Non-blocking streams may hand back None.
        return self.stream.read(n) or b""
