"""A cursor over an immutable byte buffer."""

from __future__ import annotations

from .errors import DecodeError


class Reader:
    """Reads bytes from a buffer front to back, tracking the position."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._data = bytes(data)
        self._pos = 0

    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos

    def has_remaining(self) -> bool:
        """Whether any bytes are left to read."""
        return self._pos < len(self._data)

    def read_byte(self) -> int:
        """Read and return one byte."""
        if self._pos >= len(self._data):
            raise DecodeError("buffer underflow")
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def read(self, n: int) -> bytes:
        """Read and return exactly ``n`` bytes."""
        self._check_length(n)
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def advance(self, n: int) -> None:
        """Skip ``n`` bytes."""
        self._check_length(n)
        self._pos += n

    def _check_length(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"negative length: {n}")
        if n > self.remaining():
            raise DecodeError("buffer underflow")

    def __len__(self) -> int:
        return self.remaining()

    def __repr__(self) -> str:
        return f"Reader(position={self._pos}, remaining={self.remaining()})"