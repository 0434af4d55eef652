"""Field keys, wire types, recursion limits and field skipping."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

from .errors import DecodeError
from .reader import Reader
from .varint import decode_varint, encode_varint, encoded_len_varint

MIN_TAG = 1
MAX_TAG = (1 << 29) - 1
U32_MAX = (1 << 32) - 1

# The default nesting limit used by the reference Protobuf implementation.
RECURSION_LIMIT = 100


class WireType(enum.IntEnum):
    """How a field's value is laid out on the wire."""

    VARINT = 0
    SIXTY_FOUR_BIT = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    THIRTY_TWO_BIT = 5

    @classmethod
    def from_value(cls, value: int) -> WireType:
        """Return the wire type for ``value``, raising DecodeError if unknown."""
        try:
            return cls(value)
        except ValueError:
            raise DecodeError(f"invalid wire type value: {value}") from None


@dataclass(frozen=True)
class DecodeContext:
    """State passed through nested decode calls.

    ``recurse_count`` is how many more levels of nesting are allowed.
    """

    recurse_count: int = RECURSION_LIMIT

    def enter_recursion(self) -> DecodeContext:
        """Return the context to use one nesting level deeper."""
        return DecodeContext(self.recurse_count - 1)

    def check_limit(self) -> None:
        """Raise DecodeError if no further nesting is allowed."""
        if self.recurse_count <= 0:
            raise DecodeError("recursion limit reached")


def _check_tag(tag: int) -> None:
    if not MIN_TAG <= tag <= MAX_TAG:
        raise ValueError(f"tag out of range: {tag}")


def encode_key(tag: int, wire_type: WireType) -> bytes:
    """Encode a field key made of a tag and a wire type."""
    _check_tag(tag)
    return encode_varint((tag << 3) | int(wire_type))


def decode_key(reader: Reader) -> tuple[int, WireType]:
    """Decode a field key, returning ``(tag, wire_type)``."""
    key = decode_varint(reader)
    if key > U32_MAX:
        raise DecodeError(f"invalid key value: {key}")
    wire_type = WireType.from_value(key & 0x07)
    tag = key >> 3
    if tag < MIN_TAG:
        raise DecodeError("invalid tag value: 0")
    return tag, wire_type


def key_len(tag: int) -> int:
    """Return the encoded width of a key with ``tag``, from 1 to 5 bytes."""
    _check_tag(tag)
    return encoded_len_varint(tag << 3)


def check_wire_type(expected: WireType, actual: WireType) -> None:
    """Raise DecodeError unless ``actual`` is ``expected``."""
    if expected != actual:
        raise DecodeError(
            f"invalid wire type: {WireType(actual).name} "
            f"(expected {WireType(expected).name})"
        )


def merge_loop(
    reader: Reader,
    ctx: DecodeContext,
    merge: Callable[[Reader, DecodeContext], None],
) -> None:
    """Read a length prefix, then call ``merge`` until that many bytes are used."""
    length = decode_varint(reader)
    remaining = reader.remaining()
    if length > remaining:
        raise DecodeError("buffer underflow")
    limit = remaining - length
    while reader.remaining() > limit:
        merge(reader, ctx)
    if reader.remaining() != limit:
        raise DecodeError("delimited length exceeded")


def skip_field(
    wire_type: WireType, tag: int, reader: Reader, ctx: DecodeContext
) -> None:
    """Skip over the value of a field whose key has already been read."""
    ctx.check_limit()
    if wire_type == WireType.VARINT:
        decode_varint(reader)
        length = 0
    elif wire_type == WireType.THIRTY_TWO_BIT:
        length = 4
    elif wire_type == WireType.SIXTY_FOUR_BIT:
        length = 8
    elif wire_type == WireType.LENGTH_DELIMITED:
        length = decode_varint(reader)
    elif wire_type == WireType.START_GROUP:
        while True:
            inner_tag, inner_wire_type = decode_key(reader)
            if inner_wire_type == WireType.END_GROUP:
                if inner_tag != tag:
                    raise DecodeError("unexpected end group tag")
                break
            skip_field(inner_wire_type, inner_tag, reader, ctx.enter_recursion())
        length = 0
    else:
        raise DecodeError("unexpected end group tag")

    if length > reader.remaining():
        raise DecodeError("buffer underflow")
    reader.advance(length)