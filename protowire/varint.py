"""LEB128 variable-length integers and length delimiters."""

from __future__ import annotations

from .errors import DecodeError
from .reader import Reader

U64_MAX = (1 << 64) - 1
_MAX_VARINT_LEN = 10


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer in LEB128 form (1 to 10 bytes)."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"varint value out of range: {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(reader: Reader) -> int:
    """Decode a LEB128 varint from the reader, advancing past it.

    Bits beyond the 64th are discarded; a varint longer than ten bytes
    or one cut short by the end of the buffer is an error.
    """
    if not reader.has_remaining():
        raise DecodeError("invalid varint")
    value = 0
    for shift in range(0, 7 * _MAX_VARINT_LEN, 7):
        if not reader.has_remaining():
            break
        byte = reader.read_byte()
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            return value & U64_MAX
    raise DecodeError("invalid varint")


def encoded_len_varint(value: int) -> int:
    """Return the encoded length of ``value`` as a varint, from 1 to 10."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"varint value out of range: {value}")
    return max(1, (value.bit_length() + 6) // 7)


def encode_length_delimiter(length: int) -> bytes:
    """Encode a message length delimiter."""
    if length < 0:
        raise ValueError(f"negative length: {length}")
    return encode_varint(length)


def length_delimiter_len(length: int) -> int:
    """Return the encoded size of a length delimiter, from 1 to 10."""
    if length < 0:
        raise ValueError(f"negative length: {length}")
    return encoded_len_varint(length)


def decode_length_delimiter(data: Reader | bytes | bytearray | memoryview) -> int:
    """Decode a length delimiter from a reader or the start of a buffer.

    A reader is advanced past the delimiter.
    """
    reader = data if isinstance(data, Reader) else Reader(data)
    return decode_varint(reader)