"""Codecs for length-delimited Protobuf fields: bytes and strings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .errors import DecodeError
from .reader import Reader
from .varint import decode_varint, encode_varint, encoded_len_varint
from .wire import DecodeContext, WireType, check_wire_type, encode_key, key_len


@dataclass(frozen=True)
class BytesCodec:
    """Encodes and decodes ``bytes`` fields.

    Values are immutable, so ``merge`` returns the decoded value; the last
    value seen for a field replaces any earlier one.
    """

    name: str = "bytes"
    wire_type: WireType = WireType.LENGTH_DELIMITED

    def default(self) -> Any:
        """Return the type's default value."""
        return b""

    def _to_bytes(self, value: Any) -> bytes:
        return bytes(value)

    def _from_bytes(self, data: bytes) -> Any:
        return data

    def encode(self, tag: int, value: Any) -> bytes:
        """Encode one field with ``tag`` holding ``value``."""
        data = self._to_bytes(value)
        return encode_key(tag, WireType.LENGTH_DELIMITED) + encode_varint(len(data)) + data

    def merge(
        self, wire_type: WireType, value: Any, reader: Reader, ctx: DecodeContext
    ) -> Any:
        """Decode a field value, returning it in place of ``value``."""
        check_wire_type(WireType.LENGTH_DELIMITED, wire_type)
        length = decode_varint(reader)
        if length > reader.remaining():
            raise DecodeError("buffer underflow")
        return self._from_bytes(reader.read(length))

    def encode_repeated(self, tag: int, values: Iterable[Any]) -> bytes:
        """Encode each value as its own field."""
        return b"".join(self.encode(tag, value) for value in values)

    def merge_repeated(
        self,
        wire_type: WireType,
        values: list[Any],
        reader: Reader,
        ctx: DecodeContext,
    ) -> None:
        """Decode one value and append it to ``values``."""
        check_wire_type(WireType.LENGTH_DELIMITED, wire_type)
        values.append(self.merge(wire_type, self.default(), reader, ctx))

    def _body_len(self, value: Any) -> int:
        length = len(self._to_bytes(value))
        return encoded_len_varint(length) + length

    def encoded_len(self, tag: int, value: Any) -> int:
        """Return the encoded length of one field."""
        return key_len(tag) + self._body_len(value)

    def encoded_len_repeated(self, tag: int, values: Iterable[Any]) -> int:
        """Return the encoded length of the values as separate fields."""
        values = list(values)
        return key_len(tag) * len(values) + sum(map(self._body_len, values))


@dataclass(frozen=True)
class StringCodec(BytesCodec):
    """Encodes and decodes UTF-8 ``string`` fields."""

    name: str = "string"

    def default(self) -> Any:
        """Return the type's default value."""
        return ""

    def _to_bytes(self, value: Any) -> bytes:
        return value.encode("utf-8")

    def _from_bytes(self, data: bytes) -> Any:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise DecodeError(
                "invalid string value: data is not UTF-8 encoded"
            ) from None

    def encode(self, tag: int, value: Any) -> bytes:
        """Encode one field with ``tag`` holding the string ``value``."""
        return super().encode(tag, value)

    def merge(
        self, wire_type: WireType, value: Any, reader: Reader, ctx: DecodeContext
    ) -> Any:
        """Decode a string value, raising DecodeError if it is not UTF-8."""
        return super().merge(wire_type, value, reader, ctx)

    def encoded_len(self, tag: int, value: Any) -> int:
        """Return the encoded length of one field."""
        return super().encoded_len(tag, value)


BYTES = BytesCodec()
STRING = StringCodec()