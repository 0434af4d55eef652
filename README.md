# protowire

Low-level pieces for reading and writing the Protocol Buffers binary wire format:

- LEB128 varints and length delimiters
- field keys and wire types
- skipping unknown fields, with a nesting limit
- codecs for length-delimited `bytes` and `string` fields
- the errors raised for malformed input

It has no dependencies outside the standard library.

## Installation

```
pip install protowire
```

To install the test dependencies too:

```
pip install "protowire[test]"
```

## Reading input

`protowire.reader.Reader` is a cursor over an immutable byte buffer. It has these methods:

- `remaining()`
- `has_remaining()`
- `read_byte()`
- `read(n)`
- `advance(n)`

If a read or advance asks for more bytes than remain, it raises `DecodeError("buffer underflow")`.

## Varints and length delimiters

```python
from protowire.reader import Reader
from protowire.varint import decode_varint, encode_varint, encoded_len_varint

data = encode_varint(300)
assert data == b"\xac\x02"
assert encoded_len_varint(300) == 2
assert decode_varint(Reader(data)) == 300
```

`encode_varint` and `encoded_len_varint` take values from 0 to 2**64 - 1 and raise `ValueError` outside that range. `decode_varint` raises `DecodeError("invalid varint")` when the input is empty, when the varint is cut short, or when it runs past ten bytes.

Three more functions handle the length prefix in front of a delimited message:

- `encode_length_delimiter(length)` returns the prefix as bytes.
- `length_delimiter_len(length)` returns the size of the prefix, from 1 to 10.
- `decode_length_delimiter(data)` accepts either a `Reader`, which it advances, or a bytes-like object, which it reads from the start.

## Field keys and skipping

```python
from protowire.reader import Reader
from protowire.wire import DecodeContext, WireType, decode_key, encode_key, skip_field

key = encode_key(1, WireType.VARINT)
assert decode_key(Reader(key)) == (1, WireType.VARINT)

reader = Reader(b"\x08\x96\x01")
tag, wire_type = decode_key(reader)
skip_field(wire_type, tag, reader, DecodeContext())
assert not reader.has_remaining()
```

`protowire.wire` provides the following:

- `WireType` is an `IntEnum` of the six wire types. `WireType.from_value` raises `DecodeError` for an unknown value.
- Tags run from `MIN_TAG` (1) to `MAX_TAG` (2**29 - 1). `encode_key` and `key_len` raise `ValueError` for a tag outside that range.
- `decode_key` rejects keys above 32 bits, unknown wire types, and tag 0.
- `check_wire_type(expected, actual)` raises `DecodeError` when the two differ.
- `merge_loop(reader, ctx, merge)` reads a length prefix, then calls `merge(reader, ctx)` until exactly that many bytes have been consumed.
- `skip_field` steps over a field of any wire type, including nested groups. It raises `DecodeError` for a mismatched or unexpected end-group tag.
- `DecodeContext` limits how deep groups may nest. The default limit is `RECURSION_LIMIT` (100). `enter_recursion()` returns the context for one level deeper, and `check_limit()` raises `DecodeError("recursion limit reached")` once that budget is used up.

## Bytes and string fields

`protowire.lengthdelim` has two codecs:

- `BytesCodec`, with a ready instance `BYTES`
- `StringCodec`, with a ready instance `STRING`

Values are immutable, so `merge` returns the decoded value instead of changing the old one. The last value seen for a field wins.

```python
from protowire.lengthdelim import STRING
from protowire.reader import Reader
from protowire.wire import DecodeContext, decode_key

field = STRING.encode(1, "hi")
assert field == b"\x0a\x02hi"
assert STRING.encoded_len(1, "hi") == len(field)

reader = Reader(field)
tag, wire_type = decode_key(reader)
assert STRING.merge(wire_type, STRING.default(), reader, DecodeContext()) == "hi"
```

The codecs also have these methods:

- `encode_repeated` writes each value as its own field.
- `merge_repeated` appends one decoded value to a list.
- `encoded_len_repeated` returns the encoded length of a list of values.

`StringCodec.merge` raises `DecodeError` if the data is not valid UTF-8.

## Errors

Both exception classes live in `protowire.errors`.

`DecodeError` is raised for malformed input. It has these members:

- `description` holds the root cause.
- `stack` holds a list of `(message, field)` pairs, which `push(message, field)` adds to.
- `str(error)` gives text of the form `failed to decode Protobuf message: Msg.field: <description>`.

`EncodeError` describes a buffer that is too small for what has to be written into it. It has these members:

- `required`, also available as `required_capacity`
- `remaining`

None of the functions described above raise `EncodeError`.

## What this package does not do

protowire does not include any of the following:

- codecs for numeric scalar fields (int32, sint64, fixed32, float, double, bool, and the rest)
- map fields
- embedded messages or groups
- a message base class with `encode`/`decode` methods
- the well-known wrapper messages

It also does not generate code from `.proto` files, and it has no command-line tool. Message types have to be assembled by hand from the key, varint and length-delimited primitives above.