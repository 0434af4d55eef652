import pytest
from hypothesis import given
from hypothesis import strategies as st

from protowire.errors import DecodeError
from protowire.reader import Reader
from protowire.varint import encode_varint
from protowire.wire import (
    MAX_TAG,
    MIN_TAG,
    RECURSION_LIMIT,
    DecodeContext,
    WireType,
    check_wire_type,
    decode_key,
    encode_key,
    key_len,
    merge_loop,
    skip_field,
)


@pytest.mark.parametrize(
    "tag, wire_type, encoded",
    [
        (1, WireType.VARINT, b"\x08"),
        (1, WireType.START_GROUP, b"\x0b"),
        (1, WireType.END_GROUP, b"\x0c"),
        (2, WireType.LENGTH_DELIMITED, b"\x12"),
        (5, WireType.START_GROUP, b"\x2b"),
        (11, WireType.THIRTY_TWO_BIT, b"\x5d"),
        (16, WireType.VARINT, b"\x80\x01"),
    ],
)
def test_encode_key_known_values(tag, wire_type, encoded):
    assert encode_key(tag, wire_type) == encoded
    assert decode_key(Reader(encoded)) == (tag, wire_type)


@given(
    st.integers(min_value=MIN_TAG, max_value=MAX_TAG),
    st.sampled_from(list(WireType)),
)
def test_key_roundtrip(tag, wire_type):
    encoded = encode_key(tag, wire_type)
    assert len(encoded) == key_len(tag)
    reader = Reader(encoded)
    assert decode_key(reader) == (tag, wire_type)
    assert reader.remaining() == 0


@pytest.mark.parametrize("tag, width", [(1, 1), (15, 1), (16, 2), (2047, 2), (2048, 3), (MAX_TAG, 5)])
def test_key_len(tag, width):
    assert key_len(tag) == width


@pytest.mark.parametrize("tag", [0, MAX_TAG + 1])
def test_encode_key_rejects_out_of_range_tag(tag):
    with pytest.raises(ValueError):
        encode_key(tag, WireType.VARINT)


def test_decode_key_zero_tag():
    with pytest.raises(DecodeError) as exc:
        decode_key(Reader(b"\x00"))
    assert exc.value.description == "invalid tag value: 0"


def test_decode_key_invalid_wire_type():
    with pytest.raises(DecodeError) as exc:
        decode_key(Reader(b"\x0e"))
    assert exc.value.description == "invalid wire type value: 6"


def test_decode_key_too_large():
    with pytest.raises(DecodeError) as exc:
        decode_key(Reader(encode_varint(1 << 32)))
    assert exc.value.description == "invalid key value: 4294967296"


def test_wire_type_from_value():
    assert WireType.from_value(2) is WireType.LENGTH_DELIMITED
    with pytest.raises(DecodeError) as exc:
        WireType.from_value(7)
    assert exc.value.description == "invalid wire type value: 7"


def test_check_wire_type():
    check_wire_type(WireType.VARINT, WireType.VARINT)
    with pytest.raises(DecodeError) as exc:
        check_wire_type(WireType.VARINT, WireType.LENGTH_DELIMITED)
    assert exc.value.description == "invalid wire type: LENGTH_DELIMITED (expected VARINT)"


def test_decode_context_default_and_recursion():
    ctx = DecodeContext()
    assert ctx.recurse_count == RECURSION_LIMIT == 100
    deeper = ctx.enter_recursion()
    assert deeper.recurse_count == 99
    assert ctx.recurse_count == 100


def test_decode_context_limit():
    DecodeContext(1).check_limit()
    with pytest.raises(DecodeError) as exc:
        DecodeContext(1).enter_recursion().check_limit()
    assert exc.value.description == "recursion limit reached"


def test_merge_loop_reads_exactly_length():
    values = []
    reader = Reader(b"\x03\x01\x02\x03\x09")

    def merge(r, ctx):
        values.append(r.read_byte())

    merge_loop(reader, DecodeContext(), merge)
    assert values == [1, 2, 3]
    assert reader.remaining() == 1


def test_merge_loop_underflow():
    with pytest.raises(DecodeError) as exc:
        merge_loop(Reader(b"\x05\x01"), DecodeContext(), lambda r, c: r.read_byte())
    assert exc.value.description == "buffer underflow"


def test_merge_loop_length_exceeded():
    with pytest.raises(DecodeError) as exc:
        merge_loop(Reader(b"\x02\x01\x02\x03"), DecodeContext(), lambda r, c: r.read(3))
    assert exc.value.description == "delimited length exceeded"


def test_merge_loop_empty():
    calls = []
    reader = Reader(b"\x00")
    merge_loop(reader, DecodeContext(), lambda r, c: calls.append(1))
    assert calls == []
    assert reader.remaining() == 0


@pytest.mark.parametrize(
    "wire_type, body, left",
    [
        (WireType.VARINT, b"\xff\x01\xaa", 1),
        (WireType.THIRTY_TWO_BIT, b"\x01\x02\x03\x04\xaa", 1),
        (WireType.SIXTY_FOUR_BIT, b"\x01\x02\x03\x04\x05\x06\x07\x08", 0),
        (WireType.LENGTH_DELIMITED, b"\x02ab\xaa\xbb", 2),
    ],
)
def test_skip_field_simple(wire_type, body, left):
    reader = Reader(body)
    skip_field(wire_type, 3, reader, DecodeContext())
    assert reader.remaining() == left


def test_skip_field_underflow():
    with pytest.raises(DecodeError) as exc:
        skip_field(WireType.SIXTY_FOUR_BIT, 1, Reader(b"\x01\x02"), DecodeContext())
    assert exc.value.description == "buffer underflow"
    with pytest.raises(DecodeError) as exc:
        skip_field(WireType.LENGTH_DELIMITED, 1, Reader(b"\x05ab"), DecodeContext())
    assert exc.value.description == "buffer underflow"


def test_skip_group_with_nested_group():
    data = bytes([0x0B, 0x30, 0x01, 0x2B, 0x30, 0xFF, 0x01, 0x2C, 0x10, 0x20, 0x0C, 0x99])
    reader = Reader(data)
    tag, wire_type = decode_key(reader)
    assert (tag, wire_type) == (1, WireType.START_GROUP)
    skip_field(wire_type, tag, reader, DecodeContext())
    assert reader.remaining() == 1


def test_skip_group_mismatched_end():
    reader = Reader(bytes([0x08, 0x01, 0x14]))
    with pytest.raises(DecodeError) as exc:
        skip_field(WireType.START_GROUP, 1, reader, DecodeContext())
    assert exc.value.description == "unexpected end group tag"


def test_skip_end_group_is_error():
    with pytest.raises(DecodeError) as exc:
        skip_field(WireType.END_GROUP, 1, Reader(b""), DecodeContext())
    assert exc.value.description == "unexpected end group tag"


def test_deeply_nested_start_groups_hit_recursion_limit():
    reader = Reader(b"C" * 1000)
    tag, wire_type = decode_key(reader)
    assert (tag, wire_type) == (8, WireType.START_GROUP)
    with pytest.raises(DecodeError) as exc:
        skip_field(wire_type, tag, reader, DecodeContext())
    assert exc.value.description == "recursion limit reached"


def test_skip_field_respects_exhausted_context():
    with pytest.raises(DecodeError) as exc:
        skip_field(WireType.VARINT, 1, Reader(b"\x01"), DecodeContext(0))
    assert exc.value.description == "recursion limit reached"