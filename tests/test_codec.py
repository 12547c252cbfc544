"""Tests for the entry codecs."""
import msgpack
import pytest

from zset_ts.codec import JsonCodec, MsgPackCodec, get_codec
from zset_ts.errors import CodecError, DecodeError, EncodeError


@pytest.fixture(params=[MsgPackCodec, JsonCodec], ids=["msgpack", "json"])
def codec(request):
    return request.param()


@pytest.mark.parametrize("value", [
    42,
    -7.25,
    "temperature",
    None,
    [1, 2, 3],
    {"cpu": 0.5, "tags": ["a", "b"]},
])
def test_round_trip(codec, value):
    assert codec.decode(codec.encode(2.0, value)) == (2.0, value)


def test_timestamp_round_trips_exactly(codec):
    ts = 1704067200.123456
    decoded_ts, _ = codec.decode(codec.encode(ts, 1))
    assert decoded_ts == ts
    assert isinstance(decoded_ts, float)


def test_msgpack_wire_format_is_float64_pair():
    data = MsgPackCodec().encode(2, 42)
    # fixarray of 2, then a float64 marker
    assert data[:2] == b"\x92\xcb"
    assert msgpack.unpackb(data) == [2.0, 42]


def test_msgpack_bytes_values():
    codec = MsgPackCodec()
    assert codec.decode(codec.encode(1.0, b"\x00\xff")) == (1.0, b"\x00\xff")


def test_msgpack_default_hook():
    codec = MsgPackCodec(default=sorted)
    assert codec.decode(codec.encode(1.0, {3, 1, 2})) == (1.0, [1, 2, 3])


def test_json_wire_format():
    assert JsonCodec().encode(2, {"a": 1}) == b'[2.0,{"a":1}]'


def test_unserializable_value_raises_encode_error(codec):
    with pytest.raises(EncodeError) as excinfo:
        codec.encode(1.0, object())
    assert isinstance(excinfo.value, CodecError)
    assert excinfo.value.__cause__ is not None


def test_json_rejects_nan():
    with pytest.raises(EncodeError):
        JsonCodec().encode(1.0, float("nan"))


@pytest.mark.parametrize("data", [
    b"",
    b"\xc1",
    MsgPackCodec().encode(1.0, 2)[:-1],
    MsgPackCodec().encode(1.0, 2) + b"\x00",
])
def test_msgpack_malformed_bytes(data):
    with pytest.raises(DecodeError):
        MsgPackCodec().decode(data)


@pytest.mark.parametrize("data", [b"", b"not json", b"\xff\xfe\x00", b"[1.0, 2"])
def test_json_malformed_bytes(data):
    with pytest.raises(DecodeError):
        JsonCodec().decode(data)


@pytest.mark.parametrize("obj", [42, [1.0], [1.0, 2, 3], ["x", 1], [True, 1], {"ts": 1.0}])
def test_msgpack_wrong_shape(obj):
    with pytest.raises(DecodeError):
        MsgPackCodec().decode(msgpack.packb(obj))


def test_json_wrong_shape():
    with pytest.raises(DecodeError, match="not a number"):
        JsonCodec().decode(b'["2.0", 1]')


def test_codecs_do_not_read_each_other():
    with pytest.raises(DecodeError):
        JsonCodec().decode(MsgPackCodec().encode(1.0, 1))


def test_get_codec():
    assert isinstance(get_codec("msgpack"), MsgPackCodec)
    assert isinstance(get_codec("JSON"), JsonCodec)
    with pytest.raises(ValueError, match="Unknown codec"):
        get_codec("pickle")
