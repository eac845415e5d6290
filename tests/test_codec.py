import pytest

from kvstore import codec
from kvstore.exceptions import CodecError


def test_encode_is_compact():
    assert codec.encode({"retries": 3}) == '{"retries":3}'


def test_encode_with_indent():
    assert codec.encode({"a": True}, indent=2) == '{\n  "a": true\n}'


def test_encode_keeps_non_ascii():
    assert codec.encode({"name": "café"}) == '{"name":"café"}'


def test_decode_recovers_kinds():
    data = codec.decode('{"s":"x","i":1,"b":false,"d":1.25}')
    assert data == {"s": "x", "i": 1, "b": False, "d": 1.25}
    assert type(data["i"]) is int
    assert type(data["b"]) is bool
    assert type(data["d"]) is float


def test_decode_empty_object():
    assert codec.decode("{}") == {}


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n",
        "{not json",
        '{"a":1',
        "[1, 2]",
        "42",
        '{"a":null}',
        '{"a":[1]}',
        '{"a":{"b":1}}',
        '{"a":9223372036854775808}',
    ],
)
def test_decode_rejects_malformed(text):
    with pytest.raises(CodecError):
        codec.decode(text)


def test_encode_refuses_non_finite_numbers():
    with pytest.raises(ValueError):
        codec.encode({"x": float("nan")})


@pytest.mark.parametrize("text", ['{"a":NaN}', '{"a":Infinity}', '{"a":-Infinity}', '{"a":1e999}'])
def test_decode_rejects_non_json_numbers(text):
    with pytest.raises(CodecError):
        codec.decode(text)
