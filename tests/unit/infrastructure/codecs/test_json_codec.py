import math
from dataclasses import dataclass

import pytest

from filecache.domain.errors import CacheEncodingError
from filecache.infrastructure.codecs.json_codec import JsonCodec


@dataclass
class Point:
    x: int
    y: int


@pytest.fixture
def codec():
    return JsonCodec()


def test_encode_is_compact_utf8(codec: JsonCodec):
    assert codec.encode({"a": [1, 2], "b": "é"}) == '{"a":[1,2],"b":"é"}'.encode("utf-8")


def test_encode_ascii_only(codec: JsonCodec):
    assert JsonCodec(ensure_ascii=True).encode("é") == b'"\\u00e9"'


def test_encode_dataclass(codec: JsonCodec):
    assert codec.encode(Point(1, 2)) == b'{"x":1,"y":2}'


def test_encode_set_as_sorted_list(codec: JsonCodec):
    assert codec.encode({3, 1, 2}) == b"[1,2,3]"


@pytest.mark.parametrize("value", [object(), math.nan, Point])
def test_encode_failure_raises_encoding_error(codec: JsonCodec, value):
    with pytest.raises(CacheEncodingError):
        codec.encode(value)


def test_decode(codec: JsonCodec):
    assert codec.decode(b'{"x":1,"y":[true,null]}') == {"x": 1, "y": [True, None]}


@pytest.mark.parametrize("payload", [b"", b"{", b"\xff\xfe", b"[1,]", b"[" * 200000])
def test_decode_failure_raises_encoding_error(codec: JsonCodec, payload):
    with pytest.raises(CacheEncodingError):
        codec.decode(payload)


def test_encode_too_deeply_nested_value_raises_encoding_error(codec: JsonCodec):
    value = []
    for _ in range(100000):
        value = [value]

    with pytest.raises(CacheEncodingError):
        codec.encode(value)
