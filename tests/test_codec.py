"""
Unity Ledger Canonical Codec Tests
"""

import array
import math
import re
from datetime import datetime, timezone

import pytest

from unity.core import codec
from unity.errors import CodecError, ErrorCode


ROUND_TRIP_VALUES = [
    None,
    True,
    False,
    "",
    "zażółć gęślą jaźń",
    0,
    -17,
    2**1279 - 1,
    1.5,
    -0.25,
    datetime(2024, 5, 17, 12, 30, 45, 123000, tzinfo=timezone.utc),
    datetime(2024, 5, 17, 12, 30, 45),
    b"",
    b"\x00\x01\xfe\xff",
    bytearray(b"mutable"),
    array.array("B", [0, 1, 255]),
    array.array("i", [-(2**31), 0, 2**31 - 1]),
    array.array("Q", [2**64 - 1]),
    array.array("d", [1.5, -2.25]),
    [],
    [1, "two", [3.0, None]],
    (1, "two"),
    set(),
    {1, 2, 3},
    frozenset({"a", "b"}),
    {1: "one", 2: "two"},
    {(1, 2): "pair", "mixed": True},
    {},
    {"pubKey": 5, "nested": {"list": [1, {"x": b"y"}], "set": {"z"}}},
    {"type": "spend", "value": 10},
]


class TestRoundTrip:
    """decode(encode(v)) == v."""

    @pytest.mark.parametrize("value", ROUND_TRIP_VALUES, ids=repr)
    def test_round_trip(self, value):
        decoded = codec.decode(codec.encode(value))
        assert decoded == value
        assert type(decoded) is type(value)

    def test_nan(self):
        assert math.isnan(codec.decode(codec.encode(math.nan)))

    def test_infinities(self):
        assert codec.decode(codec.encode(math.inf)) == math.inf
        assert codec.decode(codec.encode(-math.inf)) == -math.inf

    def test_pattern(self):
        pattern = re.compile(r"^tx-[0-9a-f]+$", re.IGNORECASE)
        decoded = codec.decode(codec.encode(pattern))
        assert decoded.pattern == pattern.pattern
        assert decoded.flags == pattern.flags

    def test_decode_bytes_input(self):
        assert codec.decode(codec.encode_bytes({"a": 1})) == {"a": 1}


class TestCanonicalForm:
    """Encoding is independent of construction order."""

    def test_wire_format(self):
        assert codec.encode(5) == '{"type":"BigInt","value":"5"}'
        assert codec.encode({"b": True, "a": None}) == '{"a":null,"b":true}'
        assert codec.encode(math.nan) == '{"type":"NaN"}'

    def test_record_key_order(self):
        first = {"tokenId": 1, "prevTxId": None, "data": {"x": 1, "y": 2}}
        second = {"data": {"y": 2, "x": 1}, "prevTxId": None, "tokenId": 1}
        assert codec.encode(first) == codec.encode(second)

    def test_map_key_order(self):
        assert codec.encode({2: "b", 1: "a"}) == codec.encode({1: "a", 2: "b"})

    def test_set_order(self):
        assert codec.encode({"b", "a", "c"}) == codec.encode({"c", "a", "b"})

    def test_record_with_type_key_is_wrapped(self):
        encoded = codec.encode({"type": "BigInt", "value": "5"})
        assert '"Object"' in encoded
        assert codec.decode(encoded) == {"type": "BigInt", "value": "5"}

    def test_list_and_tuple_differ(self):
        assert codec.encode([1, 2]) != codec.encode((1, 2))

    def test_bool_is_not_int(self):
        assert codec.encode(True) == "true"
        assert codec.encode(1) != codec.encode(True)


class TestFailClosed:
    """Unsupported kinds and malformed input raise CodecError."""

    @pytest.mark.parametrize("value", [
        object(),
        lambda: None,
        array.array("l", [1]),
        re.compile(rb"bytes"),
        memoryview(b"x"),
        [1, object()],
    ], ids=repr)
    def test_unsupported_encode(self, value):
        with pytest.raises(CodecError) as exc:
            codec.encode(value)
        assert exc.value.code == ErrorCode.UNSUPPORTED_TYPE

    def test_unknown_tag(self):
        with pytest.raises(CodecError) as exc:
            codec.decode('{"type":"Function","value":"return 1"}')
        assert exc.value.code == ErrorCode.UNKNOWN_TAG

    @pytest.mark.parametrize("text", [
        '{"type":"Bytes","value":"!!!"}',
        '{"type":"Int32Array","value":"AAAA"}',
        '{"type":"BigInt","value":"12a"}',
        '{"type":"BigInt","value":12}',
        '{"type":"BigInt"}',
        '{"type":"NaN","value":1}',
        '{"type":"Date","value":"yesterday"}',
        '{"type":"Set","value":[[1],[1]]}',
        '{"type":"Set","value":["a","a"]}',
        '{"type":"Map","value":[["a"]]}',
        '{"type":"BigInt","value":"1","extra":true}',
        '{"type":"RegExp","value":{"source":"("," flags":0}}',
        "5",
        "[1]",
        "NaN",
    ])
    def test_malformed_decode(self, text):
        with pytest.raises(CodecError):
            codec.decode(text)

    def test_invalid_json(self):
        with pytest.raises(CodecError) as exc:
            codec.decode("{not json")
        assert exc.value.code == ErrorCode.INVALID_JSON

    def test_invalid_utf8(self):
        with pytest.raises(CodecError):
            codec.decode(b"\xff\xfe")

    def test_deeply_nested_decode(self):
        with pytest.raises(CodecError):
            codec.decode("[" * 5000 + "]" * 5000)

    def test_deeply_nested_tagged_decode(self):
        with pytest.raises(CodecError):
            codec.decode('{"type":"Tuple","value":[' * 3000 + "]}" * 3000)

    def test_deeply_nested_encode(self):
        value = []
        for _ in range(5000):
            value = [value]
        with pytest.raises(CodecError):
            codec.encode(value)

    def test_self_reference(self):
        value = []
        value.append(value)
        with pytest.raises(CodecError):
            codec.encode(value)
