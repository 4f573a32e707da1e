"""
Unity Ledger Canonical Codec

Deterministic, type-tagged JSON encoding of structured values. Identical
logical values always produce identical text, so hashes over the encoding
are stable.

Wire format:
- None, bool, str and finite float are plain JSON
- every other kind is {"type": <tag>, "value": <payload>}
- records (dicts with str keys) are JSON objects with sorted keys; a record
  that itself has a "type" key is wrapped in an "Object" tag
- sets and maps are ordered by the encoded form of their elements/keys

The set of tags is closed. Unsupported kinds and unknown tags raise
CodecError on both encode and decode.
"""

from __future__ import annotations
import array
import json
import math
import re
import sys
from datetime import datetime
from typing import Any, Callable, Dict, Union

from unity.constants import (
    TAG_KEY,
    VALUE_KEY,
    TAG_BIGINT,
    TAG_NAN,
    TAG_INFINITY,
    TAG_NEG_INFINITY,
    TAG_DATE,
    TAG_REGEXP,
    TAG_BYTES,
    TAG_BYTEARRAY,
    TAG_MAP,
    TAG_SET,
    TAG_FROZENSET,
    TAG_TUPLE,
    TAG_OBJECT,
    TYPED_ARRAY_TAGS,
    TYPED_ARRAY_TYPECODES,
)
from unity.core.serialization import bytes_to_base64, base64_to_bytes
from unity.errors import CodecError, ErrorCode

JSONValue = Union[None, bool, int, float, str, list, dict]


# ==============================================================================
# Encoding
# ==============================================================================

def encode(value: Any) -> str:
    """Canonical text encoding of `value`."""
    try:
        return _dumps(to_tree(value))
    except RecursionError as e:
        raise CodecError.malformed("value nested too deeply") from e


def encode_bytes(value: Any) -> bytes:
    """UTF-8 bytes of the canonical encoding (the input to hashing)."""
    return encode(value).encode("utf-8")


def _dumps(tree: JSONValue) -> str:
    return json.dumps(
        tree,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def _tagged(tag: str, payload: JSONValue = None) -> dict:
    if payload is None:
        return {TAG_KEY: tag}
    return {TAG_KEY: tag, VALUE_KEY: payload}


def _sorted_items(items) -> list:
    """Encode each item and order by its canonical text."""
    encoded = [to_tree(item) for item in items]
    return sorted(encoded, key=_dumps)


def to_tree(value: Any) -> JSONValue:
    """Convert a value into its tagged JSON tree."""
    # bool before int: bool is an int subclass
    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, int):
        return _tagged(TAG_BIGINT, str(value))

    if isinstance(value, float):
        if math.isnan(value):
            return _tagged(TAG_NAN)
        if math.isinf(value):
            return _tagged(TAG_INFINITY if value > 0 else TAG_NEG_INFINITY)
        return value

    if isinstance(value, datetime):
        return _tagged(TAG_DATE, value.isoformat())

    if isinstance(value, re.Pattern):
        if not isinstance(value.pattern, str):
            raise CodecError.unsupported(value)
        return _tagged(TAG_REGEXP, {"source": value.pattern, "flags": int(value.flags)})

    if isinstance(value, bytes):
        return _tagged(TAG_BYTES, bytes_to_base64(value))

    if isinstance(value, bytearray):
        return _tagged(TAG_BYTEARRAY, bytes_to_base64(bytes(value)))

    if isinstance(value, array.array):
        tag = TYPED_ARRAY_TAGS.get(value.typecode)
        if tag is None:
            raise CodecError.unsupported(value)
        if sys.byteorder != "little":
            value = array.array(value.typecode, value)
            value.byteswap()
        return _tagged(tag, bytes_to_base64(value.tobytes()))

    if isinstance(value, list):
        return [to_tree(item) for item in value]

    if isinstance(value, tuple):
        return _tagged(TAG_TUPLE, [to_tree(item) for item in value])

    if isinstance(value, frozenset):
        return _tagged(TAG_FROZENSET, _sorted_items(value))

    if isinstance(value, set):
        return _tagged(TAG_SET, _sorted_items(value))

    if isinstance(value, dict):
        if all(isinstance(k, str) for k in value):
            record = {k: to_tree(v) for k, v in value.items()}
            if TAG_KEY in record:
                return _tagged(TAG_OBJECT, record)
            return record
        entries = [[to_tree(k), to_tree(v)] for k, v in value.items()]
        entries.sort(key=lambda entry: _dumps(entry[0]))
        return _tagged(TAG_MAP, entries)

    raise CodecError.unsupported(value)


# ==============================================================================
# Decoding
# ==============================================================================

def decode(data: Union[str, bytes]) -> Any:
    """Decode canonical text back into a value."""
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(ErrorCode.INVALID_JSON, f"Invalid UTF-8: {e}") from e
    elif not isinstance(data, str):
        raise CodecError.unsupported(data)

    try:
        try:
            tree = json.loads(data, parse_constant=_reject_constant)
        except ValueError as e:
            raise CodecError(ErrorCode.INVALID_JSON, f"Invalid JSON: {e}") from e
        return from_tree(tree)
    except RecursionError as e:
        raise CodecError.malformed("input nested too deeply") from e


def _reject_constant(name: str):
    raise CodecError.malformed(f"bare {name} is not canonical")


def from_tree(tree: JSONValue) -> Any:
    """Convert a tagged JSON tree back into a value."""
    if tree is None or isinstance(tree, (bool, str, float)):
        return tree

    if isinstance(tree, int):
        # Canonical output never has bare integers
        raise CodecError.malformed("untagged integer")

    if isinstance(tree, list):
        return [from_tree(item) for item in tree]

    if isinstance(tree, dict):
        if TAG_KEY not in tree:
            return {k: from_tree(v) for k, v in tree.items()}
        return _decode_tagged(tree)

    raise CodecError.malformed(f"unexpected JSON node {type(tree).__name__}")


def _decode_tagged(node: dict) -> Any:
    tag = node[TAG_KEY]
    if not isinstance(tag, str):
        raise CodecError.unknown_tag(tag)

    extra = set(node) - {TAG_KEY, VALUE_KEY}
    if extra:
        raise CodecError.malformed(f"unexpected keys in {tag}: {sorted(extra)}")

    if tag in _CONSTANTS:
        if VALUE_KEY in node:
            raise CodecError.malformed(f"{tag} takes no value")
        return _CONSTANTS[tag]

    if VALUE_KEY not in node:
        raise CodecError.malformed(f"{tag} without value")
    payload = node[VALUE_KEY]

    if tag in TYPED_ARRAY_TYPECODES:
        return _decode_typed_array(tag, payload)

    decoder = _DECODERS.get(tag)
    if decoder is None:
        raise CodecError.unknown_tag(tag)

    try:
        return decoder(payload)
    except CodecError:
        raise
    except (TypeError, ValueError, re.error) as e:
        raise CodecError.malformed(f"{tag}: {e}") from e


def _expect(payload: Any, kind: type, tag: str) -> Any:
    if not isinstance(payload, kind):
        raise CodecError.malformed(f"{tag} payload must be {kind.__name__}")
    return payload


def _decode_bigint(payload: Any) -> int:
    text = _expect(payload, str, TAG_BIGINT)
    if not re.fullmatch(r"-?[0-9]+", text):
        raise CodecError.malformed(f"BigInt digits expected: {text!r}")
    return int(text)


def _decode_date(payload: Any) -> datetime:
    return datetime.fromisoformat(_expect(payload, str, TAG_DATE))


def _decode_regexp(payload: Any) -> re.Pattern:
    fields = _expect(payload, dict, TAG_REGEXP)
    source, flags = fields.get("source"), fields.get("flags")
    if set(fields) != {"source", "flags"} or not isinstance(source, str) \
            or not isinstance(flags, int) or isinstance(flags, bool):
        raise CodecError.malformed("RegExp payload needs source and flags")
    return re.compile(source, flags)


def _decode_typed_array(tag: str, payload: Any) -> array.array:
    raw = base64_to_bytes(_expect(payload, str, tag))
    typecode = TYPED_ARRAY_TYPECODES[tag]
    result = array.array(typecode)
    if len(raw) % result.itemsize:
        raise CodecError.malformed(f"{tag} length {len(raw)} not a multiple of {result.itemsize}")
    result.frombytes(raw)
    if sys.byteorder != "little":
        result.byteswap()
    return result


def _decode_map(payload: Any) -> dict:
    result = {}
    for entry in _expect(payload, list, TAG_MAP):
        if not isinstance(entry, list) or len(entry) != 2:
            raise CodecError.malformed("Map entries must be [key, value] pairs")
        key = from_tree(entry[0])
        if key in result:
            raise CodecError.malformed(f"duplicate Map key {key!r}")
        result[key] = from_tree(entry[1])
    return result


def _decode_set(payload: Any) -> set:
    items = [from_tree(item) for item in _expect(payload, list, TAG_SET)]
    result = set(items)
    if len(result) != len(items):
        raise CodecError.malformed("duplicate Set element")
    return result


def _decode_object(payload: Any) -> dict:
    record = _expect(payload, dict, TAG_OBJECT)
    return {k: from_tree(v) for k, v in record.items()}


_CONSTANTS: Dict[str, float] = {
    TAG_NAN: math.nan,
    TAG_INFINITY: math.inf,
    TAG_NEG_INFINITY: -math.inf,
}

_DECODERS: Dict[str, Callable[[Any], Any]] = {
    TAG_BIGINT: _decode_bigint,
    TAG_DATE: _decode_date,
    TAG_REGEXP: _decode_regexp,
    TAG_BYTES: lambda payload: base64_to_bytes(_expect(payload, str, TAG_BYTES)),
    TAG_BYTEARRAY: lambda payload: bytearray(base64_to_bytes(_expect(payload, str, TAG_BYTEARRAY))),
    TAG_MAP: _decode_map,
    TAG_SET: _decode_set,
    TAG_FROZENSET: lambda payload: frozenset(_decode_set(payload)),
    TAG_TUPLE: lambda payload: tuple(from_tree(item) for item in _expect(payload, list, TAG_TUPLE)),
    TAG_OBJECT: _decode_object,
}
