"""
Unity Ledger Hash Tests
"""

import hashlib

import pytest

from unity.constants import DEFAULT_P, TEST_P
from unity.crypto import hash as unity_hash
from unity.crypto.hash import sha256, sha256_hex, sha256_int, hash_to_field
from unity.errors import CodecError


class TestSHA256:
    """Tests for SHA-256 helpers."""

    def test_raw_bytes(self):
        assert sha256(b"abc") == hashlib.sha256(b"abc").digest()

    def test_hex_over_canonical_encoding(self):
        assert sha256_hex("abc") == hashlib.sha256(b'"abc"').hexdigest()
        assert sha256_hex(5) == hashlib.sha256(b'{"type":"BigInt","value":"5"}').hexdigest()

    def test_int_is_big_endian_digest(self):
        assert sha256_int("abc") == int(sha256_hex("abc"), 16)

    def test_key_order_irrelevant(self):
        assert sha256_hex({"a": 1, "b": 2}) == sha256_hex({"b": 2, "a": 1})

    def test_unencodable(self):
        with pytest.raises(CodecError):
            sha256_hex(object())


class TestHashToField:
    """Tests for hash_to_field."""

    @pytest.mark.parametrize("value", ["", "abc", 0, 12345, [1, 2], {"k": b"v"}])
    @pytest.mark.parametrize("modulus", [TEST_P, DEFAULT_P, 7])
    def test_range(self, value, modulus):
        h = hash_to_field(value, modulus)
        assert 1 <= h < modulus

    def test_deterministic(self):
        assert hash_to_field({"x": 1}, TEST_P) == hash_to_field({"x": 1}, TEST_P)

    def test_distinct_inputs(self):
        assert hash_to_field("a", DEFAULT_P) != hash_to_field("b", DEFAULT_P)

    def test_int_and_string_differ(self):
        assert hash_to_field(1, DEFAULT_P) != hash_to_field("1", DEFAULT_P)

    def test_zero_residue_maps_to_one(self, monkeypatch):
        monkeypatch.setattr(unity_hash, "sha256_int", lambda value: 5 * TEST_P)
        assert hash_to_field("anything", TEST_P) == 1
