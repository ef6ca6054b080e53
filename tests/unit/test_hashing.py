"""
Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- sha256 / digest_hex agree with hashlib
- to_hex/from_hex round trip and error cases
- hash_concat hashes raw digest bytes, not hex text
- is_digest_hex accepts only lowercase 64-char hex
"""
import hashlib
import pytest

from core.crypto.hashing import (
    DIGEST_HEX_LENGTH,
    sha256,
    digest_hex,
    to_hex,
    from_hex,
    is_digest_hex,
    hash_concat,
)


class TestSha256:
    """Tests for sha256() function."""

    def test_sha256_known_value(self):
        """Test sha256 produces correct hash for known input."""
        expected = hashlib.sha256(b"hello").digest()
        result = sha256(b"hello")

        assert result == expected
        assert len(result) == 32

    def test_sha256_empty_bytes(self):
        """Test sha256 of empty bytes."""
        assert sha256(b"") == hashlib.sha256(b"").digest()

    def test_sha256_different_inputs_different_outputs(self):
        """Test different inputs produce different hashes."""
        assert sha256(b"input1") != sha256(b"input2")


class TestDigestHex:
    """Tests for digest_hex() leaf hashing."""

    def test_digest_hex_matches_hexdigest(self):
        """digest_hex is the lowercase hexdigest."""
        assert digest_hex(b"hello") == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_digest_hex_length(self):
        """Digest is always 64 hex characters."""
        assert len(digest_hex(b"x" * 1000)) == DIGEST_HEX_LENGTH


class TestHexConversion:
    """Tests for to_hex/from_hex."""

    def test_round_trip(self):
        """from_hex(to_hex(x)) == x."""
        data = bytes(range(256))
        assert from_hex(to_hex(data)) == data

    def test_to_hex_lowercase(self):
        """to_hex renders lowercase without prefix."""
        assert to_hex(b"\xab\xcd") == "abcd"

    def test_from_hex_odd_length_raises(self):
        """Odd-length hex strings are rejected."""
        with pytest.raises(ValueError, match="even length"):
            from_hex("abc")

    def test_from_hex_invalid_chars_raises(self):
        """Non-hex characters are rejected."""
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("zz")


class TestHashConcat:
    """Tests for hash_concat() parent hashing."""

    def test_hash_concat_uses_raw_digests(self):
        """Parent = sha256(raw(left) + raw(right))."""
        left = digest_hex(b"a")
        right = digest_hex(b"b")
        expected = hashlib.sha256(bytes.fromhex(left) + bytes.fromhex(right)).hexdigest()

        assert hash_concat(left, right) == expected

    def test_hash_concat_not_hex_text(self):
        """Hashing the hex text would give a different parent."""
        left = digest_hex(b"a")
        right = digest_hex(b"b")
        text_hash = hashlib.sha256((left + right).encode()).hexdigest()

        assert hash_concat(left, right) != text_hash

    def test_hash_concat_order_matters(self):
        """Swapping children changes the parent."""
        left = digest_hex(b"a")
        right = digest_hex(b"b")

        assert hash_concat(left, right) != hash_concat(right, left)


class TestIsDigestHex:
    """Tests for is_digest_hex()."""

    def test_accepts_digest(self):
        assert is_digest_hex(digest_hex(b"x"))

    @pytest.mark.parametrize("value", [
        "",
        "abc",
        digest_hex(b"x").upper(),
        digest_hex(b"x") + "00",
        "g" * 64,
        None,
        123,
    ])
    def test_rejects_non_digests(self, value):
        assert not is_digest_hex(value)
