"""Unit tests for utils.py functions."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from scriptorium.utils import (
    atomic_write,
    base64url_decode,
    base64url_encode,
    hex_to_bytes,
    sha256_hex,
    strip_0x,
    utc_rfc3339,
)


class TestSha256Hex:
    """Tests for sha256_hex function."""

    def test_empty_bytes(self) -> None:
        # SHA256 of empty input
        result = sha256_hex(b"")
        assert result == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_simple_input(self) -> None:
        result = sha256_hex(b"hello")
        assert result == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_returns_lowercase(self) -> None:
        result = sha256_hex(b"test")
        assert result == result.lower()
        assert len(result) == 64


class TestBase64Url:
    """Tests for base64url_encode / base64url_decode."""

    def test_empty(self) -> None:
        assert base64url_encode(b"") == ""
        assert base64url_decode("") == b""

    def test_simple_input(self) -> None:
        assert base64url_encode(b"hello") == "aGVsbG8"
        assert base64url_decode("aGVsbG8") == b"hello"

    def test_no_padding(self) -> None:
        assert "=" not in base64url_encode(b"a")

    def test_handles_missing_padding(self) -> None:
        # "YQ" is "a" without padding (would be "YQ==" with padding)
        assert base64url_decode("YQ") == b"a"

    def test_url_safe_characters(self) -> None:
        # Input that would produce '+' and '/' in standard base64
        result = base64url_encode(bytes([0xFB, 0xFF, 0xFE]))
        assert "+" not in result
        assert "/" not in result


class TestHex:
    def test_strip_0x(self) -> None:
        assert strip_0x("0xabcd") == "abcd"
        assert strip_0x("0XABCD") == "ABCD"
        assert strip_0x("abcd") == "abcd"

    def test_hex_to_bytes(self) -> None:
        assert hex_to_bytes("0x00ff10") == b"\x00\xff\x10"
        assert hex_to_bytes("00ff10") == b"\x00\xff\x10"

    def test_hex_to_bytes_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            hex_to_bytes("0xzz")


class TestTime:
    def test_rfc3339_epoch(self) -> None:
        assert utc_rfc3339(0) == "1970-01-01T00:00:00Z"

    def test_rfc3339_format(self) -> None:
        result = utc_rfc3339(1_700_000_000)
        pattern = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$"
        assert re.match(pattern, result), f"Invalid format: {result}"


class TestAtomicWrite:
    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "dir" / "file.json"
        atomic_write(target, b"{}")
        assert target.read_bytes() == b"{}"

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_bytes(b"old")
        atomic_write(target, b"new")
        assert target.read_bytes() == b"new"
        assert not (tmp_path / "file.json.tmp").exists()
