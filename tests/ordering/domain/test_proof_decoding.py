"""Tests for proof image decoding and storage key derivation."""

import base64

import pytest
from ordering.proof.datauri import (
    DEFAULT_MIME,
    decode_data_uri,
    extension_for,
    proof_key,
    sanitize_identifier,
)
from protean.exceptions import ValidationError

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


class TestDecodeDataUri:
    def test_tagged_data_uri(self):
        value = "data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode()
        assert decode_data_uri(value) == ("image/jpeg", b"jpeg-bytes")

    def test_bare_base64_defaults_to_png(self):
        mime, data = decode_data_uri(base64.b64encode(PNG_BYTES).decode())
        assert mime == DEFAULT_MIME
        assert data == PNG_BYTES

    def test_malformed_tag_defaults_to_png(self):
        mime, _ = decode_data_uri("data:text/plain;base64,aGVsbG8=")
        assert mime == "image/png"

    def test_garbage_never_raises(self):
        mime, data = decode_data_uri("plainstring")
        assert mime == "image/png"
        assert isinstance(data, bytes)

    def test_missing_padding_is_tolerated(self):
        assert decode_data_uri("data:image/png;base64,aGVsbG8")[1] == b"hello"


class TestProofKey:
    def test_key_format(self):
        assert proof_key("abc-123", 1700000000000, "image/png") == "abc-123-1700000000000.png"

    def test_jpeg_uses_jpg_extension(self):
        assert extension_for("image/jpeg") == "jpg"
        assert extension_for("image/svg+xml") == "svg"

    def test_identifier_is_sanitized(self):
        assert sanitize_identifier("../etc/passwd") == "etcpasswd"
        assert proof_key("a/b c", 1, "image/gif") == "abc-1.gif"

    def test_same_inputs_same_key(self):
        assert proof_key("id", 42, "image/webp") == proof_key("id", 42, "image/webp")

    def test_unsafe_only_identifier_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            proof_key("../", 1, "image/png")
        assert "orderId" in exc.value.messages
