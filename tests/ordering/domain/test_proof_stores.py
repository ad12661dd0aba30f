"""Tests for the proof store adapters and factory."""

import pytest
from ordering.config import Settings
from ordering.proof import build_proof_store
from ordering.proof.filesystem_adapter import FilesystemProofStore
from ordering.proof.memory_adapter import InMemoryProofStore

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


class TestFilesystemProofStore:
    def test_put_then_get(self, tmp_path):
        store = FilesystemProofStore(tmp_path / "proofs")

        key = store.put("ord-1-1767630000000.png", PNG_BYTES, "image/png")

        proof = store.get(key)
        assert proof.key == "ord-1-1767630000000.png"
        assert proof.data == PNG_BYTES
        assert proof.content_type == "image/png"

    def test_mime_type_is_kept_in_sidecar_file(self, tmp_path):
        store = FilesystemProofStore(tmp_path)

        store.put("ord-1-1.jpg", b"jpeg", "image/jpeg")

        assert (tmp_path / "ord-1-1.jpg").read_bytes() == b"jpeg"
        assert (tmp_path / "ord-1-1.jpg.type").read_text(encoding="utf-8") == "image/jpeg"

    def test_missing_sidecar_falls_back_to_octet_stream(self, tmp_path):
        (tmp_path / "legacy.bin").write_bytes(b"data")

        assert FilesystemProofStore(tmp_path).get("legacy.bin").content_type == "application/octet-stream"

    def test_unknown_key(self, tmp_path):
        assert FilesystemProofStore(tmp_path).get("nope.png") is None

    @pytest.mark.parametrize("key", ["../escape.png", "nested/dir.png", "/etc/passwd"])
    def test_keys_cannot_leave_the_directory(self, tmp_path, key):
        store = FilesystemProofStore(tmp_path / "proofs")

        with pytest.raises(ValueError, match="escapes the store directory"):
            store.put(key, PNG_BYTES, "image/png")
        assert not (tmp_path / "escape.png").exists()


class TestInMemoryProofStore:
    def test_configured_failure_raises_os_error(self):
        store = InMemoryProofStore()
        store.configure(should_succeed=False, failure_reason="bucket offline")

        with pytest.raises(OSError, match="bucket offline"):
            store.put("k.png", PNG_BYTES, "image/png")
        assert store.proofs == {}


class TestBuildProofStore:
    def test_memory_by_default(self):
        assert isinstance(build_proof_store(Settings()), InMemoryProofStore)

    def test_filesystem_when_configured(self, tmp_path):
        store = build_proof_store(Settings(proof_backend="filesystem", proof_dir=str(tmp_path)))

        assert isinstance(store, FilesystemProofStore)
        assert store.directory == tmp_path
