"""Proof store backed by a local directory.

Each proof is written as ``<key>`` with a ``<key>.type`` sidecar holding
its MIME type.
"""

from pathlib import Path

from ordering.proof.port import ProofStore, StoredProof

_TYPE_SUFFIX = ".type"


class FilesystemProofStore(ProofStore):
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        path = (self.directory / key).resolve()
        if path.parent != self.directory.resolve():
            raise ValueError(f"Proof key escapes the store directory: {key!r}")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        path.write_bytes(data)
        path.with_name(path.name + _TYPE_SUFFIX).write_text(content_type, encoding="utf-8")
        return key

    def get(self, key: str) -> StoredProof | None:
        path = self._path(key)
        if not path.is_file():
            return None
        type_path = path.with_name(path.name + _TYPE_SUFFIX)
        content_type = type_path.read_text(encoding="utf-8") if type_path.is_file() else "application/octet-stream"
        return StoredProof(key=key, content_type=content_type, data=path.read_bytes())
