"""In-memory proof store for development and testing."""

from ordering.proof.port import ProofStore, StoredProof


class InMemoryProofStore(ProofStore):
    """Keeps proofs in a dict; can be told to fail like an unreachable blob service."""

    def __init__(self) -> None:
        self.proofs: dict[str, StoredProof] = {}
        self.should_succeed: bool = True
        self.failure_reason: str = "Blob store unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Blob store unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def put(self, key: str, data: bytes, content_type: str) -> str:
        if not self.should_succeed:
            raise OSError(self.failure_reason)
        self.proofs[key] = StoredProof(key=key, content_type=content_type, data=data)
        return key

    def get(self, key: str) -> StoredProof | None:
        return self.proofs.get(key)
