"""Proof store factory.

Builds the configured implementation:
- InMemoryProofStore for development and testing
- FilesystemProofStore for single-host deployments
"""

from ordering.config import Settings
from ordering.proof.filesystem_adapter import FilesystemProofStore
from ordering.proof.memory_adapter import InMemoryProofStore
from ordering.proof.port import ProofStore


def build_proof_store(settings: Settings) -> ProofStore:
    """Return the proof store selected by ``settings.proof_backend``."""
    if settings.proof_backend == "filesystem":
        return FilesystemProofStore(settings.proof_dir)
    return InMemoryProofStore()
