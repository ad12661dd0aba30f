"""Proof Store port (abstract interface).

Defines the contract for blob storage of payment-proof images. Adapters
return an opaque key the order can reference later.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredProof:
    """A proof image as held by the store."""

    key: str
    content_type: str
    data: bytes


class ProofStore(ABC):
    """Abstract proof-image store."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return the retrieval key."""
        ...

    @abstractmethod
    def get(self, key: str) -> StoredProof | None:
        """Return the stored proof, or None when the key is unknown."""
        ...
