from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .cord import Cord

__all__ = ("Aead", "CordAead", "KmsClient", "PrimitiveFactory")

P = TypeVar("P", covariant=True)
K = TypeVar("K", contravariant=True)


@runtime_checkable
class Aead(Protocol):
    """Authenticated encryption with associated data."""

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        """Encrypt ``plaintext`` and bind ``associated_data`` to the result."""
        ...

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        """Authenticate and decrypt ``ciphertext``."""
        ...


@runtime_checkable
class CordAead(Protocol):
    """Aead over chunked byte containers, never flattening the payload."""

    def encrypt(self, plaintext: Cord, associated_data: Cord) -> Cord:
        """Encrypt a chunked plaintext."""
        ...

    def decrypt(self, ciphertext: Cord, associated_data: Cord) -> Cord:
        """Authenticate and decrypt a chunked ciphertext."""
        ...


@runtime_checkable
class KmsClient(Protocol):
    """Client of a remote key-management service."""

    def does_support(self, key_uri: str) -> bool:
        """Whether this client can serve ``key_uri``."""
        ...

    def get_aead(self, key_uri: str) -> Aead:
        """Return an Aead bound to the remote key ``key_uri``."""
        ...


class PrimitiveFactory(Protocol[P, K]):
    """Builds one primitive capability from a validated key."""

    @property
    def primitive_class(self) -> type: ...

    def __call__(self, key: K) -> P: ...
