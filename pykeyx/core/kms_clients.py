from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, final

from pykeyx.exceptions import (
    AlreadyRegisteredIncompatibleError,
    AlreadyRegisteredNoOverwriteError,
    InvalidArgumentError,
    UnsupportedUriError,
)

if TYPE_CHECKING:
    from pykeyx.core.protocols import Aead, KmsClient

__all__ = [
    "KmsClientRegistry",
    "PrefixKmsClient",
    "default_kms_clients",
    "register_kms_client",
]

logger = logging.getLogger(__name__)


class PrefixKmsClient(ABC):
    """KMS client serving every key URI under ``key_uri_prefix``.

    When ``key_uri`` is given the client is bound to that single key and
    supports nothing else.
    """

    __slots__ = ("key_uri", "key_uri_prefix")

    def __init__(self, key_uri_prefix: str, key_uri: str | None = None) -> None:
        if not key_uri_prefix:
            msg = "KMS client requires a non-empty key URI prefix"
            raise InvalidArgumentError(msg)
        if key_uri is not None and not key_uri.startswith(key_uri_prefix):
            msg = f"Key URI must start with {key_uri_prefix!r}"
            raise InvalidArgumentError(msg)
        self.key_uri_prefix = key_uri_prefix
        self.key_uri = key_uri

    def does_support(self, key_uri: str) -> bool:
        if self.key_uri is not None:
            return key_uri == self.key_uri
        return key_uri.startswith(self.key_uri_prefix)

    def get_aead(self, key_uri: str) -> Aead:
        if not self.does_support(key_uri):
            msg = f"{type(self).__name__} does not support key URI {key_uri!r}"
            raise UnsupportedUriError(msg)
        return self._get_aead(key_uri)

    @abstractmethod
    def _get_aead(self, key_uri: str) -> Aead:
        """Return an Aead for a URI this client supports."""


def _identity(client: KmsClient) -> tuple[str, str | None]:
    prefix = getattr(client, "key_uri_prefix", None)
    if not isinstance(prefix, str) or not prefix:
        msg = f"{type(client).__name__} must expose a non-empty key_uri_prefix"
        raise InvalidArgumentError(msg)
    return prefix, getattr(client, "key_uri", None)


@final
class KmsClientRegistry:
    """Ordered set of KMS clients; lookups return the first supporting client.

    Uses the same discipline as the key manager registry: registration is
    add-once, replacing a client with the same prefix needs explicit consent
    and a client of the same class.
    """

    __slots__ = ("_clients", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clients: tuple[KmsClient, ...] = ()

    def register(self, client: KmsClient, *, allow_overwrite: bool = False) -> None:
        """Add ``client``; it must expose a non-empty ``key_uri_prefix``."""
        with self._lock:
            clients = list(self._clients)
            if any(existing is client for existing in clients):
                msg = f"{type(client).__name__} instance is already registered"
                raise AlreadyRegisteredNoOverwriteError(msg)

            identity = _identity(client)
            position = next(
                (i for i, c in enumerate(clients) if _identity(c) == identity),
                None,
            )

            if position is None:
                clients.append(client)
            else:
                existing = clients[position]
                if type(existing) is not type(client):
                    msg = (
                        f"{type(existing).__name__} is registered for the same key URI, "
                        f"cannot replace it with {type(client).__name__}"
                    )
                    raise AlreadyRegisteredIncompatibleError(msg)
                if not allow_overwrite:
                    msg = "A KMS client for the same key URI is already registered"
                    raise AlreadyRegisteredNoOverwriteError(msg)
                clients[position] = client

            self._clients = tuple(clients)

        logger.info("Registered KMS client %s", type(client).__name__)

    def get(self, key_uri: str) -> KmsClient:
        """Return the first registered client that supports ``key_uri``."""
        for client in self._clients:
            if client.does_support(key_uri):
                return client
        msg = f"No KMS client supports key URI {key_uri!r}"
        raise UnsupportedUriError(msg)

    def __len__(self) -> int:
        return len(self._clients)

    def reset(self) -> None:
        """Drop every client. Intended for tests."""
        with self._lock:
            self._clients = ()


_DEFAULT_KMS_CLIENTS = KmsClientRegistry()


def default_kms_clients() -> KmsClientRegistry:
    """The process-wide KMS client registry."""
    return _DEFAULT_KMS_CLIENTS


def register_kms_client(client: KmsClient, *, allow_overwrite: bool = False) -> None:
    _DEFAULT_KMS_CLIENTS.register(client, allow_overwrite=allow_overwrite)
