"""Envelope encryption under a remotely held key-encrypting key.

Every ``encrypt`` call generates a fresh data-encryption key (DEK), wraps it
with the remote KEK and encrypts the payload locally with the DEK::

    uint32_be(len(encrypted_dek)) || encrypted_dek || local_ciphertext

The wrap step binds empty associated data; the caller's associated data only
authenticates the local ciphertext. Other implementations of this format
rely on both properties, so a wrapped DEK is not tied to any key identifier
and can be moved between envelopes sealed under the same KEK.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final, final

from pykeyx.core.protocols import Aead
from pykeyx.exceptions import (
    EncryptionError,
    EnvelopeDekUnwrapError,
    KeyMaterialError,
    MalformedEnvelopeError,
    UnsupportedDekTypeError,
)
from pykeyx.models.keys import TYPE_URL_PREFIX

if TYPE_CHECKING:
    from pykeyx.core.registry import Registry
    from pykeyx.models.keys import KeyTemplate

__all__ = [
    "LENGTH_PREFIX_SIZE",
    "SUPPORTED_DEK_KEY_TYPES",
    "KmsEnvelopeAead",
    "is_supported_dek_key_type",
]

logger = logging.getLogger(__name__)

LENGTH_PREFIX_SIZE: Final[int] = 4
MAX_ENCRYPTED_DEK_SIZE: Final[int] = 2**31 - 1
_EMPTY_ASSOCIATED_DATA: Final[bytes] = b""

SUPPORTED_DEK_KEY_TYPES: Final[frozenset[str]] = frozenset(
    TYPE_URL_PREFIX + name
    for name in (
        "google.crypto.tink.AesCtrHmacAeadKey",
        "google.crypto.tink.AesEaxKey",
        "google.crypto.tink.AesGcmKey",
        "google.crypto.tink.AesGcmSivKey",
        "google.crypto.tink.ChaCha20Poly1305Key",
        "google.crypto.tink.XChaCha20Poly1305Key",
    )
)


def is_supported_dek_key_type(type_url: str) -> bool:
    """Whether ``type_url`` names a native AEAD key type usable as a DEK."""
    return type_url in SUPPORTED_DEK_KEY_TYPES


@final
class KmsEnvelopeAead:
    """Aead combining a per-message local DEK with a remote KEK.

    Args:
        dek_template: Template of the DEK generated for every message
        remote: Aead bound to the KEK by a KMS client
        registry: Registry used to create DEKs and their primitives
    """

    __slots__ = ("_dek_template", "_registry", "_remote")

    def __init__(self, dek_template: KeyTemplate, remote: Aead, *, registry: Registry) -> None:
        if not is_supported_dek_key_type(dek_template.type_url):
            msg = (
                f"Unsupported DEK key type: {dek_template.type_url}. "
                "Only native AEAD key types are supported."
            )
            raise UnsupportedDekTypeError(msg)
        self._dek_template = dek_template
        self._remote = remote
        self._registry = registry

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        dek = self._registry.new_key_data(self._dek_template)
        local = self._registry.get_primitive(dek, Aead)

        try:
            encrypted_dek = self._remote.encrypt(dek.value, _EMPTY_ASSOCIATED_DATA)
        except Exception as e:
            msg = "Remote KEK failed to wrap the DEK"
            raise EncryptionError(msg) from e
        if not 0 < len(encrypted_dek) <= MAX_ENCRYPTED_DEK_SIZE:
            msg = f"Remote KEK returned an encrypted DEK of invalid size {len(encrypted_dek)}"
            raise EncryptionError(msg)

        payload = local.encrypt(plaintext, associated_data)
        return (
            len(encrypted_dek).to_bytes(LENGTH_PREFIX_SIZE, "big")
            + encrypted_dek
            + payload
        )

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        if len(ciphertext) < LENGTH_PREFIX_SIZE:
            msg = "Envelope ciphertext too short"
            raise MalformedEnvelopeError(msg)

        encrypted_dek_size = int.from_bytes(ciphertext[:LENGTH_PREFIX_SIZE], "big", signed=True)
        if not 0 < encrypted_dek_size <= len(ciphertext) - LENGTH_PREFIX_SIZE:
            msg = "Invalid encrypted DEK length in envelope"
            raise MalformedEnvelopeError(msg)

        dek_end = LENGTH_PREFIX_SIZE + encrypted_dek_size
        encrypted_dek = ciphertext[LENGTH_PREFIX_SIZE:dek_end]
        payload = ciphertext[dek_end:]

        local = self._unwrap(encrypted_dek)
        return local.decrypt(payload, associated_data)

    def _unwrap(self, encrypted_dek: bytes) -> Aead:
        """Recover the DEK through the remote KEK and rebuild its Aead."""
        try:
            dek_value = self._remote.decrypt(encrypted_dek, _EMPTY_ASSOCIATED_DATA)
        except Exception as e:
            logger.warning("DEK unwrap failed: %s", type(e).__name__)
            msg = "Remote KEK failed to unwrap the DEK"
            raise EnvelopeDekUnwrapError(msg) from e

        manager = self._registry.get_manager(self._dek_template.type_url)
        try:
            dek = manager.parse_key(dek_value)
            return manager.get_primitive(dek, Aead)
        except KeyMaterialError as e:
            logger.warning("Unwrapped DEK is unusable: %s", e.kind)
            msg = "Unwrapped DEK is not a valid key of the template type"
            raise EnvelopeDekUnwrapError(msg) from e
