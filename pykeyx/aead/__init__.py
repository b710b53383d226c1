"""Built-in AEAD key managers.

Call :func:`register` once at process start, before the first primitive is
requested. Custom managers are registered afterwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pykeyx.core.registry import default_registry

from . import kms_envelope
from .aes_gcm import AesGcmKeyManager
from .chacha20_poly1305 import ChaCha20Poly1305KeyManager
from .kms_envelope import KmsEnvelopeAeadKeyManager, create_key_template
from .templates import (
    AES128_GCM,
    AES256_GCM,
    CHACHA20_POLY1305,
    TEMPLATES,
    create_aes_gcm_key_template,
)

if TYPE_CHECKING:
    from pykeyx.core.kms_clients import KmsClientRegistry
    from pykeyx.core.registry import Registry

__all__ = [
    "AES128_GCM",
    "AES256_GCM",
    "CHACHA20_POLY1305",
    "TEMPLATES",
    "AesGcmKeyManager",
    "ChaCha20Poly1305KeyManager",
    "KmsEnvelopeAeadKeyManager",
    "create_aes_gcm_key_template",
    "create_key_template",
    "register",
]


def register(
    registry: Registry | None = None,
    kms_clients: KmsClientRegistry | None = None,
    *,
    allow_overwrite: bool = False,
    new_key_allowed: bool = True,
) -> None:
    """Register AES-GCM, ChaCha20-Poly1305 and KMS envelope key managers."""
    if registry is None:
        registry = default_registry()
    for manager in (AesGcmKeyManager(), ChaCha20Poly1305KeyManager()):
        registry.register_key_manager(
            manager,
            allow_overwrite,
            new_key_allowed=new_key_allowed,
        )
    kms_envelope.register(
        registry,
        kms_clients,
        allow_overwrite=allow_overwrite,
        new_key_allowed=new_key_allowed,
    )
