from .cord import Cord
from .cryptography import (
    AES_GCM_KEY_SIZES,
    NONCE_SIZE,
    TAG_SIZE,
    AesGcm,
    ChaCha20Poly1305Aead,
    CordAesGcm,
)
from .envelope import (
    SUPPORTED_DEK_KEY_TYPES,
    KmsEnvelopeAead,
    is_supported_dek_key_type,
)
from .key_manager import KeyFactory, KeyTypeManager, validate_version
from .kms_clients import (
    KmsClientRegistry,
    PrefixKmsClient,
    default_kms_clients,
    register_kms_client,
)
from .protocols import Aead, CordAead, KmsClient, PrimitiveFactory
from .registry import Registry, default_registry, register_key_manager

__all__ = [
    "AES_GCM_KEY_SIZES",
    "NONCE_SIZE",
    "SUPPORTED_DEK_KEY_TYPES",
    "TAG_SIZE",
    "Aead",
    "AesGcm",
    "ChaCha20Poly1305Aead",
    "Cord",
    "CordAead",
    "CordAesGcm",
    "KeyFactory",
    "KeyTypeManager",
    "KmsClient",
    "KmsClientRegistry",
    "KmsEnvelopeAead",
    "PrefixKmsClient",
    "PrimitiveFactory",
    "Registry",
    "default_kms_clients",
    "default_registry",
    "is_supported_dek_key_type",
    "register_key_manager",
    "register_kms_client",
    "validate_version",
]
