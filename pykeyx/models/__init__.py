from .keys import (
    MAX_KEY_VERSION,
    TYPE_URL_PREFIX,
    AesGcmKey,
    AesGcmKeyFormat,
    ChaCha20Poly1305Key,
    ChaCha20Poly1305KeyFormat,
    KeyData,
    KeyMaterialType,
    KeyTemplate,
    KmsEnvelopeAeadKey,
    KmsEnvelopeAeadKeyFormat,
    OutputPrefixType,
    WireModel,
)

__all__ = [
    "MAX_KEY_VERSION",
    "TYPE_URL_PREFIX",
    "AesGcmKey",
    "AesGcmKeyFormat",
    "ChaCha20Poly1305Key",
    "ChaCha20Poly1305KeyFormat",
    "KeyData",
    "KeyMaterialType",
    "KeyTemplate",
    "KmsEnvelopeAeadKey",
    "KmsEnvelopeAeadKeyFormat",
    "OutputPrefixType",
    "WireModel",
]
