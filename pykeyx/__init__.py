__version__ = "1.0.0"
__license__ = "MIT"

import logging

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    CryptographicError,
    EnvelopeDekUnwrapError,
    ErrorKind,
    KeyMaterialError,
    MalformedEnvelopeError,
    PyKeyXError,
    SecurityError,
)
from .config import PyKeyXConfig
from .core import (
    Aead,
    Cord,
    CordAead,
    KmsClient,
    PrefixKmsClient,
    Registry,
    register_key_manager,
    register_kms_client,
)
from .facade import PyKeyX
from .models import KeyData, KeyMaterialType, KeyTemplate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Aead",
    "AuthenticationError",
    "ConfigurationError",
    "Cord",
    "CordAead",
    "CryptographicError",
    "EnvelopeDekUnwrapError",
    "ErrorKind",
    "KeyData",
    "KeyMaterialError",
    "KeyMaterialType",
    "KeyTemplate",
    "KmsClient",
    "MalformedEnvelopeError",
    "PrefixKmsClient",
    "PyKeyX",
    "PyKeyXConfig",
    "PyKeyXError",
    "Registry",
    "SecurityError",
    "register_key_manager",
    "register_kms_client",
]
