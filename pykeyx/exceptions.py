from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Stable identifiers for every failure the library reports."""

    ALREADY_REGISTERED_INCOMPATIBLE = "AlreadyRegisteredIncompatible"
    ALREADY_REGISTERED_NO_OVERWRITE = "AlreadyRegisteredNoOverwrite"
    UNKNOWN_KEY_TYPE = "UnknownKeyType"
    INVALID_KEY_VERSION = "InvalidKeyVersion"
    UNSUPPORTED_KEY_PARAMETERS = "UnsupportedKeyParameters"
    MALFORMED_KEY_ENCODING = "MalformedKeyEncoding"
    INVALID_KEY_FORMAT = "InvalidKeyFormat"
    UNSUPPORTED_URI = "UnsupportedUri"
    UNSUPPORTED_DEK_TYPE = "UnsupportedDekType"
    INVALID_ARGUMENT = "InvalidArgument"
    KEY_CREATION_NOT_ALLOWED = "KeyCreationNotAllowed"
    UNSUPPORTED_PRIMITIVE = "UnsupportedPrimitive"
    MALFORMED_ENVELOPE = "MalformedEnvelope"
    ENVELOPE_DEK_UNWRAP_FAILED = "EnvelopeDekUnwrapFailed"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    INPUT_TOO_SHORT = "InputTooShort"
    ENCRYPTION_FAILED = "EncryptionFailed"


class PyKeyXError(Exception):
    """Base class for all pykeyx exceptions"""

    kind: ClassVar[ErrorKind]


# Operator / programmer errors, raised before any secret is touched


class ConfigurationError(PyKeyXError):
    """Invalid configuration, registration or template"""


class AlreadyRegisteredError(ConfigurationError):
    """A key manager or KMS client is already registered"""


class AlreadyRegisteredIncompatibleError(AlreadyRegisteredError):
    """Registration would replace an entry with an incompatible one"""

    kind = ErrorKind.ALREADY_REGISTERED_INCOMPATIBLE


class AlreadyRegisteredNoOverwriteError(AlreadyRegisteredError):
    """Registration of an existing entry without overwrite consent"""

    kind = ErrorKind.ALREADY_REGISTERED_NO_OVERWRITE


class UnknownKeyTypeError(ConfigurationError):
    """No key manager is registered for the key type"""

    kind = ErrorKind.UNKNOWN_KEY_TYPE


class InvalidKeyFormatError(ConfigurationError):
    """Key format is missing required fields or names an unsupported type"""

    kind = ErrorKind.INVALID_KEY_FORMAT


class UnsupportedDekTypeError(ConfigurationError):
    """DEK template does not name a supported AEAD key type"""

    kind = ErrorKind.UNSUPPORTED_DEK_TYPE


class UnsupportedUriError(ConfigurationError):
    """No KMS client supports the key URI"""

    kind = ErrorKind.UNSUPPORTED_URI


class InvalidArgumentError(ConfigurationError, ValueError):
    """Invalid argument passed to a pure helper"""

    kind = ErrorKind.INVALID_ARGUMENT


class KeyCreationNotAllowedError(ConfigurationError):
    """Key manager was registered with new key creation disabled"""

    kind = ErrorKind.KEY_CREATION_NOT_ALLOWED


class UnsupportedPrimitiveError(ConfigurationError):
    """Key manager cannot build the requested primitive"""

    kind = ErrorKind.UNSUPPORTED_PRIMITIVE


# Runtime, security-relevant failures


class SecurityError(PyKeyXError):
    """Base class for all security-related failures"""


class KeyMaterialError(SecurityError):
    """Stored or parsed key material is unusable"""


class InvalidKeyVersionError(KeyMaterialError):
    """Key version is newer than the manager supports"""

    kind = ErrorKind.INVALID_KEY_VERSION


class UnsupportedKeyParametersError(KeyMaterialError):
    """Key violates type-specific constraints"""

    kind = ErrorKind.UNSUPPORTED_KEY_PARAMETERS


class MalformedKeyEncodingError(KeyMaterialError):
    """Serialized key or key format could not be decoded"""

    kind = ErrorKind.MALFORMED_KEY_ENCODING


class CryptographicError(SecurityError):
    """Cryptographic operation error"""


class MalformedEnvelopeError(CryptographicError):
    """Envelope ciphertext framing is invalid"""

    kind = ErrorKind.MALFORMED_ENVELOPE


class EnvelopeDekUnwrapError(CryptographicError):
    """Remote KEK could not unwrap the DEK"""

    kind = ErrorKind.ENVELOPE_DEK_UNWRAP_FAILED


class AuthenticationError(CryptographicError):
    """Ciphertext or associated data failed authentication"""

    kind = ErrorKind.AUTHENTICATION_FAILED


class InputTooShortError(CryptographicError):
    """Ciphertext is shorter than nonce plus tag"""

    kind = ErrorKind.INPUT_TOO_SHORT


class EncryptionError(CryptographicError):
    """Underlying engine failed to encrypt"""

    kind = ErrorKind.ENCRYPTION_FAILED
