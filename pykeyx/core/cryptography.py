from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, ClassVar, Final, final

from cryptography.exceptions import InternalError, InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from pykeyx.core.cord import Cord
from pykeyx.exceptions import (
    AuthenticationError,
    EncryptionError,
    InputTooShortError,
    UnsupportedKeyParametersError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "AES_GCM_KEY_SIZES",
    "CHACHA20_POLY1305_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AesGcm",
    "ChaCha20Poly1305Aead",
    "CordAesGcm",
]

NONCE_SIZE: Final[int] = 12
TAG_SIZE: Final[int] = 16
AES_GCM_KEY_SIZES: Final[tuple[int, ...]] = (16, 32)
CHACHA20_POLY1305_KEY_SIZE: Final[int] = 32

_ENGINE_ERRORS: Final = (OverflowError, ValueError, InternalError)


def _check_ciphertext_size(size: int) -> None:
    if size < NONCE_SIZE + TAG_SIZE:
        msg = f"Ciphertext too short: {size} bytes (minimum {NONCE_SIZE + TAG_SIZE})"
        raise InputTooShortError(msg)


class _RandomNonceAead:
    """One-shot AEAD producing ``nonce(12) || body || tag(16)``."""

    __slots__ = ("_engine",)

    ALGORITHM: ClassVar[str]
    KEY_SIZES: ClassVar[tuple[int, ...]]
    _ENGINE: ClassVar[Callable[[bytes], AESGCM | ChaCha20Poly1305]]

    def __init__(self, key: bytes) -> None:
        if len(key) not in self.KEY_SIZES:
            msg = f"{self.ALGORITHM} requires a key of {self.KEY_SIZES} bytes"
            raise UnsupportedKeyParametersError(msg)
        self._engine = type(self)._ENGINE(key)

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        """Encrypt under a fresh random nonce."""
        nonce = secrets.token_bytes(NONCE_SIZE)
        try:
            return nonce + self._engine.encrypt(nonce, plaintext, associated_data)
        except _ENGINE_ERRORS as e:
            msg = f"{self.ALGORITHM} encryption failed"
            raise EncryptionError(msg) from e

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        """Verify the tag and decrypt."""
        _check_ciphertext_size(len(ciphertext))
        nonce, body = ciphertext[:NONCE_SIZE], ciphertext[NONCE_SIZE:]
        try:
            return self._engine.decrypt(nonce, body, associated_data)
        except InvalidTag as e:
            msg = f"{self.ALGORITHM} authentication failed"
            raise AuthenticationError(msg) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


@final
class AesGcm(_RandomNonceAead):
    """AES-GCM with 128 or 256-bit keys."""

    __slots__ = ()

    ALGORITHM = "AES-GCM"
    KEY_SIZES = AES_GCM_KEY_SIZES
    _ENGINE = AESGCM


@final
class ChaCha20Poly1305Aead(_RandomNonceAead):
    """ChaCha20-Poly1305 (RFC 8439) with a 256-bit key."""

    __slots__ = ()

    ALGORITHM = "ChaCha20-Poly1305"
    KEY_SIZES = (CHACHA20_POLY1305_KEY_SIZE,)
    _ENGINE = ChaCha20Poly1305


def _as_cord(value: Cord | bytes) -> Cord:
    return value if isinstance(value, Cord) else Cord.from_bytes(value)


@final
class CordAesGcm:
    """AES-GCM over cords, wire compatible with :class:`AesGcm`.

    Associated data and payload are fed chunk by chunk into a single GCM
    context, so neither side of the operation joins the input.
    """

    __slots__ = ("_key",)

    def __init__(self, key: bytes) -> None:
        if len(key) not in AES_GCM_KEY_SIZES:
            msg = f"AES-GCM requires a key of {AES_GCM_KEY_SIZES} bytes"
            raise UnsupportedKeyParametersError(msg)
        self._key = key

    def encrypt(self, plaintext: Cord | bytes, associated_data: Cord | bytes) -> Cord:
        nonce = secrets.token_bytes(NONCE_SIZE)
        encryptor = Cipher(algorithms.AES(self._key), modes.GCM(nonce)).encryptor()

        out = [nonce]
        try:
            for chunk in _as_cord(associated_data):
                encryptor.authenticate_additional_data(chunk)
            out.extend(encryptor.update(chunk) for chunk in _as_cord(plaintext))
            out.append(encryptor.finalize())
        except _ENGINE_ERRORS as e:
            msg = "AES-GCM encryption failed"
            raise EncryptionError(msg) from e
        out.append(encryptor.tag)
        return Cord(out)

    def decrypt(self, ciphertext: Cord | bytes, associated_data: Cord | bytes) -> Cord:
        ciphertext = _as_cord(ciphertext)
        _check_ciphertext_size(len(ciphertext))

        nonce, rest = ciphertext.split(NONCE_SIZE)
        body, tag = rest.split(len(rest) - TAG_SIZE)
        decryptor = Cipher(
            algorithms.AES(self._key),
            modes.GCM(bytes(nonce), bytes(tag)),
        ).decryptor()

        for chunk in _as_cord(associated_data):
            decryptor.authenticate_additional_data(chunk)
        # Plaintext is only released once finalize() has verified the tag
        out = [decryptor.update(chunk) for chunk in body]
        try:
            out.append(decryptor.finalize())
        except InvalidTag as e:
            msg = "AES-GCM authentication failed"
            raise AuthenticationError(msg) from e
        return Cord(out)

    def __repr__(self) -> str:
        return "CordAesGcm()"
