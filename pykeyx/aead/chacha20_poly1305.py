from __future__ import annotations

import secrets
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, final

from pykeyx.core.cryptography import CHACHA20_POLY1305_KEY_SIZE, ChaCha20Poly1305Aead
from pykeyx.core.key_manager import KeyFactory, KeyTypeManager
from pykeyx.core.protocols import Aead
from pykeyx.exceptions import UnsupportedKeyParametersError
from pykeyx.models.keys import (
    TYPE_URL_PREFIX,
    ChaCha20Poly1305Key,
    ChaCha20Poly1305KeyFormat,
    KeyMaterialType,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pykeyx.core.protocols import PrimitiveFactory

__all__ = ["ChaCha20Poly1305KeyManager"]

TYPE_URL: Final[str] = TYPE_URL_PREFIX + "google.crypto.tink.ChaCha20Poly1305Key"


@final
class ChaCha20Poly1305AeadFactory:
    primitive_class = Aead

    def __call__(self, key: ChaCha20Poly1305Key) -> ChaCha20Poly1305Aead:
        return ChaCha20Poly1305Aead(key.key_value)


@final
class ChaCha20Poly1305KeyFactory(
    KeyFactory[ChaCha20Poly1305KeyFormat, ChaCha20Poly1305Key],
):
    format_class = ChaCha20Poly1305KeyFormat

    def __init__(self, version: int) -> None:
        self._version = version

    def validate_key_format(self, key_format: ChaCha20Poly1305KeyFormat) -> None:
        # The format carries no parameters
        return

    def create_key(self, key_format: ChaCha20Poly1305KeyFormat) -> ChaCha20Poly1305Key:
        return ChaCha20Poly1305Key(
            version=self._version,
            key_value=secrets.token_bytes(CHACHA20_POLY1305_KEY_SIZE),
        )


@final
class ChaCha20Poly1305KeyManager(KeyTypeManager[ChaCha20Poly1305Key]):
    key_class = ChaCha20Poly1305Key
    key_type = TYPE_URL
    version = 0
    key_material_type = KeyMaterialType.SYMMETRIC

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: Mapping[type, PrimitiveFactory[object, ChaCha20Poly1305Key]] = (
            MappingProxyType({Aead: ChaCha20Poly1305AeadFactory()})
        )

    @property
    def primitive_factories(
        self,
    ) -> Mapping[type, PrimitiveFactory[object, ChaCha20Poly1305Key]]:
        return self._factories

    def key_factory(self) -> ChaCha20Poly1305KeyFactory:
        return ChaCha20Poly1305KeyFactory(self.version)

    def validate_key(self, key: ChaCha20Poly1305Key) -> None:
        super().validate_key(key)
        if len(key.key_value) != CHACHA20_POLY1305_KEY_SIZE:
            msg = f"ChaCha20-Poly1305 key must be {CHACHA20_POLY1305_KEY_SIZE} bytes"
            raise UnsupportedKeyParametersError(msg)
