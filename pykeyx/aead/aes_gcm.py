from __future__ import annotations

import secrets
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, final

from pykeyx.core.cryptography import AES_GCM_KEY_SIZES, AesGcm, CordAesGcm
from pykeyx.core.key_manager import KeyFactory, KeyTypeManager
from pykeyx.core.protocols import Aead, CordAead
from pykeyx.exceptions import InvalidKeyFormatError, UnsupportedKeyParametersError
from pykeyx.models.keys import (
    TYPE_URL_PREFIX,
    AesGcmKey,
    AesGcmKeyFormat,
    KeyMaterialType,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pykeyx.core.protocols import PrimitiveFactory

__all__ = ["AesGcmKeyManager"]

TYPE_URL: Final[str] = TYPE_URL_PREFIX + "google.crypto.tink.AesGcmKey"


@final
class AesGcmAeadFactory:
    primitive_class = Aead

    def __call__(self, key: AesGcmKey) -> AesGcm:
        return AesGcm(key.key_value)


@final
class CordAesGcmFactory:
    primitive_class = CordAead

    def __call__(self, key: AesGcmKey) -> CordAesGcm:
        return CordAesGcm(key.key_value)


@final
class AesGcmKeyFactory(KeyFactory[AesGcmKeyFormat, AesGcmKey]):
    format_class = AesGcmKeyFormat

    def __init__(self, version: int) -> None:
        self._version = version

    def validate_key_format(self, key_format: AesGcmKeyFormat) -> None:
        if key_format.key_size not in AES_GCM_KEY_SIZES:
            msg = f"AES-GCM key size must be one of {AES_GCM_KEY_SIZES}, got {key_format.key_size}"
            raise InvalidKeyFormatError(msg)

    def create_key(self, key_format: AesGcmKeyFormat) -> AesGcmKey:
        return AesGcmKey(
            version=self._version,
            key_value=secrets.token_bytes(key_format.key_size),
        )


@final
class AesGcmKeyManager(KeyTypeManager[AesGcmKey]):
    """AES-GCM keys; builds both one-shot and cord Aead primitives."""

    key_class = AesGcmKey
    key_type = TYPE_URL
    version = 0
    key_material_type = KeyMaterialType.SYMMETRIC

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: Mapping[type, PrimitiveFactory[object, AesGcmKey]] = MappingProxyType(
            {Aead: AesGcmAeadFactory(), CordAead: CordAesGcmFactory()},
        )

    @property
    def primitive_factories(self) -> Mapping[type, PrimitiveFactory[object, AesGcmKey]]:
        return self._factories

    def key_factory(self) -> AesGcmKeyFactory:
        return AesGcmKeyFactory(self.version)

    def validate_key(self, key: AesGcmKey) -> None:
        super().validate_key(key)
        if len(key.key_value) not in AES_GCM_KEY_SIZES:
            msg = f"AES-GCM key must be one of {AES_GCM_KEY_SIZES} bytes"
            raise UnsupportedKeyParametersError(msg)
