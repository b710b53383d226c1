"""Key manager for envelope keys backed by a remote KMS.

Envelope keys hold no secret. They point at a key-encrypting key (KEK) by URI
and carry the template of the data-encryption key (DEK) generated for every
message. Creating such a key never contacts the KMS; the KEK is resolved each
time a primitive is requested.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final, final

from pykeyx.core.envelope import KmsEnvelopeAead, is_supported_dek_key_type
from pykeyx.core.key_manager import KeyFactory, KeyTypeManager
from pykeyx.core.kms_clients import default_kms_clients
from pykeyx.core.protocols import Aead
from pykeyx.core.registry import default_registry
from pykeyx.exceptions import (
    InvalidArgumentError,
    InvalidKeyFormatError,
    UnsupportedDekTypeError,
    UnsupportedKeyParametersError,
)
from pykeyx.models.keys import (
    TYPE_URL_PREFIX,
    KeyMaterialType,
    KeyTemplate,
    KmsEnvelopeAeadKey,
    KmsEnvelopeAeadKeyFormat,
    OutputPrefixType,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pykeyx.core.kms_clients import KmsClientRegistry
    from pykeyx.core.protocols import PrimitiveFactory
    from pykeyx.core.registry import Registry

__all__ = [
    "KmsEnvelopeAeadKeyManager",
    "create_key_format",
    "create_key_template",
    "register",
]

TYPE_URL: Final[str] = TYPE_URL_PREFIX + "google.crypto.tink.KmsEnvelopeAeadKey"


def _unsupported_dek_message(type_url: str) -> str:
    return f"Unsupported DEK key type: {type_url}. Only native AEAD key types are supported."


@final
class KmsEnvelopeAeadFactory:
    """Builds a :class:`KmsEnvelopeAead` for an envelope key.

    The KEK is resolved through the KMS client registry on every call, and
    the DEK template is read from the key, never captured in advance.
    """

    primitive_class = Aead

    __slots__ = ("_kms_clients", "_registry")

    def __init__(self, registry: Registry, kms_clients: KmsClientRegistry) -> None:
        self._registry = registry
        self._kms_clients = kms_clients

    def __call__(self, key: KmsEnvelopeAeadKey) -> KmsEnvelopeAead:
        kek_uri = key.params.kek_uri
        remote = self._kms_clients.get(kek_uri).get_aead(kek_uri)
        dek_template = key.params.dek_template
        if dek_template is None:
            msg = "Envelope key has no DEK template"
            raise UnsupportedKeyParametersError(msg)
        return KmsEnvelopeAead(dek_template, remote, registry=self._registry)


@final
class KmsEnvelopeAeadKeyFactory(KeyFactory[KmsEnvelopeAeadKeyFormat, KmsEnvelopeAeadKey]):
    format_class = KmsEnvelopeAeadKeyFormat

    def __init__(self, version: int) -> None:
        self._version = version

    def validate_key_format(self, key_format: KmsEnvelopeAeadKeyFormat) -> None:
        if not key_format.kek_uri or key_format.dek_template is None:
            msg = "Invalid key format: missing KEK URI or DEK template"
            raise InvalidKeyFormatError(msg)
        if not is_supported_dek_key_type(key_format.dek_template.type_url):
            raise InvalidKeyFormatError(_unsupported_dek_message(key_format.dek_template.type_url))

    def create_key(self, key_format: KmsEnvelopeAeadKeyFormat) -> KmsEnvelopeAeadKey:
        return KmsEnvelopeAeadKey(version=self._version, params=key_format)


@final
class KmsEnvelopeAeadKeyManager(KeyTypeManager[KmsEnvelopeAeadKey]):
    """Creates envelope keys and turns them into :class:`KmsEnvelopeAead` primitives.

    Args:
        registry: Registry used to generate DEKs (default: process-wide)
        kms_clients: KMS clients used to resolve KEKs (default: process-wide)
    """

    key_class = KmsEnvelopeAeadKey
    key_type = TYPE_URL
    version = 0
    key_material_type = KeyMaterialType.REMOTE

    __slots__ = ("_factories",)

    def __init__(
        self,
        registry: Registry | None = None,
        kms_clients: KmsClientRegistry | None = None,
    ) -> None:
        factory = KmsEnvelopeAeadFactory(
            default_registry() if registry is None else registry,
            default_kms_clients() if kms_clients is None else kms_clients,
        )
        self._factories: Mapping[type, PrimitiveFactory[object, KmsEnvelopeAeadKey]] = (
            MappingProxyType({Aead: factory})
        )

    @property
    def primitive_factories(
        self,
    ) -> Mapping[type, PrimitiveFactory[object, KmsEnvelopeAeadKey]]:
        return self._factories

    def key_factory(self) -> KmsEnvelopeAeadKeyFactory:
        return KmsEnvelopeAeadKeyFactory(self.version)

    def validate_key(self, key: KmsEnvelopeAeadKey) -> None:
        super().validate_key(key)
        dek_template = key.params.dek_template
        if dek_template is None or not key.params.kek_uri:
            msg = "Envelope key is missing its KEK URI or DEK template"
            raise UnsupportedKeyParametersError(msg)
        if not is_supported_dek_key_type(dek_template.type_url):
            raise UnsupportedKeyParametersError(_unsupported_dek_message(dek_template.type_url))


def create_key_format(kek_uri: str, dek_template: KeyTemplate) -> KmsEnvelopeAeadKeyFormat:
    if not is_supported_dek_key_type(dek_template.type_url):
        raise UnsupportedDekTypeError(_unsupported_dek_message(dek_template.type_url))
    if not kek_uri or not kek_uri.strip():
        msg = "KEK URI must not be empty"
        raise InvalidArgumentError(msg)
    return KmsEnvelopeAeadKeyFormat(kek_uri=kek_uri, dek_template=dek_template)


def create_key_template(kek_uri: str, dek_template: KeyTemplate) -> KeyTemplate:
    """Template for envelope keys wrapping DEKs of ``dek_template`` under ``kek_uri``.

    Keys created from the template use the RAW output prefix so that
    ciphertexts stay compatible with the remote KMS. Generating a key from
    it creates only a reference to the KEK, no key material.
    """
    key_format = create_key_format(kek_uri, dek_template)
    return KeyTemplate(
        type_url=TYPE_URL,
        value=key_format.to_bytes(),
        output_prefix_type=OutputPrefixType.RAW,
    )


def register(
    registry: Registry | None = None,
    kms_clients: KmsClientRegistry | None = None,
    *,
    allow_overwrite: bool = False,
    new_key_allowed: bool = True,
) -> None:
    if registry is None:
        registry = default_registry()
    registry.register_key_manager(
        KmsEnvelopeAeadKeyManager(registry, kms_clients),
        allow_overwrite,
        new_key_allowed=new_key_allowed,
    )
