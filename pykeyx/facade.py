from __future__ import annotations

from typing import TYPE_CHECKING, Any, final

from pykeyx import aead
from pykeyx.aead.kms_envelope import create_key_template
from pykeyx.config import PyKeyXConfig
from pykeyx.core.kms_clients import KmsClientRegistry
from pykeyx.core.protocols import Aead, CordAead
from pykeyx.core.registry import Registry

if TYPE_CHECKING:
    from pykeyx.core.key_manager import KeyTypeManager
    from pykeyx.core.protocols import KmsClient
    from pykeyx.models.keys import KeyData, KeyTemplate


@final
class PyKeyX:
    __slots__ = ("_config", "_kms_clients", "_registry")

    def __init__(
        self,
        config: PyKeyXConfig | None = None,
        *,
        registry: Registry | None = None,
        kms_clients: KmsClientRegistry | None = None,
        register_builtins: bool = True,
    ) -> None:
        self._config = PyKeyXConfig() if config is None else config
        self._registry = Registry() if registry is None else registry
        self._kms_clients = KmsClientRegistry() if kms_clients is None else kms_clients
        if register_builtins:
            aead.register(
                self._registry,
                self._kms_clients,
                allow_overwrite=self._config.allow_overwrite,
                new_key_allowed=self._config.new_key_allowed,
            )

    def register_key_manager(
        self,
        manager: KeyTypeManager[Any],
        allow_overwrite: bool = False,
        *,
        new_key_allowed: bool = True,
    ) -> None:
        self._registry.register_key_manager(
            manager,
            allow_overwrite,
            new_key_allowed=new_key_allowed,
        )

    def register_kms_client(self, client: KmsClient, *, allow_overwrite: bool = False) -> None:
        self._kms_clients.register(client, allow_overwrite=allow_overwrite)

    def new_key_data(self, template: KeyTemplate) -> KeyData:
        return self._registry.new_key_data(template)

    def get_aead(self, key_data: KeyData) -> Aead:
        return self._registry.get_primitive(key_data, Aead)

    def get_cord_aead(self, key_data: KeyData) -> CordAead:
        return self._registry.get_primitive(key_data, CordAead)

    def envelope_template(
        self,
        kek_uri: str,
        dek_template: KeyTemplate | None = None,
    ) -> KeyTemplate:
        if dek_template is None:
            dek_template = self._config.dek_template
        return create_key_template(kek_uri, dek_template)

    def envelope_aead(self, kek_uri: str, dek_template: KeyTemplate | None = None) -> Aead:
        """Envelope Aead for ``kek_uri``, using the configured DEK template by default."""
        key_data = self.new_key_data(self.envelope_template(kek_uri, dek_template))
        return self.get_aead(key_data)

    @property
    def config(self) -> PyKeyXConfig:
        return self._config

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def kms_clients(self) -> KmsClientRegistry:
        return self._kms_clients
