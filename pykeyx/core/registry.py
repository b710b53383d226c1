"""Process-wide mapping from key type identifiers to key managers.

Writers are serialized by a single lock and publish a fresh read-only
snapshot with one reference assignment. Readers never take the lock and
see either the snapshot before a registration or the one after it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar, final

from pykeyx.core.protocols import Aead
from pykeyx.exceptions import (
    AlreadyRegisteredIncompatibleError,
    AlreadyRegisteredNoOverwriteError,
    KeyCreationNotAllowedError,
    UnknownKeyTypeError,
    UnsupportedKeyParametersError,
)
from pykeyx.models.keys import KeyData

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pykeyx.core.key_manager import KeyTypeManager
    from pykeyx.models.keys import KeyTemplate, WireModel

__all__ = ["Registry", "default_registry", "register_key_manager"]

logger = logging.getLogger(__name__)

PrimitiveT = TypeVar("PrimitiveT")


@dataclass(frozen=True, slots=True)
class _Entry:
    manager: KeyTypeManager[Any]
    new_key_allowed: bool


@final
class Registry:
    """Single source of truth for key type handling."""

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Mapping[str, _Entry] = MappingProxyType({})

    def register_key_manager(
        self,
        manager: KeyTypeManager[Any],
        allow_overwrite: bool = False,
        *,
        new_key_allowed: bool = True,
    ) -> None:
        """Register ``manager`` under its key type.

        An existing entry may only be replaced by an equivalent manager, and
        only with ``allow_overwrite``. A manager of another class, material
        kind or capability set, of a lower version, or one that would re-enable
        key creation for a type where it was disabled is always rejected.
        """
        key_type = manager.key_type
        with self._lock:
            existing = self._entries.get(key_type)
            if existing is not None:
                self._ensure_compatible(existing, manager, new_key_allowed=new_key_allowed)
                if not allow_overwrite:
                    msg = f"Key manager for {key_type} is already registered"
                    raise AlreadyRegisteredNoOverwriteError(msg)

            updated = dict(self._entries)
            updated[key_type] = _Entry(manager=manager, new_key_allowed=new_key_allowed)
            self._entries = MappingProxyType(updated)

        logger.info(
            "Registered key manager %s for %s (version %d)",
            type(manager).__name__,
            key_type,
            manager.version,
        )

    @staticmethod
    def _ensure_compatible(
        existing: _Entry,
        candidate: KeyTypeManager[Any],
        *,
        new_key_allowed: bool,
    ) -> None:
        current = existing.manager
        key_type = current.key_type
        if type(current) is not type(candidate):
            msg = (
                f"{key_type} is registered with {type(current).__name__}, "
                f"cannot replace it with {type(candidate).__name__}"
            )
            raise AlreadyRegisteredIncompatibleError(msg)
        if current.key_material_type != candidate.key_material_type:
            msg = f"{key_type}: key material type mismatch"
            raise AlreadyRegisteredIncompatibleError(msg)
        if current.supported_primitives() != candidate.supported_primitives():
            msg = f"{key_type}: supported primitives mismatch"
            raise AlreadyRegisteredIncompatibleError(msg)
        if candidate.version < current.version:
            msg = f"{key_type}: refusing downgrade from version {current.version} to {candidate.version}"
            raise AlreadyRegisteredIncompatibleError(msg)
        if new_key_allowed and not existing.new_key_allowed:
            msg = f"{key_type}: new keys are already disallowed"
            raise AlreadyRegisteredIncompatibleError(msg)

    def _entry(self, type_url: str) -> _Entry:
        entry = self._entries.get(type_url)
        if entry is None:
            msg = f"No key manager registered for {type_url}"
            raise UnknownKeyTypeError(msg)
        return entry

    def get_manager(self, type_url: str) -> KeyTypeManager[Any]:
        return self._entry(type_url).manager

    def is_registered(self, type_url: str) -> bool:
        return type_url in self._entries

    def type_urls(self) -> frozenset[str]:
        return frozenset(self._entries)

    @staticmethod
    def _create_key(entry: _Entry, template: KeyTemplate) -> WireModel:
        if not entry.new_key_allowed:
            msg = f"Creating new keys of type {template.type_url} is not allowed"
            raise KeyCreationNotAllowedError(msg)

        factory = entry.manager.key_factory()
        key_format = factory.parse_key_format(template.value)
        factory.validate_key_format(key_format)
        return factory.create_key(key_format)

    def new_key(self, template: KeyTemplate) -> WireModel:
        """Create a new key from ``template`` without serializing it."""
        return self._create_key(self._entry(template.type_url), template)

    def new_key_data(self, template: KeyTemplate) -> KeyData:
        """Create a new key from ``template`` and return it serialized."""
        entry = self._entry(template.type_url)
        key = self._create_key(entry, template)
        return KeyData(
            type_url=template.type_url,
            value=key.to_bytes(),
            key_material_type=entry.manager.key_material_type,
        )

    def get_primitive(
        self,
        key_data: KeyData,
        primitive_cls: type[PrimitiveT] = Aead,  # type: ignore[assignment]
    ) -> PrimitiveT:
        """Parse, validate and turn ``key_data`` into a ``primitive_cls`` primitive."""
        manager = self.get_manager(key_data.type_url)
        if key_data.key_material_type != manager.key_material_type:
            msg = (
                f"{key_data.type_url} keys are {manager.key_material_type}, "
                f"got {key_data.key_material_type}"
            )
            raise UnsupportedKeyParametersError(msg)
        key = manager.parse_key(key_data.value)
        return manager.get_primitive(key, primitive_cls)

    def reset(self) -> None:
        """Drop every registration. Intended for tests."""
        with self._lock:
            self._entries = MappingProxyType({})


_DEFAULT_REGISTRY = Registry()


def default_registry() -> Registry:
    """The process-wide registry used when no registry is passed explicitly."""
    return _DEFAULT_REGISTRY


def register_key_manager(
    manager: KeyTypeManager[Any],
    allow_overwrite: bool = False,
    *,
    new_key_allowed: bool = True,
) -> None:
    _DEFAULT_REGISTRY.register_key_manager(
        manager,
        allow_overwrite,
        new_key_allowed=new_key_allowed,
    )
