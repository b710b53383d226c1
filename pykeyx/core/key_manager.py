"""Per key-type logic: parsing, validation, versioning and primitive construction.

A :class:`KeyTypeManager` owns every rule for exactly one key type identifier.
Format validation (before a key exists) and key validation (after creation or
parsing) raise different errors, so callers can tell operator mistakes in a
template apart from stale or corrupted key material.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import ValidationError

from pykeyx.exceptions import (
    InvalidKeyFormatError,
    InvalidKeyVersionError,
    MalformedKeyEncodingError,
    PyKeyXError,
    UnsupportedPrimitiveError,
)
from pykeyx.models.keys import KeyMaterialType, WireModel

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pykeyx.core.protocols import PrimitiveFactory

__all__ = ["KeyFactory", "KeyTypeManager", "decode_model", "validate_version"]

KeyT = TypeVar("KeyT", bound=WireModel)
FormatT = TypeVar("FormatT", bound=WireModel)
ModelT = TypeVar("ModelT", bound=WireModel)
PrimitiveT = TypeVar("PrimitiveT")


def validate_version(version: int, max_expected: int) -> None:
    """Reject key versions outside ``[0, max_expected]``."""
    if version < 0 or version > max_expected:
        msg = f"Key version {version} is not in range [0, {max_expected}]"
        raise InvalidKeyVersionError(msg)


def decode_model(
    model: type[ModelT],
    data: bytes,
    error: type[PyKeyXError] = MalformedKeyEncodingError,
) -> ModelT:
    """Strictly decode ``data`` into ``model``, hiding decoder details."""
    try:
        return model.from_bytes(data)
    except (ValidationError, ValueError, TypeError) as e:
        # The decoder error may echo input bytes, keep it out of the message
        msg = f"Cannot parse {model.__name__}"
        raise error(msg) from e


class KeyFactory(ABC, Generic[FormatT, KeyT]):
    """Creates keys of one type from validated key formats."""

    format_class: ClassVar[type[WireModel]]

    @abstractmethod
    def validate_key_format(self, key_format: FormatT) -> None:
        """Raise ``InvalidKeyFormatError`` if ``key_format`` cannot produce a key."""

    def parse_key_format(self, data: bytes) -> FormatT:
        return decode_model(self.format_class, data, InvalidKeyFormatError)  # type: ignore[return-value]

    @abstractmethod
    def create_key(self, key_format: FormatT) -> KeyT:
        """Create a key stamped with the manager's current version."""


class KeyTypeManager(ABC, Generic[KeyT]):
    """Everything type-specific about one key type.

    Subclasses declare the key model, the type identifier, the version and
    the material kind as class attributes and supply one primitive factory
    per capability they support.
    """

    key_class: ClassVar[type[WireModel]]
    key_type: ClassVar[str]
    version: ClassVar[int] = 0
    key_material_type: ClassVar[KeyMaterialType]

    @property
    @abstractmethod
    def primitive_factories(self) -> Mapping[type, PrimitiveFactory[object, KeyT]]:
        """Primitive factories keyed by the primitive class they build."""

    @abstractmethod
    def key_factory(self) -> KeyFactory[WireModel, KeyT]: ...

    def validate_key(self, key: KeyT) -> None:
        """Check version and type-specific constraints of a parsed key."""
        validate_version(key.version, self.version)  # type: ignore[attr-defined]

    def parse_key(self, data: bytes) -> KeyT:
        return decode_model(self.key_class, data)  # type: ignore[return-value]

    def supported_primitives(self) -> frozenset[type]:
        return frozenset(self.primitive_factories)

    def does_support(self, key_type: str) -> bool:
        return key_type == self.key_type

    def get_primitive(self, key: KeyT, primitive_cls: type[PrimitiveT]) -> PrimitiveT:
        """Validate ``key`` and build the ``primitive_cls`` capability from it."""
        factory = self.primitive_factories.get(primitive_cls)
        if factory is None:
            msg = f"{self.key_type} does not provide {primitive_cls.__name__}"
            raise UnsupportedPrimitiveError(msg)
        self.validate_key(key)
        return factory(key)  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key_type={self.key_type!r}, version={self.version})"
