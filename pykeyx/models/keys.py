from __future__ import annotations

from enum import StrEnum
from typing import Final, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

TYPE_URL_PREFIX: Final[str] = "type.googleapis.com/"
MAX_KEY_VERSION: Final[int] = 2**31 - 1


class KeyMaterialType(StrEnum):
    """Kind of secret a key holds. REMOTE keys only reference an external secret."""

    SYMMETRIC = "SYMMETRIC"
    ASYMMETRIC_PRIVATE = "ASYMMETRIC_PRIVATE"
    ASYMMETRIC_PUBLIC = "ASYMMETRIC_PUBLIC"
    REMOTE = "REMOTE"


class OutputPrefixType(StrEnum):
    """Ciphertext framing marker. Envelope keys always use RAW."""

    TINK = "TINK"
    LEGACY = "LEGACY"
    RAW = "RAW"
    CRUNCHY = "CRUNCHY"


class WireModel(BaseModel):
    """Immutable model with a strict, self-delimiting byte encoding.

    ``from_bytes`` accepts exactly one JSON document: truncated input,
    trailing bytes, unknown fields and type coercions are all rejected.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    def to_bytes(self) -> bytes:
        """Serialize the model to its canonical byte encoding."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Parse a model from its byte encoding.

        Only the exact bytes ``to_bytes`` produces are accepted, so padding
        whitespace, repeated fields and unpadded base64 are all rejected.

        Raises:
            pydantic.ValidationError: If ``data`` is not a complete, valid encoding.
            ValueError: If ``data`` is valid but not in canonical form.
        """
        model = cls.model_validate_json(data, strict=True)
        if model.to_bytes() != bytes(data):
            msg = f"{cls.__name__} encoding is not canonical"
            raise ValueError(msg)
        return model


class KeyTemplate(WireModel):
    """Parameters for generating a new key of ``type_url``.

    Attributes:
        type_url: Key type identifier of the key manager that creates the key
        value: Serialized key format understood by that manager
        output_prefix_type: Ciphertext framing of keys created from the template
    """

    type_url: str = Field(..., min_length=1)
    value: bytes = Field(default=b"")
    output_prefix_type: OutputPrefixType = Field(default=OutputPrefixType.TINK)


class KeyData(WireModel):
    """Serialized key together with the identifier of its key type."""

    type_url: str = Field(..., min_length=1)
    value: bytes = Field(..., repr=False)
    key_material_type: KeyMaterialType


class AesGcmKeyFormat(WireModel):
    key_size: int
    version: int = Field(default=0, ge=0, le=MAX_KEY_VERSION)


class AesGcmKey(WireModel):
    version: int = Field(..., ge=0, le=MAX_KEY_VERSION)
    key_value: bytes = Field(..., repr=False)


class ChaCha20Poly1305KeyFormat(WireModel):
    pass


class ChaCha20Poly1305Key(WireModel):
    version: int = Field(..., ge=0, le=MAX_KEY_VERSION)
    key_value: bytes = Field(..., repr=False)


class KmsEnvelopeAeadKeyFormat(WireModel):
    """Parameters of an envelope key.

    Attributes:
        kek_uri: URI of the key-encrypting key held by a remote KMS
        dek_template: Template of the data-encryption key generated per message
    """

    kek_uri: str = Field(default="")
    dek_template: KeyTemplate | None = Field(default=None)

    @field_validator("kek_uri")
    @classmethod
    def strip_kek_uri(cls, kek_uri: str) -> str:
        """Reject URIs that are only whitespace by normalizing them to empty."""
        return kek_uri if kek_uri.strip() else ""


class KmsEnvelopeAeadKey(WireModel):
    """Envelope key. Holds no secret, only a KEK reference and a DEK template."""

    version: int = Field(..., ge=0, le=MAX_KEY_VERSION)
    params: KmsEnvelopeAeadKeyFormat
