from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from pykeyx.aead.aes_gcm import TYPE_URL as AES_GCM_TYPE_URL
from pykeyx.aead.chacha20_poly1305 import TYPE_URL as CHACHA20_POLY1305_TYPE_URL
from pykeyx.core.cryptography import AES_GCM_KEY_SIZES
from pykeyx.exceptions import InvalidArgumentError
from pykeyx.models.keys import (
    AesGcmKeyFormat,
    ChaCha20Poly1305KeyFormat,
    KeyTemplate,
    OutputPrefixType,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "AES128_GCM",
    "AES256_GCM",
    "CHACHA20_POLY1305",
    "TEMPLATES",
    "create_aes_gcm_key_template",
]


def create_aes_gcm_key_template(
    key_size: int,
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK,
) -> KeyTemplate:
    if key_size not in AES_GCM_KEY_SIZES:
        msg = f"AES-GCM key size must be one of {AES_GCM_KEY_SIZES}"
        raise InvalidArgumentError(msg)
    return KeyTemplate(
        type_url=AES_GCM_TYPE_URL,
        value=AesGcmKeyFormat(key_size=key_size).to_bytes(),
        output_prefix_type=output_prefix_type,
    )


AES128_GCM: Final[KeyTemplate] = create_aes_gcm_key_template(16)
AES256_GCM: Final[KeyTemplate] = create_aes_gcm_key_template(32)
CHACHA20_POLY1305: Final[KeyTemplate] = KeyTemplate(
    type_url=CHACHA20_POLY1305_TYPE_URL,
    value=ChaCha20Poly1305KeyFormat().to_bytes(),
    output_prefix_type=OutputPrefixType.TINK,
)

TEMPLATES: Final[Mapping[str, KeyTemplate]] = MappingProxyType(
    {
        "AES128_GCM": AES128_GCM,
        "AES256_GCM": AES256_GCM,
        "CHACHA20_POLY1305": CHACHA20_POLY1305,
    },
)
