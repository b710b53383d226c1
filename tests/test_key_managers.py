import pytest
from pydantic import ValidationError

from pykeyx.aead import AES128_GCM, AES256_GCM, CHACHA20_POLY1305
from pykeyx.aead.aes_gcm import AesGcmKeyManager
from pykeyx.aead.chacha20_poly1305 import ChaCha20Poly1305KeyManager
from pykeyx.core.cord import Cord
from pykeyx.core.cryptography import AesGcm, CordAesGcm
from pykeyx.core.key_manager import validate_version
from pykeyx.core.protocols import Aead, CordAead
from pykeyx.exceptions import (
    InvalidKeyFormatError,
    InvalidKeyVersionError,
    KeyMaterialError,
    MalformedKeyEncodingError,
    UnsupportedKeyParametersError,
    UnsupportedPrimitiveError,
)
from pykeyx.models import (
    AesGcmKey,
    AesGcmKeyFormat,
    ChaCha20Poly1305Key,
    KeyData,
    KeyMaterialType,
    KeyTemplate,
)


@pytest.mark.parametrize("version", [0, 3, 7])
def test_validate_version_accepts_range(version: int) -> None:
    validate_version(version, 7)


@pytest.mark.parametrize("version", [-1, 8])
def test_validate_version_rejects_out_of_range(version: int) -> None:
    with pytest.raises(InvalidKeyVersionError):
        validate_version(version, 7)


def test_wire_model_rejects_truncated_and_trailing_bytes() -> None:
    encoded = AesGcmKey(version=0, key_value=b"k" * 16).to_bytes()
    assert AesGcmKey.from_bytes(encoded).key_value == b"k" * 16

    with pytest.raises(ValidationError):
        AesGcmKey.from_bytes(encoded[:-1])
    with pytest.raises(ValidationError):
        AesGcmKey.from_bytes(encoded + b"{}")


_CANONICAL_KEY = AesGcmKey(version=0, key_value=b"k" * 16).to_bytes()


@pytest.mark.parametrize(
    "data",
    [
        _CANONICAL_KEY + b"   \n",
        b"  " + _CANONICAL_KEY,
        b'{"version":5,' + _CANONICAL_KEY[1:],
        _CANONICAL_KEY.replace(b"==", b""),
    ],
    ids=["trailing-whitespace", "leading-whitespace", "repeated-field", "unpadded-base64"],
)
def test_parse_key_rejects_non_canonical_encoding(data: bytes) -> None:
    manager = AesGcmKeyManager()
    assert manager.parse_key(_CANONICAL_KEY).key_value == b"k" * 16
    with pytest.raises(MalformedKeyEncodingError):
        manager.parse_key(data)


def test_wire_model_rejects_unknown_fields_and_coercion() -> None:
    with pytest.raises(ValidationError):
        AesGcmKeyFormat.from_bytes(b'{"key_size": 16, "extra": 1}')
    with pytest.raises(ValidationError):
        AesGcmKeyFormat.from_bytes(b'{"key_size": "16"}')


def test_key_material_is_hidden_from_repr() -> None:
    key = AesGcmKey(version=0, key_value=b"secret-key-bytes")
    assert "secret-key-bytes" not in repr(key)
    key_data = KeyData(
        type_url=AesGcmKeyManager.key_type,
        value=b"serialized-secret",
        key_material_type=KeyMaterialType.SYMMETRIC,
    )
    assert "serialized-secret" not in repr(key_data)


@pytest.mark.parametrize(("template", "size"), [(AES128_GCM, 16), (AES256_GCM, 32)])
def test_aes_gcm_creates_key_of_template_size(template: KeyTemplate, size: int) -> None:
    manager = AesGcmKeyManager()
    factory = manager.key_factory()
    key_format = factory.parse_key_format(template.value)
    factory.validate_key_format(key_format)
    key = factory.create_key(key_format)

    assert key.version == manager.version
    assert len(key.key_value) == size
    manager.validate_key(key)


@pytest.mark.parametrize("size", [0, 24, 64])
def test_aes_gcm_rejects_bad_format_size(size: int) -> None:
    factory = AesGcmKeyManager().key_factory()
    with pytest.raises(InvalidKeyFormatError):
        factory.validate_key_format(AesGcmKeyFormat(key_size=size))


def test_key_format_parse_failure_is_format_error() -> None:
    with pytest.raises(InvalidKeyFormatError):
        AesGcmKeyManager().key_factory().parse_key_format(b"not json")


def test_newer_key_version_rejected() -> None:
    manager = AesGcmKeyManager()
    with pytest.raises(InvalidKeyVersionError):
        manager.validate_key(AesGcmKey(version=1, key_value=b"k" * 16))


def test_wrong_key_length_rejected() -> None:
    with pytest.raises(UnsupportedKeyParametersError):
        AesGcmKeyManager().validate_key(AesGcmKey(version=0, key_value=b"k" * 20))
    with pytest.raises(UnsupportedKeyParametersError):
        ChaCha20Poly1305KeyManager().validate_key(
            ChaCha20Poly1305Key(version=0, key_value=b"k" * 16),
        )


@pytest.mark.parametrize("data", [b"", b"{", b"[]", b'{"version": 0}', b"\xff\xfe"])
def test_parse_key_rejects_malformed_encoding(data: bytes) -> None:
    with pytest.raises(MalformedKeyEncodingError) as exc_info:
        AesGcmKeyManager().parse_key(data)
    assert isinstance(exc_info.value, KeyMaterialError)


def test_malformed_encoding_message_does_not_echo_input() -> None:
    with pytest.raises(MalformedKeyEncodingError) as exc_info:
        AesGcmKeyManager().parse_key(b'{"version": 0, "key_value": "c2VjcmV0", "x": 1}')
    assert "c2VjcmV0" not in str(exc_info.value)


def test_aes_gcm_manager_provides_both_primitives() -> None:
    manager = AesGcmKeyManager()
    key = AesGcmKey(version=0, key_value=b"k" * 32)

    assert manager.supported_primitives() == frozenset({Aead, CordAead})
    aead = manager.get_primitive(key, Aead)
    cord_aead = manager.get_primitive(key, CordAead)
    assert isinstance(aead, AesGcm)
    assert isinstance(cord_aead, CordAesGcm)
    assert cord_aead.decrypt(Cord([aead.encrypt(b"x", b"")]), Cord()) == b"x"


def test_chacha_manager_has_no_cord_primitive() -> None:
    manager = ChaCha20Poly1305KeyManager()
    key = manager.key_factory().create_key(
        manager.key_factory().parse_key_format(CHACHA20_POLY1305.value),
    )
    assert isinstance(manager.get_primitive(key, Aead), Aead)
    with pytest.raises(UnsupportedPrimitiveError):
        manager.get_primitive(key, CordAead)


def test_get_primitive_validates_key_first() -> None:
    with pytest.raises(InvalidKeyVersionError):
        AesGcmKeyManager().get_primitive(AesGcmKey(version=5, key_value=b"k" * 16), Aead)


def test_manager_does_support_only_its_type() -> None:
    manager = AesGcmKeyManager()
    assert manager.does_support(manager.key_type)
    assert not manager.does_support(ChaCha20Poly1305KeyManager.key_type)
