import secrets

import pytest
from hypothesis import given, settings, strategies as st

from pykeyx.core.cord import Cord
from pykeyx.core.cryptography import (
    NONCE_SIZE,
    TAG_SIZE,
    AesGcm,
    ChaCha20Poly1305Aead,
    CordAesGcm,
)
from pykeyx.exceptions import (
    AuthenticationError,
    ErrorKind,
    InputTooShortError,
    UnsupportedKeyParametersError,
)

_AES128_KEY = secrets.token_bytes(16)
_AES256_KEY = secrets.token_bytes(32)
_CHACHA_KEY = secrets.token_bytes(32)


@pytest.mark.parametrize(
    "aead",
    [AesGcm(_AES128_KEY), AesGcm(_AES256_KEY), ChaCha20Poly1305Aead(_CHACHA_KEY)],
    ids=["aes128-gcm", "aes256-gcm", "chacha20-poly1305"],
)
def test_one_shot_wire_layout(aead) -> None:
    ciphertext = aead.encrypt(b"payload", b"ad")
    assert len(ciphertext) == NONCE_SIZE + len(b"payload") + TAG_SIZE
    assert aead.decrypt(ciphertext, b"ad") == b"payload"


def test_nonces_are_fresh() -> None:
    aead = AesGcm(_AES128_KEY)
    nonces = {aead.encrypt(b"same", b"")[:NONCE_SIZE] for _ in range(32)}
    assert len(nonces) == 32


def test_wrong_associated_data_fails_authentication() -> None:
    aead = AesGcm(_AES256_KEY)
    ciphertext = aead.encrypt(b"payload", b"ad")
    with pytest.raises(AuthenticationError) as exc_info:
        aead.decrypt(ciphertext, b"other")
    assert exc_info.value.kind is ErrorKind.AUTHENTICATION_FAILED


@pytest.mark.parametrize("size", [0, 1, NONCE_SIZE, NONCE_SIZE + TAG_SIZE - 1])
def test_short_ciphertext_rejected(size: int) -> None:
    with pytest.raises(InputTooShortError):
        AesGcm(_AES128_KEY).decrypt(b"\x00" * size, b"")


def test_minimum_size_ciphertext_is_authenticated_not_length_checked() -> None:
    with pytest.raises(AuthenticationError):
        AesGcm(_AES128_KEY).decrypt(b"\x00" * (NONCE_SIZE + TAG_SIZE), b"")


@pytest.mark.parametrize("size", [0, 15, 24, 33])
def test_aes_gcm_rejects_bad_key_size(size: int) -> None:
    with pytest.raises(UnsupportedKeyParametersError):
        AesGcm(b"k" * size)
    with pytest.raises(UnsupportedKeyParametersError):
        CordAesGcm(b"k" * size)


def test_chacha_rejects_short_key() -> None:
    with pytest.raises(UnsupportedKeyParametersError):
        ChaCha20Poly1305Aead(b"k" * 16)


@settings(max_examples=50)
@given(
    plaintext=st.binary(max_size=256),
    associated_data=st.binary(max_size=32),
    position=st.integers(min_value=0),
    bit=st.integers(min_value=0, max_value=7),
)
def test_any_bit_flip_is_detected(
    plaintext: bytes,
    associated_data: bytes,
    position: int,
    bit: int,
) -> None:
    aead = ChaCha20Poly1305Aead(_CHACHA_KEY)
    ciphertext = bytearray(aead.encrypt(plaintext, associated_data))
    ciphertext[position % len(ciphertext)] ^= 1 << bit
    with pytest.raises(AuthenticationError):
        aead.decrypt(bytes(ciphertext), associated_data)


def test_cord_split_shares_untouched_chunks() -> None:
    cord = Cord([b"abc", b"def", b"ghi"])
    head, tail = cord.split(4)
    assert head.chunks == (b"abc", b"d")
    assert tail.chunks == (b"ef", b"ghi")
    assert head.chunks[0] is cord.chunks[0]
    assert tail.chunks[1] is cord.chunks[2]


@pytest.mark.parametrize("offset", [0, 3, 9])
def test_cord_split_at_boundaries(offset: int) -> None:
    cord = Cord([b"abc", b"def", b"ghi"])
    head, tail = cord.split(offset)
    assert bytes(head) + bytes(tail) == b"abcdefghi"
    assert len(head) == offset


@pytest.mark.parametrize("offset", [-1, 10])
def test_cord_split_out_of_range(offset: int) -> None:
    with pytest.raises(IndexError):
        Cord([b"abc", b"def", b"ghi"]).split(offset)


def test_cord_equality_ignores_chunking() -> None:
    assert Cord([b"ab", b"c"]) == Cord([b"a", b"bc"])
    assert Cord([b"ab", b"c"]) == b"abc"
    assert Cord([b"", b"abc", b""]).chunks == (b"abc",)
    assert Cord.join([Cord([b"a"]), Cord([b"b", b"c"])]) == b"abc"


def test_cord_aead_interoperates_with_one_shot_aead() -> None:
    one_shot = AesGcm(_AES128_KEY)
    cord_aead = CordAesGcm(_AES128_KEY)

    plaintext = Cord([b"hello ", b"chunked ", b"world"])
    associated_data = Cord([b"a", b"d"])
    ciphertext = cord_aead.encrypt(plaintext, associated_data)
    assert one_shot.decrypt(bytes(ciphertext), b"ad") == b"hello chunked world"

    ciphertext = one_shot.encrypt(b"hello chunked world", b"ad")
    pieces = Cord([ciphertext[:5], ciphertext[5:20], ciphertext[20:]])
    assert cord_aead.decrypt(pieces, associated_data) == b"hello chunked world"


def test_cord_aead_accepts_plain_bytes() -> None:
    cord_aead = CordAesGcm(_AES256_KEY)
    ciphertext = cord_aead.encrypt(b"", b"")
    assert len(ciphertext) == NONCE_SIZE + TAG_SIZE
    assert cord_aead.decrypt(ciphertext, b"") == b""


def test_cord_aead_tamper_detected() -> None:
    cord_aead = CordAesGcm(_AES128_KEY)
    ciphertext = bytearray(bytes(cord_aead.encrypt(b"payload", b"")))
    ciphertext[NONCE_SIZE] ^= 0x01
    with pytest.raises(AuthenticationError):
        cord_aead.decrypt(Cord([bytes(ciphertext)]), b"")


def test_cord_aead_short_input() -> None:
    with pytest.raises(InputTooShortError):
        CordAesGcm(_AES128_KEY).decrypt(Cord([b"\x00" * 10, b"\x00" * 10]), b"")
