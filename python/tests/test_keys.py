from __future__ import annotations

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from hybrid_envelope import (
    CryptoEnvironmentError,
    EncryptionError,
    EnvelopeConfig,
    InvalidKeyFormatError,
    KeyCodec,
    KeyMismatchError,
    PrivateKey,
    PublicKey,
    SecureKey,
    SerializationError,
)


def test_generated_key_pair_parameters(key_pair) -> None:
    assert isinstance(key_pair.public_key, PublicKey)
    assert isinstance(key_pair.private_key, PrivateKey)
    assert key_pair.public_key.key_size == 2048
    assert key_pair.private_key.key_size == 2048
    assert key_pair.public_key.oaep_hash == "SHA-256"

    public_numbers = key_pair.public_key._key.public_numbers()
    assert public_numbers.e == 65537


def test_key_pair_repr_hides_private_key(key_pair) -> None:
    text = repr(key_pair)
    assert "[REDACTED]" in text
    assert repr(key_pair.private_key) == "PrivateKey([REDACTED])"


def test_key_handles_are_capability_restricted(key_pair) -> None:
    assert not hasattr(key_pair.public_key, "decrypt")
    assert not hasattr(key_pair.private_key, "encrypt")
    assert not hasattr(key_pair.private_key, "public_key")


def test_wrap_unwrap_with_generated_pair(key_pair) -> None:
    secret = b"\x07" * 32
    wrapped = key_pair.public_key.encrypt(secret)

    assert len(wrapped) == 256
    assert key_pair.private_key.decrypt(wrapped) == secret


def test_wrap_rejects_oversized_payload(key_pair) -> None:
    # OAEP-SHA256 with a 2048-bit modulus caps the payload at 190 bytes
    with pytest.raises(EncryptionError):
        key_pair.public_key.encrypt(b"\x00" * 191)


def test_unwrap_with_wrong_key_raises_key_mismatch(key_pair, other_key_pair) -> None:
    wrapped = key_pair.public_key.encrypt(b"\x07" * 32)
    with pytest.raises(KeyMismatchError):
        other_key_pair.private_key.decrypt(wrapped)


def test_export_formats(codec, key_pair) -> None:
    public_text = codec.export_public_key(key_pair.public_key)
    private_text = codec.export_private_key(key_pair.private_key)

    public_der = base64.b64decode(public_text, validate=True)
    private_der = base64.b64decode(private_text, validate=True)

    assert isinstance(serialization.load_der_public_key(public_der), rsa.RSAPublicKey)
    assert isinstance(
        serialization.load_der_private_key(private_der, password=None),
        rsa.RSAPrivateKey,
    )


def test_export_import_is_idempotent(codec, key_pair) -> None:
    public_text = codec.export_public_key(key_pair.public_key)
    private_text = codec.export_private_key(key_pair.private_key)

    public_key = codec.import_public_key(public_text)
    private_key = codec.import_private_key(private_text)

    assert codec.export_public_key(public_key) == public_text
    assert codec.export_private_key(private_key) == private_text

    secret = b"\x09" * 32
    assert private_key.decrypt(public_key.encrypt(secret)) == secret
    assert key_pair.private_key.decrypt(public_key.encrypt(secret)) == secret
    assert private_key.decrypt(key_pair.public_key.encrypt(secret)) == secret


def test_export_accepts_raw_cryptography_keys(codec, key_pair) -> None:
    raw_private = key_pair.private_key._key
    assert codec.export_private_key(raw_private) == codec.export_private_key(
        key_pair.private_key
    )
    assert codec.export_public_key(raw_private.public_key()) == codec.export_public_key(
        key_pair.public_key
    )


@pytest.mark.parametrize("bad_key", [SecureKey(b"\x00" * 32), b"\x00" * 32, "key", None])
def test_export_rejects_non_keys(codec, bad_key) -> None:
    with pytest.raises(SerializationError):
        codec.export_public_key(bad_key)
    with pytest.raises(SerializationError):
        codec.export_private_key(bad_key)


def test_export_rejects_wrong_key_half(codec, key_pair) -> None:
    with pytest.raises(SerializationError):
        codec.export_private_key(key_pair.public_key)
    with pytest.raises(SerializationError):
        codec.export_public_key(key_pair.private_key)


@pytest.mark.parametrize("encoded", ["", "not base64!", "abc", "-_-_"])
def test_import_rejects_malformed_base64(codec, encoded) -> None:
    with pytest.raises(InvalidKeyFormatError):
        codec.import_public_key(encoded)
    with pytest.raises(InvalidKeyFormatError):
        codec.import_private_key(encoded)


def test_import_rejects_garbage_der(codec) -> None:
    garbage = base64.b64encode(b"\x30\x82\x01\x00" + b"\x00" * 32).decode("ascii")
    with pytest.raises(InvalidKeyFormatError):
        codec.import_public_key(garbage)
    with pytest.raises(InvalidKeyFormatError):
        codec.import_private_key(garbage)


def test_import_rejects_swapped_halves(codec, key_pair) -> None:
    public_text = codec.export_public_key(key_pair.public_key)
    private_text = codec.export_private_key(key_pair.private_key)

    with pytest.raises(InvalidKeyFormatError):
        codec.import_public_key(private_text)
    with pytest.raises(InvalidKeyFormatError):
        codec.import_private_key(public_text)


def test_import_rejects_non_rsa_keys(codec) -> None:
    ec_private = ec.generate_private_key(ec.SECP256R1())
    public_text = base64.b64encode(
        ec_private.public_key().public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    ).decode("ascii")
    private_text = base64.b64encode(
        ec_private.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    ).decode("ascii")

    with pytest.raises(InvalidKeyFormatError, match="RSA"):
        codec.import_public_key(public_text)
    with pytest.raises(InvalidKeyFormatError, match="RSA"):
        codec.import_private_key(private_text)


def test_import_rejects_small_modulus(codec) -> None:
    weak = rsa.generate_private_key(public_exponent=65537, key_size=1024)

    with pytest.raises(InvalidKeyFormatError, match="too small"):
        codec.import_public_key(codec.export_public_key(weak.public_key()))
    with pytest.raises(InvalidKeyFormatError, match="too small"):
        codec.import_private_key(codec.export_private_key(weak))


def test_import_rejects_password_protected_private_key(codec, key_pair) -> None:
    protected = key_pair.private_key._key.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(b"passphrase"),
    )
    with pytest.raises(InvalidKeyFormatError):
        codec.import_private_key(base64.b64encode(protected).decode("ascii"))


def test_oaep_hash_must_match_between_sender_and_recipient(codec, key_pair) -> None:
    sha512_codec = KeyCodec(config=EnvelopeConfig(oaep_hash="SHA-512"))
    public_key = sha512_codec.import_public_key(codec.export_public_key(key_pair.public_key))
    private_key = sha512_codec.import_private_key(
        codec.export_private_key(key_pair.private_key)
    )

    wrapped = public_key.encrypt(b"\x05" * 32)
    assert private_key.decrypt(wrapped) == b"\x05" * 32
    with pytest.raises(KeyMismatchError):
        key_pair.private_key.decrypt(wrapped)


def test_generate_without_crypto_engine_raises(broken_provider) -> None:
    with pytest.raises(CryptoEnvironmentError):
        KeyCodec(provider=broken_provider).generate_key_pair()
