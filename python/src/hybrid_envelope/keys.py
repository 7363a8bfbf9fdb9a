"""
RSA key pairs and their text encoding.

This module provides:
- PublicKey: Encrypt-only RSA-OAEP handle
- PrivateKey: Decrypt-only RSA-OAEP handle
- KeyPair: Generated public/private pair
- KeyCodec: Key generation, export to Base64 text and import from it

Encodings:
- Public key: DER SubjectPublicKeyInfo, standard Base64
- Private key: DER PKCS#8 PrivateKeyInfo (unencrypted), standard Base64
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .config import MIN_RSA_KEY_SIZE, OAEP_HASHES, RSA_PUBLIC_EXPONENT, EnvelopeConfig
from .crypto import b64decode, b64encode
from .errors import (
    EncryptionError,
    InvalidKeyFormatError,
    KeyMismatchError,
    SerializationError,
)
from .provider import CryptoProvider, default_provider

_logger = logging.getLogger(__name__)


def _oaep(hash_name: str) -> padding.OAEP:
    algorithm = OAEP_HASHES[hash_name]
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=algorithm()),
        algorithm=algorithm(),
        label=None,
    )


class PublicKey:
    """
    Recipient public key, restricted to wrapping.

    Immutable; safe to share between threads.
    """

    __slots__ = ("_key", "_hash_name")

    def __init__(self, key: rsa.RSAPublicKey, oaep_hash: str = "SHA-256") -> None:
        self._key = key
        self._hash_name = oaep_hash

    @property
    def key_size(self) -> int:
        return self._key.key_size

    @property
    def oaep_hash(self) -> str:
        return self._hash_name

    def encrypt(self, data: bytes) -> bytes:
        """
        RSA-OAEP encrypt `data`.

        Raises:
            EncryptionError: If `data` is too long for the modulus
        """
        try:
            return self._key.encrypt(data, _oaep(self._hash_name))
        except (ValueError, TypeError) as e:
            raise EncryptionError(f"Key wrapping failed: {e}") from e

    def __repr__(self) -> str:
        return f"PublicKey(RSA-{self.key_size}, OAEP-{self._hash_name})"


class PrivateKey:
    """
    Holder's private key, restricted to unwrapping.

    Exposes no public half and no key numbers; the only way out is
    KeyCodec.export_private_key().
    """

    __slots__ = ("_key", "_hash_name")

    def __init__(self, key: rsa.RSAPrivateKey, oaep_hash: str = "SHA-256") -> None:
        self._key = key
        self._hash_name = oaep_hash

    @property
    def key_size(self) -> int:
        return self._key.key_size

    @property
    def oaep_hash(self) -> str:
        return self._hash_name

    def decrypt(self, data: bytes) -> bytes:
        """
        RSA-OAEP decrypt `data`.

        Raises:
            KeyMismatchError: If the padding check fails (wrong key or corrupted data)
        """
        try:
            return self._key.decrypt(data, _oaep(self._hash_name))
        except (ValueError, TypeError) as e:
            # Generic message to prevent padding oracles
            raise KeyMismatchError("Key unwrapping failed") from e

    def __repr__(self) -> str:
        return "PrivateKey([REDACTED])"


@dataclass(frozen=True, eq=False)
class KeyPair:
    """Generated key pair. Never compared, never logged."""

    public_key: PublicKey
    private_key: PrivateKey

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key!r}, private_key=[REDACTED])"


class KeyCodec:
    """
    Generates RSA-OAEP key pairs and converts keys to and from Base64 text.

    Holds no key material itself; provider and config are injected.
    """

    def __init__(
        self,
        provider: Optional[CryptoProvider] = None,
        config: Optional[EnvelopeConfig] = None,
    ) -> None:
        """
        Initialize KeyCodec.

        Args:
            provider: Randomness and key generation source (system default if None)
            config: Key size and OAEP hash settings (defaults if None)
        """
        self._provider = provider if provider is not None else default_provider()
        self._config = config if config is not None else EnvelopeConfig()

    @property
    def config(self) -> EnvelopeConfig:
        return self._config

    def generate_key_pair(self) -> KeyPair:
        """
        Generate a fresh RSA key pair.

        Returns:
            KeyPair with an encrypt-only public key and a decrypt-only private key

        Raises:
            CryptoEnvironmentError: If no secure crypto engine is available
        """
        private = self._provider.generate_rsa_private_key(
            key_size=self._config.rsa_key_size,
            public_exponent=RSA_PUBLIC_EXPONENT,
        )
        _logger.debug("Generated RSA-%d key pair", private.key_size)
        return KeyPair(
            public_key=PublicKey(private.public_key(), self._config.oaep_hash),
            private_key=PrivateKey(private, self._config.oaep_hash),
        )

    def export_public_key(self, key: Union[PublicKey, rsa.RSAPublicKey]) -> str:
        """
        Export a public key as Base64 SubjectPublicKeyInfo.

        Raises:
            SerializationError: If `key` is not an RSA public key
        """
        if isinstance(key, PublicKey):
            key = key._key
        if not isinstance(key, rsa.RSAPublicKey):
            raise SerializationError(
                f"Cannot export {type(key).__name__} as a public key"
            )

        try:
            der = key.public_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        except (ValueError, TypeError) as e:
            raise SerializationError(f"Failed to export public key: {e}") from e

        return b64encode(der)

    def export_private_key(self, key: Union[PrivateKey, rsa.RSAPrivateKey]) -> str:
        """
        Export a private key as Base64 PKCS#8.

        The result is unencrypted key material; where it is kept is up to
        the caller.

        Raises:
            SerializationError: If `key` is not an RSA private key
        """
        if isinstance(key, PrivateKey):
            key = key._key
        if not isinstance(key, rsa.RSAPrivateKey):
            raise SerializationError(
                f"Cannot export {type(key).__name__} as a private key"
            )

        try:
            der = key.private_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        except (ValueError, TypeError) as e:
            raise SerializationError(f"Failed to export private key: {e}") from e

        return b64encode(der)

    def import_public_key(self, encoded: str) -> PublicKey:
        """
        Import a public key exported by export_public_key().

        Returns:
            Encrypt-only PublicKey

        Raises:
            InvalidKeyFormatError: On malformed Base64, a non-SPKI structure,
                a non-RSA key or a modulus below 2048 bits
        """
        der = self._decode(encoded, "public")

        try:
            key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise InvalidKeyFormatError("Not a valid SubjectPublicKeyInfo structure") from e

        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidKeyFormatError(
                f"Expected an RSA public key, got {type(key).__name__}"
            )
        self._check_key_size(key.key_size)

        return PublicKey(key, self._config.oaep_hash)

    def import_private_key(self, encoded: str) -> PrivateKey:
        """
        Import a private key exported by export_private_key().

        Returns:
            Decrypt-only PrivateKey

        Raises:
            InvalidKeyFormatError: On malformed Base64, a non-PKCS#8 structure,
                an encrypted key, a non-RSA key or a modulus below 2048 bits
        """
        der = self._decode(encoded, "private")

        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise InvalidKeyFormatError("Not a valid PrivateKeyInfo structure") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise InvalidKeyFormatError(
                f"Expected an RSA private key, got {type(key).__name__}"
            )
        self._check_key_size(key.key_size)

        return PrivateKey(key, self._config.oaep_hash)

    @staticmethod
    def _decode(encoded: str, kind: str) -> bytes:
        try:
            der = b64decode(encoded)
        except ValueError as e:
            raise InvalidKeyFormatError(f"Encoded {kind} key is not valid Base64") from e
        if not der:
            raise InvalidKeyFormatError(f"Encoded {kind} key is empty")
        return der

    @staticmethod
    def _check_key_size(key_size: int) -> None:
        if key_size < MIN_RSA_KEY_SIZE:
            raise InvalidKeyFormatError(
                f"RSA modulus too small: expected at least {MIN_RSA_KEY_SIZE} bits, "
                f"got {key_size}"
            )
