"""
Symmetric primitives for the hybrid envelope.

This module provides:
- SecureKey: Ephemeral AES-256 key wrapper with best-effort zeroization
- AesGcmCipher: AES-256-GCM encryption/decryption with an explicit nonce
- b64encode / b64decode: Strict standard Base64 for transport fields
"""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import AuthenticationError, CryptoError, EncryptionError

if TYPE_CHECKING:
    from .provider import CryptoProvider

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)


class SecureKey:
    """
    AES-256 key wrapper with memory cleanup on deletion.

    Uses bytearray internally for mutable zeroing in __del__.
    Python's garbage collector doesn't guarantee immediate cleanup,
    so this is best-effort zeroization.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        """
        Create a SecureKey from raw bytes.

        Args:
            key_bytes: Raw key material, exactly 32 bytes

        Raises:
            CryptoError: If the material is not 32 bytes
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise CryptoError("Key must be bytes or bytearray")
        if len(key_bytes) != AES_256_KEY_SIZE:
            raise CryptoError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key_bytes)}"
            )
        self._bytes = bytearray(key_bytes)

    @classmethod
    def generate(cls, provider: CryptoProvider) -> SecureKey:
        """Generate a fresh 32-byte key from the provider's secure source."""
        return cls(provider.random_bytes(AES_256_KEY_SIZE))

    def as_bytes(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecureKey([REDACTED])"

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


class AesGcmCipher:
    """
    AES-256-GCM authenticated encryption.

    The caller supplies the nonce; each SecureKey in this package encrypts
    exactly one message, so a fresh random nonce per call is sufficient.
    """

    @staticmethod
    def encrypt(
        key: SecureKey,
        nonce: bytes,
        plaintext: bytes,
    ) -> bytes:
        """
        Encrypt plaintext with AES-256-GCM.

        Args:
            key: 32-byte encryption key
            nonce: 12-byte nonce, never reused with this key
            plaintext: Data to encrypt

        Returns:
            Ciphertext with the 16-byte tag appended

        Raises:
            EncryptionError: If the nonce size is invalid or encryption fails
        """
        if len(nonce) != NONCE_SIZE:
            raise EncryptionError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}"
            )

        aesgcm = AESGCM(key.as_bytes())

        try:
            return aesgcm.encrypt(nonce, plaintext, None)
        except (OverflowError, ValueError, TypeError) as e:
            raise EncryptionError(f"Encryption error: {e}") from e

    @staticmethod
    def decrypt(
        key: SecureKey,
        nonce: bytes,
        ciphertext: bytes,
    ) -> bytes:
        """
        Decrypt ciphertext with AES-256-GCM.

        Args:
            key: 32-byte decryption key
            nonce: 12-byte nonce used at encryption
            ciphertext: Ciphertext with tag appended

        Returns:
            Decrypted plaintext bytes

        Raises:
            AuthenticationError: If the nonce is malformed or the tag does not verify
        """
        if len(nonce) != NONCE_SIZE:
            raise AuthenticationError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}"
            )
        if len(ciphertext) < TAG_SIZE:
            raise AuthenticationError("Ciphertext shorter than authentication tag")

        aesgcm = AESGCM(key.as_bytes())

        try:
            return aesgcm.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            # Generic message to prevent oracle attacks
            raise AuthenticationError("Decryption failed") from e


def b64encode(data: bytes) -> str:
    """Encode bytes as standard Base64 text."""
    return base64.standard_b64encode(data).decode("ascii")


def b64decode(encoded: str) -> bytes:
    """
    Strictly decode standard Base64 text.

    Raises:
        ValueError: If `encoded` is not a str or holds characters outside
            the standard alphabet, or has bad padding
    """
    if not isinstance(encoded, str):
        raise ValueError(f"Expected Base64 text, got {type(encoded).__name__}")
    try:
        return base64.b64decode(encoded.encode("ascii"), validate=True)
    except (UnicodeEncodeError, binascii.Error) as e:
        raise ValueError(f"Base64 decode error: {e}") from e
