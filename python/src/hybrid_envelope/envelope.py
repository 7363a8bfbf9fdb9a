"""
Hybrid envelope encryption of message text.

This module provides:
- Envelope: Transport record of Base64 cipher text, wrapped key and nonce
- EnvelopeCipher: Per-message AES-256-GCM encryption with the AES key
  wrapped under the recipient's RSA-OAEP public key

Flow:
- encrypt: fresh AES key + fresh nonce -> AES-GCM(plaintext) -> RSA-OAEP(AES key)
- decrypt: RSA-OAEP unwrap -> AES-GCM decrypt -> UTF-8 decode

The AES key and nonce live only inside a single encrypt() call; nothing is
retained between calls.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    AesGcmCipher,
    SecureKey,
    b64decode,
    b64encode,
)
from .errors import (
    AuthenticationError,
    CryptoError,
    DecodingError,
    EncryptionError,
    KeyMismatchError,
    SerializationError,
)
from .keys import PrivateKey, PublicKey
from .provider import CryptoProvider, default_provider

_logger = logging.getLogger(__name__)

# Keys written by the chat client before envelopes had their own record.
_LEGACY_FIELDS = {
    "cipherText": "encryptedMessage",
    "wrappedKey": "encryptedSymmetricKey",
    "nonce": "iv",
}

# The chat client wrapped the Base64 text of the AES key, not its raw bytes.
_LEGACY_WRAPPED_KEY_SIZE = 44


def _legacy_key_bytes(unwrapped: bytes) -> bytes:
    """Return raw AES key bytes, decoding a legacy Base64-text key if present."""
    if len(unwrapped) != _LEGACY_WRAPPED_KEY_SIZE:
        return unwrapped
    try:
        decoded = b64decode(unwrapped.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        return unwrapped
    if len(decoded) != AES_256_KEY_SIZE:
        return unwrapped
    return decoded


@dataclass(frozen=True)
class Envelope:
    """
    Encrypted message as stored by the caller.

    All fields are standard Base64 text. `cipher_text` ends with the 16-byte
    GCM authentication tag.
    """

    cipher_text: str
    wrapped_key: str
    nonce: str

    def to_dict(self) -> Dict[str, str]:
        """Return the transport mapping (cipherText, wrappedKey, nonce)."""
        return {
            "cipherText": self.cipher_text,
            "wrappedKey": self.wrapped_key,
            "nonce": self.nonce,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Envelope:
        """
        Build an Envelope from a transport mapping.

        Accepts either the current keys (cipherText, wrappedKey, nonce) or
        the legacy chat message keys (encryptedMessage,
        encryptedSymmetricKey, iv).

        Raises:
            SerializationError: If a field is missing or not valid Base64 text
        """
        if not isinstance(data, Mapping):
            raise SerializationError(
                f"Envelope must be a mapping, got {type(data).__name__}"
            )

        values = {}
        for field_name, legacy_name in _LEGACY_FIELDS.items():
            value = data.get(field_name, data.get(legacy_name))
            if value is None:
                raise SerializationError(f"Envelope field missing: {field_name}")
            try:
                b64decode(value)
            except ValueError as e:
                raise SerializationError(
                    f"Envelope field {field_name} is not valid Base64"
                ) from e
            values[field_name] = value

        return cls(
            cipher_text=values["cipherText"],
            wrapped_key=values["wrappedKey"],
            nonce=values["nonce"],
        )

    def to_json(self) -> str:
        """Serialize envelope to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> Envelope:
        """Deserialize envelope from JSON string."""
        try:
            data = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize envelope: {e}") from e
        return cls.from_dict(data)


class EnvelopeCipher:
    """
    Stateless hybrid encryption of message text.

    One instance can serve concurrent callers; it holds only the provider.
    """

    def __init__(self, provider: Optional[CryptoProvider] = None) -> None:
        """
        Initialize EnvelopeCipher.

        Args:
            provider: Source of AES keys and nonces (system default if None)
        """
        self._provider = provider if provider is not None else default_provider()

    def encrypt(self, plaintext: str, recipient_public_key: PublicKey) -> Envelope:
        """
        Encrypt message text for one recipient.

        Crypto flow:
        1. Generate a fresh AES-256 key
        2. Generate a fresh 12-byte nonce
        3. AES-GCM encrypt the UTF-8 plaintext -> cipher text (with tag)
        4. RSA-OAEP encrypt the raw AES key under the recipient key -> wrapped key
        5. Base64 encode all three

        Args:
            plaintext: Message text, any length
            recipient_public_key: Imported or generated PublicKey

        Returns:
            Envelope ready for storage

        Raises:
            EncryptionError: If any step fails
            CryptoEnvironmentError: If the provider has no secure randomness
        """
        if not isinstance(plaintext, str):
            raise EncryptionError(
                f"Plaintext must be str, got {type(plaintext).__name__}"
            )
        if not isinstance(recipient_public_key, PublicKey):
            raise EncryptionError(
                f"Recipient key must be a PublicKey, got "
                f"{type(recipient_public_key).__name__}"
            )

        try:
            data = plaintext.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncryptionError("Plaintext is not encodable as UTF-8") from e

        try:
            symmetric_key = SecureKey.generate(self._provider)
        except CryptoError as e:
            raise EncryptionError(f"Symmetric key generation failed: {e}") from e
        nonce = self._provider.random_bytes(NONCE_SIZE)

        cipher_text = AesGcmCipher.encrypt(symmetric_key, nonce, data)
        wrapped_key = recipient_public_key.encrypt(symmetric_key.as_bytes())
        del symmetric_key

        _logger.debug(
            "Encrypted %d plaintext bytes for RSA-%d recipient",
            len(data),
            recipient_public_key.key_size,
        )

        return Envelope(
            cipher_text=b64encode(cipher_text),
            wrapped_key=b64encode(wrapped_key),
            nonce=b64encode(nonce),
        )

    def decrypt(self, envelope: Envelope, recipient_private_key: PrivateKey) -> str:
        """
        Decrypt an envelope with the recipient's private key.

        Args:
            envelope: Envelope produced by encrypt()
            recipient_private_key: Imported or generated PrivateKey

        Returns:
            The exact original plaintext

        Raises:
            KeyMismatchError: If the wrapped key cannot be unwrapped
            AuthenticationError: If the GCM tag does not verify
            DecodingError: If the decrypted bytes are not UTF-8
        """
        if not isinstance(envelope, Envelope):
            raise SerializationError(
                f"Expected an Envelope, got {type(envelope).__name__}"
            )
        if not isinstance(recipient_private_key, PrivateKey):
            raise KeyMismatchError(
                f"Recipient key must be a PrivateKey, got "
                f"{type(recipient_private_key).__name__}"
            )

        try:
            wrapped_key = b64decode(envelope.wrapped_key)
        except ValueError as e:
            raise KeyMismatchError("Wrapped key is not valid Base64") from e

        raw_key = _legacy_key_bytes(recipient_private_key.decrypt(wrapped_key))
        if len(raw_key) != AES_256_KEY_SIZE:
            raise KeyMismatchError("Unwrapped key has the wrong size")
        symmetric_key = SecureKey(raw_key)

        try:
            nonce = b64decode(envelope.nonce)
            cipher_text = b64decode(envelope.cipher_text)
        except ValueError as e:
            raise AuthenticationError("Nonce or cipher text is not valid Base64") from e

        data = AesGcmCipher.decrypt(symmetric_key, nonce, cipher_text)
        del symmetric_key

        try:
            plaintext = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError("Decrypted payload is not valid UTF-8") from e

        _logger.debug("Decrypted %d plaintext bytes", len(data))
        return plaintext
