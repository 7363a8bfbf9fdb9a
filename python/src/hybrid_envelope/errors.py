"""
Exception classes for hybrid envelope encryption operations.

Every failure surfaced by this package derives from EnvelopeError. Messages
never carry key material or plaintext.
"""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base exception for all hybrid envelope operations."""

    pass


class ConfigError(EnvelopeError):
    """Configuration error."""

    pass


class CryptoEnvironmentError(EnvelopeError):
    """No secure randomness source or crypto backend is available."""

    pass


class InvalidKeyFormatError(EnvelopeError):
    """Encoded key text is not valid Base64 or not a valid key structure."""

    pass


class SerializationError(EnvelopeError):
    """Serialization or deserialization error (key export, envelope records)."""

    pass


class CryptoError(EnvelopeError):
    """Cryptographic operation failed."""

    pass


class EncryptionError(CryptoError):
    """Symmetric encryption or asymmetric key wrapping failed."""

    pass


class KeyMismatchError(CryptoError):
    """Wrapped key could not be unwrapped (wrong private key or corrupted data)."""

    pass


class AuthenticationError(CryptoError):
    """GCM authentication tag did not verify."""

    pass


class DecodingError(CryptoError):
    """Decrypted bytes are not valid UTF-8."""

    pass
