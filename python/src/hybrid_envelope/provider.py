"""
Crypto provider abstraction.

This module provides:
- CryptoProvider: Abstract source of secure randomness and RSA key material
- SystemCryptoProvider: Default provider backed by the OS CSPRNG and OpenSSL

KeyCodec and EnvelopeCipher take a provider as a constructor argument, so
tests can substitute fixed randomness without touching global state.
"""

from __future__ import annotations

import logging
import secrets
from abc import ABC, abstractmethod

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .crypto import AES_256_KEY_SIZE, NONCE_SIZE
from .errors import CryptoEnvironmentError

_logger = logging.getLogger(__name__)


class CryptoProvider(ABC):
    """Capability interface for the randomness and key generation the core needs."""

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        """Return `length` bytes from a cryptographically secure source."""
        ...

    @abstractmethod
    def generate_rsa_private_key(
        self, key_size: int, public_exponent: int
    ) -> rsa.RSAPrivateKey:
        """Generate a fresh RSA private key."""
        ...

    def check_environment(self) -> None:
        """Raise CryptoEnvironmentError if the provider cannot operate."""
        return None


class SystemCryptoProvider(CryptoProvider):
    """
    Provider backed by `secrets` and the `cryptography` OpenSSL backend.

    Stateless; one instance can be shared by any number of threads.
    """

    def random_bytes(self, length: int) -> bytes:
        try:
            return secrets.token_bytes(length)
        except NotImplementedError as e:
            raise CryptoEnvironmentError("No secure randomness source available") from e

    def generate_rsa_private_key(
        self, key_size: int, public_exponent: int
    ) -> rsa.RSAPrivateKey:
        try:
            return rsa.generate_private_key(
                public_exponent=public_exponent,
                key_size=key_size,
            )
        except (UnsupportedAlgorithm, InternalError, NotImplementedError) as e:
            raise CryptoEnvironmentError(f"RSA key generation unavailable: {e}") from e

    def check_environment(self) -> None:
        """
        Check the OS randomness source and the AES-GCM backend.

        Raises:
            CryptoEnvironmentError: If either is unavailable
        """
        check_key = self.random_bytes(AES_256_KEY_SIZE)
        nonce = self.random_bytes(NONCE_SIZE)
        try:
            AESGCM(check_key).encrypt(nonce, b"", None)
        except (UnsupportedAlgorithm, InternalError) as e:
            raise CryptoEnvironmentError(f"AES-GCM backend unavailable: {e}") from e
        _logger.debug("Crypto environment check passed")


_default_provider = SystemCryptoProvider()


def default_provider() -> CryptoProvider:
    """Return the shared SystemCryptoProvider."""
    return _default_provider
