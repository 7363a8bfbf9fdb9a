"""
Async hybrid encryption service.

This module provides:
- HybridEncryptionService: Main API for chat clients, bundling a KeyCodec and
  an EnvelopeCipher that share one provider and config

RSA key generation and RSA-OAEP unwrapping block for milliseconds, so the
async methods run them in a worker thread via asyncio.to_thread. A result is
only returned once the key pair or envelope is complete; cancelling the
awaiting task discards the result without side effects.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import EnvelopeConfig
from .envelope import Envelope, EnvelopeCipher
from .keys import KeyCodec, KeyPair, PrivateKey, PublicKey
from .provider import CryptoProvider, default_provider

_logger = logging.getLogger(__name__)


class HybridEncryptionService:
    """
    Hybrid envelope encryption service.

    Holds no keys: every key is passed in by the caller, so one instance can
    serve any number of users.
    """

    def __init__(
        self,
        provider: Optional[CryptoProvider] = None,
        config: Optional[EnvelopeConfig] = None,
    ) -> None:
        """
        Initialize service.

        Args:
            provider: Crypto provider (system default if None)
            config: EnvelopeConfig (defaults if None)
        """
        self._provider = provider if provider is not None else default_provider()
        self._config = config if config is not None else EnvelopeConfig()
        self._codec = KeyCodec(provider=self._provider, config=self._config)
        self._cipher = EnvelopeCipher(provider=self._provider)

    @classmethod
    async def new(
        cls,
        provider: Optional[CryptoProvider] = None,
        config: Optional[EnvelopeConfig] = None,
    ) -> HybridEncryptionService:
        """
        Create a service after checking the crypto environment (async factory method).

        Raises:
            CryptoEnvironmentError: If no secure crypto engine is available
        """
        service = cls(provider=provider, config=config)
        await asyncio.to_thread(service._provider.check_environment)
        _logger.debug(
            "Hybrid encryption service ready (RSA-%d, OAEP-%s)",
            service._config.rsa_key_size,
            service._config.oaep_hash,
        )
        return service

    @property
    def config(self) -> EnvelopeConfig:
        return self._config

    @property
    def codec(self) -> KeyCodec:
        return self._codec

    @property
    def cipher(self) -> EnvelopeCipher:
        return self._cipher

    async def generate_key_pair(self) -> KeyPair:
        """Generate a new RSA key pair for an identity."""
        return await asyncio.to_thread(self._codec.generate_key_pair)

    async def encrypt(self, plaintext: str, recipient_public_key: PublicKey) -> Envelope:
        """Encrypt message text for one recipient."""
        return await asyncio.to_thread(
            self._cipher.encrypt, plaintext, recipient_public_key
        )

    async def decrypt(self, envelope: Envelope, recipient_private_key: PrivateKey) -> str:
        """Decrypt an envelope with the recipient's private key."""
        return await asyncio.to_thread(
            self._cipher.decrypt, envelope, recipient_private_key
        )

    def export_public_key(self, key: PublicKey) -> str:
        return self._codec.export_public_key(key)

    def export_private_key(self, key: PrivateKey) -> str:
        return self._codec.export_private_key(key)

    def import_public_key(self, encoded: str) -> PublicKey:
        return self._codec.import_public_key(encoded)

    def import_private_key(self, encoded: str) -> PrivateKey:
        return self._codec.import_private_key(encoded)
