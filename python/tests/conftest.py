"""
Pytest configuration and fixtures for hybrid envelope encryption tests.
"""

from __future__ import annotations

import hashlib
from typing import Callable

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from hybrid_envelope import (
    CryptoEnvironmentError,
    CryptoProvider,
    EnvelopeCipher,
    KeyCodec,
    KeyPair,
    SystemCryptoProvider,
)


class FixedRandomProvider(CryptoProvider):
    """Deterministic randomness for tests; RSA generation stays on the system provider."""

    def __init__(self, seed: bytes = b"fixed") -> None:
        self._seed = seed
        self._counter = 0
        self._system = SystemCryptoProvider()

    def random_bytes(self, length: int) -> bytes:
        out = b""
        while len(out) < length:
            out += hashlib.sha256(self._seed + self._counter.to_bytes(8, "big")).digest()
            self._counter += 1
        return out[:length]

    def generate_rsa_private_key(
        self, key_size: int, public_exponent: int
    ) -> rsa.RSAPrivateKey:
        return self._system.generate_rsa_private_key(key_size, public_exponent)


class BrokenProvider(CryptoProvider):
    """Provider with no randomness source."""

    def random_bytes(self, length: int) -> bytes:
        raise CryptoEnvironmentError("No secure randomness source available")

    def generate_rsa_private_key(
        self, key_size: int, public_exponent: int
    ) -> rsa.RSAPrivateKey:
        raise CryptoEnvironmentError("RSA key generation unavailable")

    def check_environment(self) -> None:
        raise CryptoEnvironmentError("No secure randomness source available")


@pytest.fixture(scope="session")
def codec() -> KeyCodec:
    """KeyCodec with the system provider and default config."""
    return KeyCodec()


@pytest.fixture(scope="session")
def key_pair(codec: KeyCodec) -> KeyPair:
    """Recipient key pair, generated once per session."""
    return codec.generate_key_pair()


@pytest.fixture(scope="session")
def other_key_pair(codec: KeyCodec) -> KeyPair:
    """Unrelated key pair for isolation tests."""
    return codec.generate_key_pair()


@pytest.fixture
def cipher() -> EnvelopeCipher:
    """EnvelopeCipher with the system provider."""
    return EnvelopeCipher()


@pytest.fixture
def fixed_provider() -> Callable[..., FixedRandomProvider]:
    """Factory for deterministic providers."""
    return FixedRandomProvider


@pytest.fixture
def broken_provider() -> BrokenProvider:
    return BrokenProvider()
