"""
Configuration for hybrid envelope encryption.

Values come from keyword arguments or, through EnvelopeConfig.from_env(),
from the process environment and an optional .env file:

    HYBRID_ENVELOPE_RSA_KEY_SIZE   2048 | 3072 | 4096   (default 2048)
    HYBRID_ENVELOPE_OAEP_HASH      SHA-256 | SHA-384 | SHA-512   (default SHA-256)
    HYBRID_ENVELOPE_LOG_LEVEL      logging level name   (default WARNING)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Type

from cryptography.hazmat.primitives import hashes
from dotenv import load_dotenv

from .errors import ConfigError

ENV_PREFIX: str = "HYBRID_ENVELOPE_"

RSA_PUBLIC_EXPONENT: int = 65537
MIN_RSA_KEY_SIZE: int = 2048
ALLOWED_RSA_KEY_SIZES: tuple = (2048, 3072, 4096)

OAEP_HASHES: Dict[str, Type[hashes.HashAlgorithm]] = {
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
}


@dataclass(frozen=True)
class EnvelopeConfig:
    """Settings shared by KeyCodec and the async service."""

    rsa_key_size: int = 2048
    oaep_hash: str = "SHA-256"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.rsa_key_size not in ALLOWED_RSA_KEY_SIZES:
            raise ConfigError(
                f"Invalid RSA key size: expected one of {ALLOWED_RSA_KEY_SIZES}, "
                f"got {self.rsa_key_size}"
            )
        if self.oaep_hash not in OAEP_HASHES:
            raise ConfigError(
                f"Invalid OAEP hash: expected one of {sorted(OAEP_HASHES)}, "
                f"got {self.oaep_hash!r}"
            )
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"Invalid log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> EnvelopeConfig:
        """
        Build a config from environment variables.

        Args:
            dotenv_path: Optional .env file; by default python-dotenv searches
                upward from the working directory.

        Returns:
            EnvelopeConfig instance

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        load_dotenv(dotenv_path)

        kwargs = {}

        key_size = os.environ.get(f"{ENV_PREFIX}RSA_KEY_SIZE")
        if key_size:
            try:
                kwargs["rsa_key_size"] = int(key_size.strip())
            except ValueError:
                raise ConfigError(f"{ENV_PREFIX}RSA_KEY_SIZE must be an integer")

        oaep_hash = os.environ.get(f"{ENV_PREFIX}OAEP_HASH")
        if oaep_hash:
            kwargs["oaep_hash"] = oaep_hash.strip().upper()

        log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            kwargs["log_level"] = log_level.strip().upper()

        return cls(**kwargs)
