"""
Hybrid Envelope Encryption Library

Per-message hybrid encryption for chat clients: each message is encrypted
with a fresh AES-256-GCM key, and that key is wrapped under the recipient's
RSA-OAEP public key.

Overview
--------
- **KeyCodec** generates RSA-2048 key pairs and converts keys to and from
  Base64 text (SubjectPublicKeyInfo / PKCS#8)
- **EnvelopeCipher** encrypts message text into an Envelope of Base64
  fields (cipher text, wrapped key, nonce) and decrypts it back
- **HybridEncryptionService** is the async facade over both

Quick Start
-----------
```python
import asyncio
from hybrid_envelope import Envelope, HybridEncryptionService

async def main():
    service = await HybridEncryptionService.new()

    # Recipient: generate and publish
    pair = await service.generate_key_pair()
    public_text = service.export_public_key(pair.public_key)
    private_text = service.export_private_key(pair.private_key)

    # Sender: encrypt for the published key
    envelope = await service.encrypt(
        "hello", service.import_public_key(public_text)
    )
    stored = envelope.to_json()

    # Recipient: decrypt
    plaintext = await service.decrypt(
        Envelope.from_json(stored), service.import_private_key(private_text)
    )

asyncio.run(main())
```

Key Features
------------
- **RSA-OAEP (SHA-256)**: Wraps a one-time AES key per message
- **AES-256-GCM**: Authenticated encryption of the message text
- **Capability-restricted keys**: Public keys only encrypt, private keys only decrypt
- **Injectable provider**: Swap the randomness source for deterministic tests
- **Memory Security**: Best-effort zeroization of symmetric keys

Modules
-------
- `crypto`: AES-256-GCM primitives and Base64 helpers
- `keys`: KeyCodec and key handles
- `envelope`: Envelope record and EnvelopeCipher
- `service`: Async service
- `provider`: Crypto provider interface
- `config`: Environment-driven configuration
- `errors`: Error types and exception classes
"""

__version__ = "0.1.0"

# ============================================================================
# Crypto Exports
# ============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AesGcmCipher,
    SecureKey,
)

# ============================================================================
# Error Exports
# ============================================================================

from .errors import (
    AuthenticationError,
    ConfigError,
    CryptoEnvironmentError,
    CryptoError,
    DecodingError,
    EncryptionError,
    EnvelopeError,
    InvalidKeyFormatError,
    KeyMismatchError,
    SerializationError,
)

# ============================================================================
# Config and Provider Exports
# ============================================================================

from .config import EnvelopeConfig

from .provider import (
    CryptoProvider,
    SystemCryptoProvider,
)

# ============================================================================
# Key Exports
# ============================================================================

from .keys import (
    KeyCodec,
    KeyPair,
    PrivateKey,
    PublicKey,
)

# ============================================================================
# Envelope Exports (Primary API)
# ============================================================================

from .envelope import (
    Envelope,
    EnvelopeCipher,
)

from .service import HybridEncryptionService

# ============================================================================
# Public API
# ============================================================================

__all__ = [
    # Version
    "__version__",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AesGcmCipher",
    "SecureKey",
    # Errors
    "EnvelopeError",
    "ConfigError",
    "CryptoEnvironmentError",
    "InvalidKeyFormatError",
    "SerializationError",
    "CryptoError",
    "EncryptionError",
    "KeyMismatchError",
    "AuthenticationError",
    "DecodingError",
    # Config and provider
    "EnvelopeConfig",
    "CryptoProvider",
    "SystemCryptoProvider",
    # Keys
    "KeyCodec",
    "KeyPair",
    "PublicKey",
    "PrivateKey",
    # Envelope (Primary API)
    "Envelope",
    "EnvelopeCipher",
    "HybridEncryptionService",
]
