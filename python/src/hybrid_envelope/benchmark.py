"""
Hybrid Envelope Encryption Benchmark CLI.

Usage:
    hybrid-envelope-benchmark

Or run directly:
    python -m hybrid_envelope.benchmark

Settings are read from the environment or a .env file (see hybrid_envelope.config).
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from typing import List

from hybrid_envelope.config import EnvelopeConfig
from hybrid_envelope.errors import EnvelopeError
from hybrid_envelope.service import HybridEncryptionService

BOX_WIDTH = 68


def header_lines(title: str) -> List[str]:
    """Return a boxed section header, 70 characters wide."""
    border = "+" + "-" * BOX_WIDTH + "+"
    return [border, f"|  {title}".ljust(BOX_WIDTH + 1) + "|", border]


def _print_header(title: str) -> None:
    for line in header_lines(title):
        print(line)


async def run_benchmark() -> None:
    """Run the hybrid envelope encryption benchmark."""
    print("=== Hybrid Envelope Encryption Benchmark ===\n")

    try:
        config = EnvelopeConfig.from_env()
    except EnvelopeError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    logging.basicConfig(level=config.log_level)

    try:
        service = await HybridEncryptionService.new(config=config)
    except EnvelopeError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    # Get test quantity from user
    try:
        user_input = input("Enter number of messages to test (default: 100): ").strip()
        test_quantity = int(user_input) if user_input else 100
    except ValueError:
        test_quantity = 100
    test_quantity = max(test_quantity, 1)
    print(f"Testing with {test_quantity} messages\n")

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    # ========================================================================
    # Demo 1: Key pair generation
    # ========================================================================
    _print_header(f"Demo 1: Generate RSA-{config.rsa_key_size} Key Pairs")

    keygen_start = time.perf_counter()
    sender = await service.generate_key_pair()
    recipient = await service.generate_key_pair()
    keygen_duration = (time.perf_counter() - keygen_start) / 2

    print("[OK] Generated sender and recipient key pairs")
    print(f"[PERF] Key generation: {keygen_duration * 1000:.3f}ms per pair\n")

    # ========================================================================
    # Demo 2: Export / import
    # ========================================================================
    _print_header("Demo 2: Key Export/Import")

    export_start = time.perf_counter()
    public_text = service.export_public_key(recipient.public_key)
    private_text = service.export_private_key(recipient.private_key)
    export_time = time.perf_counter() - export_start

    import_start = time.perf_counter()
    recipient_public = service.import_public_key(public_text)
    recipient_private = service.import_private_key(private_text)
    import_time = time.perf_counter() - import_start

    print(f"[OK] Public key text: {len(public_text)} chars, private key text: {len(private_text)} chars")
    print(f"[PERF] Export: {export_time * 1000:.3f}ms | Import: {import_time * 1000:.3f}ms\n")

    # ========================================================================
    # Demo 3: Encryption/decryption
    # ========================================================================
    _print_header(f"Demo 3: Encrypt/Decrypt {test_quantity} Messages")

    plaintext = "Sensitive chat message protected by hybrid envelope encryption"

    encrypt_start = time.perf_counter()
    envelopes = []
    for i in range(test_quantity):
        envelopes.append(await service.encrypt(plaintext, recipient_public))

        if (i + 1) % 25 == 0 or (i + 1) == test_quantity:
            print(f"  Encrypted: {i + 1}/{test_quantity}")
    encrypt_duration = time.perf_counter() - encrypt_start

    decrypt_start = time.perf_counter()
    for envelope in envelopes:
        if await service.decrypt(envelope, recipient_private) != plaintext:
            print("[ERROR] Round-trip mismatch")
            sys.exit(1)
    decrypt_duration = time.perf_counter() - decrypt_start

    print(f"[OK] {test_quantity} messages encrypted/decrypted successfully")
    print(f"[PERF] Encryption: {encrypt_duration * 1000 / test_quantity:.3f}ms per message ({test_quantity / encrypt_duration:.2f} ops/sec)")
    print(f"[PERF] Decryption: {decrypt_duration * 1000 / test_quantity:.3f}ms per message ({test_quantity / decrypt_duration:.2f} ops/sec)\n")

    # ========================================================================
    # Demo 4: Key isolation
    # ========================================================================
    _print_header("Demo 4: Key Isolation Test")

    try:
        await service.decrypt(envelopes[0], sender.private_key)
        print("[ERROR] Wrong private key decrypted the message\n")
    except EnvelopeError as e:
        print(f"[OK] Wrong private key rejected: {type(e).__name__}\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("Test Configuration:")
    print(f"  - Messages tested: {test_quantity}")
    print(f"  - Key wrapping: RSA-{config.rsa_key_size} OAEP-{config.oaep_hash}")
    print("  - Payload: AES-256-GCM, one key and nonce per message")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main() -> None:
    """CLI entry point for hybrid-envelope-benchmark command."""
    asyncio.run(run_benchmark())


if __name__ == "__main__":
    main()
