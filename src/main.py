"""
Entry point for the RSA-FDH demo.
This is the main file that starts the interactive application.
"""

import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rsa_fdh import blind
from rsa_fdh.blind import BlindRequester, BlindSigner
from rsa_fdh.config import load_config
from rsa_fdh.errors import FDHError
from rsa_fdh.hashing import expand
from rsa_fdh.keys import FDHPrivateKey
from rsa_fdh.signatures import FDHSignatures
from rsa_fdh.utils.random_generator import default_rng

DEMO_MESSAGE = b"NEVER GOING TO GIVE YOU UP"


def show_menu():
    """Display the interactive menu"""
    print("\n" + "=" * 60)
    print("RSA-FDH SIGNATURES - INTERACTIVE MENU")
    print("=" * 60)
    print("1. Generate a new signing key")
    print("2. Full domain hash a message")
    print("3. Sign a message")
    print("4. Verify a signature")
    print("5. Blind signing round trip")
    print("6. Run full demonstration")
    print("0. Exit")
    print("=" * 60)


def interactive_mode(config):
    """Interactive mode where the user can sign, verify and blind-sign messages."""
    print("\n" + "=" * 60)
    print("RSA-FDH SIGNATURES")
    print("=" * 60)
    print(f"\nGenerating a {config.key_size}-bit key...")

    rng = default_rng()
    private_key = FDHPrivateKey.generate(config.key_size, rng)
    signatures = make_signatures(private_key, config, rng)
    print(f"[OK] Key ready, hash function {config.hash_algorithm}")

    last_signature = None

    while True:
        show_menu()
        choice = input("\nEnter your choice (0-6): ").strip()

        if choice == "0":
            print("\nGoodbye!")
            break

        elif choice == "1":
            bits = input(f"Key size in bits [{config.key_size}]: ").strip()
            try:
                private_key = FDHPrivateKey.generate(int(bits) if bits else config.key_size, rng)
            except (ValueError, FDHError) as e:
                print(f"[ERROR] {e}")
                continue
            signatures = make_signatures(private_key, config, rng)
            last_signature = None
            print(f"[OK] Generated {private_key!r}")

        elif choice == "2":
            message = input("Enter message: ").encode("utf-8")
            try:
                digest, retries = expand(private_key.public_key(), message, config.algorithm(), config.max_retries)
            except FDHError as e:
                print(f"[ERROR] {e}")
                continue
            print(f"\nDigest ({len(digest)} bytes): {digest.hex()}")
            print(f"Retries needed to land below the modulus: {retries}")

        elif choice == "3":
            message = input("Enter message to sign: ").encode("utf-8")
            try:
                last_signature = signatures.sign(message)
            except FDHError as e:
                print(f"[ERROR] {e}")
                continue
            print(f"\nSignature (hex): {last_signature.hex()}")

        elif choice == "4":
            message = input("Enter message: ").encode("utf-8")
            signature_hex = input("Enter signature hex (empty = last signature): ").strip()
            try:
                signature = bytes.fromhex(signature_hex) if signature_hex else last_signature
            except ValueError:
                print("[ERROR] Signature must be hex encoded!")
                continue
            if signature is None:
                print("[ERROR] No signature to verify!")
                continue
            try:
                print(f"Signature valid: {signatures.verify(message, signature)}")
            except FDHError as e:
                print(f"[ERROR] {e}")

        elif choice == "5":
            message = input("Enter message to blind-sign: ").encode("utf-8")
            try:
                run_blind_round(private_key, message, config, rng)
            except FDHError as e:
                print(f"[ERROR] {e}")

        elif choice == "6":
            try:
                run_demo(config, rng)
            except FDHError as e:
                print(f"[ERROR] {e}")

        else:
            print("\n[ERROR] Invalid choice! Please enter a number between 0-6.")


def make_signatures(private_key, config, rng):
    """Bind a key to the configured hash function and retry bound."""
    return FDHSignatures(
        private_key, algorithm=config.algorithm(), rng=rng, max_retries=config.max_retries
    )


def run_blind_round(private_key, message, config, rng):
    """Run one blind signing request between a requester and a signer."""
    signer = BlindSigner(private_key, rng)
    requester = BlindRequester(
        signer.public_key, message, config.algorithm(), rng, max_retries=config.max_retries
    )

    blinded_digest = requester.prepare()
    print(f"\nDigest (kept by requester): {requester.digest.hex()}")
    print(f"Blinded digest (seen by signer): {blinded_digest.hex()}")

    blind_signature = signer.sign(blinded_digest)
    print(f"Blind signature: {blind_signature.hex()}")

    try:
        blind.verify(signer.public_key, requester.digest, blind_signature)
        print("[ERROR] Blind signature verified before unblinding!")
    except FDHError:
        print("[OK] Blind signature does not verify before unblinding")

    signature = requester.finalize(blind_signature)
    print(f"Unblinded signature: {signature.hex()}")
    print("[OK] Unblinded signature verifies against the message")
    return signature


def run_demo(config, rng):
    """Run the full demonstration of all features."""
    print("\n" + "=" * 60)
    print("FULL DEMONSTRATION")
    print("=" * 60)
    print()

    print("1. KEY GENERATION")
    print("-" * 60)
    private_key = FDHPrivateKey.generate(config.key_size, rng)
    public_key = private_key.public_key()
    print(f"  {private_key!r}, digests and signatures are {public_key.size} bytes")

    print("\n2. FULL DOMAIN HASH")
    print("-" * 60)
    digest, retries = expand(public_key, DEMO_MESSAGE, config.algorithm(), config.max_retries)
    print(f"  Message: {DEMO_MESSAGE.decode()}")
    print(f"  Digest: {digest.hex()[:64]}...")
    print(f"  Retries: {retries}")

    print("\n3. REGULAR SIGNATURE")
    print("-" * 60)
    signatures = make_signatures(private_key, config, rng)
    signature = signatures.sign(DEMO_MESSAGE)
    print(f"  Signature valid: {signatures.verify(DEMO_MESSAGE, signature)}")
    print(f"  Modified message valid: {signatures.verify(DEMO_MESSAGE + b'!', signature)}")

    print("\n4. BLIND SIGNATURE")
    print("-" * 60)
    run_blind_round(private_key, DEMO_MESSAGE, config, rng)

    print()
    print("=" * 60)
    print("DEMONSTRATION COMPLETE!")
    print("=" * 60)


def main():
    """Main function - loads configuration and starts interactive mode."""
    try:
        config = load_config()
    except FDHError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        sys.exit(1)
    logging.basicConfig(level=getattr(logging, config.log_level, logging.WARNING))
    interactive_mode(config)


if __name__ == "__main__":
    main()
