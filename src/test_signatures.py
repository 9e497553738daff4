"""
Unit tests for the regular RSA-FDH signature scheme.
"""

import logging
import random

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa

from rsa_fdh.config import MAX_RETRIES_LIMIT
from rsa_fdh.errors import HashingError, InputError, VerificationError
from rsa_fdh.hashing import FullDomainHash, hash_message
from rsa_fdh.keys import FDHPrivateKey
from rsa_fdh.signatures import FDHSignatures, sign, sign_raw, verify, verify_raw


class TestSignVerify:
    """Tests for signing and verifying messages."""

    def test_regular_sign_verify(self, key_256, message, rng):
        """Do this a bunch so that we get a good sampling of possible digests."""
        public_key = key_256.public_key()
        for i in range(500):
            data = message + b" %d" % i
            signature = sign(rng, key_256, data)
            assert len(signature) == key_256.size
            assert int.from_bytes(signature, "big") < key_256.n
            verify(public_key, data, signature)

    def test_signature_is_deterministic(self, key_256, message, rng):
        """FDH signatures have no randomness of their own."""
        assert sign(rng, key_256, message) == sign(None, key_256, message)

    def test_other_hash_algorithm(self, key_512, message, rng):
        signature = sign(rng, key_512, message, hashes.SHA512())
        verify(key_512.public_key(), message, signature, hashes.SHA512())
        with pytest.raises(VerificationError):
            verify(key_512.public_key(), message, signature, hashes.SHA256())

    def test_wrong_message_rejected(self, key_256, message, rng):
        signature = sign(rng, key_256, message)
        with pytest.raises(VerificationError):
            verify(key_256.public_key(), message + b"!", signature)

    def test_corrupted_signature_rejected(self, key_256, message, rng):
        signature = bytearray(sign(rng, key_256, message))
        signature[-1] ^= 0x01
        with pytest.raises(VerificationError):
            verify(key_256.public_key(), message, bytes(signature))

    def test_cross_key_rejected(self, key_256, key_512, other_key_256, message, rng):
        """Signatures made under one key never validate under another."""
        signature_1 = sign(rng, key_256, message)
        signature_2 = sign(rng, key_512, message)
        signature_3 = sign(rng, other_key_256, message)

        assert signature_1 != signature_2
        assert signature_1 != signature_3

        with pytest.raises(VerificationError):
            verify(key_256.public_key(), message, signature_2)
        with pytest.raises(VerificationError):
            verify(key_512.public_key(), message, signature_1)
        with pytest.raises(VerificationError):
            verify(other_key_256.public_key(), message, signature_1)
        with pytest.raises(VerificationError):
            verify(key_256.public_key(), message, signature_3)


class TestUnalignedModulus:
    """Keys whose bit length is not a multiple of 8."""

    @pytest.mark.parametrize("bits", [257, 263, 511])
    def test_sign_verify_many_messages(self, bits, message, rng):
        private_key = FDHPrivateKey.generate(bits, random.Random(bits))
        public_key = private_key.public_key()
        assert public_key.bits == bits
        for i in range(300):
            data = message + b" %d" % i
            signature = sign(rng, private_key, data)
            assert len(signature) == public_key.size
            verify(public_key, data, signature)

    def test_digest_fits_the_modulus(self, message):
        private_key = FDHPrivateKey.generate(257, random.Random(257))
        public_key = private_key.public_key()
        for i in range(100):
            digest = hash_message(public_key, message + b" %d" % i)
            assert len(digest) == 33
            assert digest[0] <= 1
            assert int.from_bytes(digest, "big") < public_key.n


class TestRetryBound:
    """The retry bound reaches the full domain hash from every entry point."""

    def test_sign_and_verify(self, key_256, message, rng, retry_bounds):
        signature = sign(rng, key_256, message, max_retries=17)
        verify(key_256.public_key(), message, signature, max_retries=17)
        assert retry_bounds == [17, 17]

    def test_hash_message(self, key_256, message, retry_bounds):
        hash_message(key_256.public_key(), message, max_retries=3)
        assert retry_bounds == [3]

    def test_default_is_the_one_byte_limit(self, key_256, message, rng, retry_bounds):
        verify(key_256.public_key(), message, sign(rng, key_256, message))
        assert retry_bounds == [MAX_RETRIES_LIMIT, MAX_RETRIES_LIMIT]

    def test_fdh_signatures(self, key_256, message, rng, retry_bounds):
        signatures = FDHSignatures(key_256, rng=rng, max_retries=9)
        assert signatures.verify(message, signatures.sign(message))
        assert retry_bounds == [9, 9]

    def test_exhausted_bound_raises(self, key_256, message, rng, monkeypatch):
        monkeypatch.setattr(FullDomainHash, "digest", lambda self, iv: b"\xff" * self.output_size)
        with pytest.raises(HashingError):
            sign(rng, key_256, message, max_retries=0)
        with pytest.raises(HashingError):
            FDHSignatures(key_256, rng=rng, max_retries=2).sign(message)

class TestRawCore:
    """Tests for the raw signer and verifier."""

    def test_sign_raw_matches_exponentiation(self, key_256, message, rng):
        digest = hash_message(key_256.public_key(), message)
        signature = sign_raw(rng, key_256, digest)
        expected = pow(int.from_bytes(digest, "big"), key_256.d, key_256.n)
        assert signature == expected.to_bytes(key_256.size, "big")
        verify_raw(key_256.public_key(), digest, signature)

    def test_sign_raw_rejects_value_not_below_modulus(self, key_256, rng):
        with pytest.raises(InputError):
            sign_raw(rng, key_256, key_256.n.to_bytes(key_256.size, "big"))

    def test_sign_raw_rejects_too_long_input(self, key_256, key_512, message, rng):
        digest = hash_message(key_512.public_key(), message)
        with pytest.raises(InputError):
            sign_raw(rng, key_256, digest)

    def test_sign_raw_requires_fdh_key(self, message, rng):
        """A general purpose RSA key cannot be used for raw signing."""
        key = rsa.generate_private_key(public_exponent=65537, key_size=1024)
        with pytest.raises(InputError):
            sign_raw(rng, key, b"\x01")

    def test_verify_raw_rejects_out_of_range_signature(self, key_256, message):
        """Malformed signatures fail like any other mismatch."""
        public_key = key_256.public_key()
        digest = hash_message(public_key, message)
        for signature in (public_key.n.to_bytes(32, "big"), b"\x00" * 33, b"\xff" * 64):
            with pytest.raises(VerificationError):
                verify_raw(public_key, digest, signature)

    def test_verify_raw_rejects_wrong_digest_length(self, key_256, key_512, message, rng):
        digest = hash_message(key_256.public_key(), message)
        signature = sign_raw(rng, key_256, digest)
        with pytest.raises(VerificationError):
            verify_raw(key_256.public_key(), digest + b"\x00", signature)
        with pytest.raises(VerificationError):
            verify_raw(key_256.public_key(), hash_message(key_512.public_key(), message), signature)

    def test_verify_raw_rejects_non_bytes_digest(self, key_256, message, rng):
        """An integer digest is a caller mistake, not a mismatch."""
        digest = hash_message(key_256.public_key(), message)
        signature = sign_raw(rng, key_256, digest)
        with pytest.raises(InputError):
            verify_raw(key_256.public_key(), 5, signature)
        with pytest.raises(InputError):
            verify_raw(key_256.public_key(), int.from_bytes(digest, "big"), signature)

    def test_verify_raw_accepts_bytearray_digest(self, key_256, message, rng):
        digest = hash_message(key_256.public_key(), message)
        signature = sign_raw(rng, key_256, digest)
        verify_raw(key_256.public_key(), bytearray(digest), signature)

    def test_failures_are_indistinguishable(self, key_256, key_512, message, rng):
        """Every failure reports the same error text."""
        public_key = key_256.public_key()
        digest = hash_message(public_key, message)
        good = sign_raw(rng, key_256, digest)
        errors = []
        for hashed, signature in (
            (digest, good[:-1] + bytes([good[-1] ^ 1])),
            (digest[:-1] + bytes([digest[-1] ^ 1]), good),
            (digest, b"\xff" * 64),
            (digest, sign(rng, key_512, message)),
        ):
            with pytest.raises(VerificationError) as exc_info:
                verify_raw(public_key, hashed, signature)
            errors.append(str(exc_info.value))
        assert set(errors) == {"invalid signature"}


class TestFDHSignatures:
    """Tests for the key-bound signature class."""

    def test_sign_and_verify(self, key_256, message, rng):
        signatures = FDHSignatures(key_256, rng=rng)
        signature = signatures.sign(message)
        assert signatures.verify(message, signature) is True

    def test_verify_returns_false_and_logs(self, key_256, message, rng, caplog):
        signatures = FDHSignatures(key_256, rng=rng)
        signature = signatures.sign(message)
        with caplog.at_level(logging.WARNING, logger="rsa_fdh.signatures"):
            assert signatures.verify(message + b" (MODIFIED)", signature) is False
        assert "invalid" in caplog.text

    def test_public_key_only(self, key_256, message, rng):
        signature = FDHSignatures(key_256, rng=rng).sign(message)
        verifier = FDHSignatures(public_key=key_256.public_key())
        assert verifier.verify(message, signature)
        with pytest.raises(InputError):
            verifier.sign(message)

    def test_mismatched_keys_rejected(self, key_256, other_key_256):
        with pytest.raises(InputError):
            FDHSignatures(key_256, other_key_256.public_key())

    def test_needs_a_key(self):
        with pytest.raises(InputError):
            FDHSignatures()

    def test_algorithm_is_used(self, key_256, message, rng):
        signatures = FDHSignatures(key_256, algorithm=hashes.SHA3_256(), rng=rng)
        signature = signatures.sign(message)
        verify(key_256.public_key(), message, signature, hashes.SHA3_256())
        assert not FDHSignatures(key_256, rng=rng).verify(message, signature)
