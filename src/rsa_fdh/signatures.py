"""
Digital signatures module.
Implements RSA signatures with Full Domain Hash padding.
"""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from cryptography.hazmat.primitives import hashes

from .errors import InputError, VerificationError
from .hashing import expand
from .keys import FDHPrivateKey, FDHPublicKey, bytes_to_int, int_to_bytes, public_key_of
from .utils.random_generator import default_rng

logger = logging.getLogger(__name__)


def sign_raw(rng, private_key: FDHPrivateKey, hashed: bytes) -> bytes:
    """
    Apply the raw private-key operation to an already hashed value.

    `hashed` is either a full domain hash digest or a blinded digest. No
    padding is applied and nothing checks where the value came from, so only
    pass values produced by `expand` or `blind`.
    """
    if not isinstance(private_key, FDHPrivateKey):
        raise InputError(f"Expected an FDHPrivateKey, got {type(private_key).__name__}")
    if rng is None:
        rng = default_rng()

    public_key = private_key.public_key()
    x = bytes_to_int(hashed, public_key)
    return int_to_bytes(private_key.raw_sign(x, rng), public_key)


# A blinded digest is signed exactly like a plain one.
sign_blinded = sign_raw


def verify_raw(public_key: FDHPublicKey, hashed: bytes, signature: bytes) -> None:
    """
    Check that `signature` is a valid signature on the hashed value.

    Raises VerificationError on any mismatch, including signatures that are
    too long or out of range for the key.
    """
    if not isinstance(hashed, (bytes, bytearray)):
        raise InputError(f"Expected the digest as bytes, got {type(hashed).__name__}")
    key = public_key_of(public_key)
    try:
        s = bytes_to_int(signature, key)
    except InputError:
        raise VerificationError() from None

    expected = int_to_bytes(key.raw_verify(s), key)
    if not hmac.compare_digest(expected, hashed):
        raise VerificationError()


def sign(
    rng,
    private_key: FDHPrivateKey,
    message: bytes,
    algorithm: Optional[hashes.HashAlgorithm] = None,
    max_retries: Optional[int] = None,
) -> bytes:
    """
    Sign a message.

    The message is hashed with the full domain hash of the signer's own
    public key before signing. The resulting signature is not a blind
    signature.
    """
    digest, _retries = expand(public_key_of(private_key), message, algorithm, max_retries)
    return sign_raw(rng, private_key, digest)


def verify(
    public_key: FDHPublicKey,
    message: bytes,
    signature: bytes,
    algorithm: Optional[hashes.HashAlgorithm] = None,
    max_retries: Optional[int] = None,
) -> None:
    """Verify a signature on a message, raising VerificationError if it does not match."""
    digest, _retries = expand(public_key, message, algorithm, max_retries)
    verify_raw(public_key, digest, signature)


class FDHSignatures:
    """
    RSA-FDH signatures bound to a key pair.

    Digital signatures prove:
    1. Data came from the owner of the private key
    2. Data hasn't been modified

    Either key may be left out: a verifier only needs the public key.
    """

    def __init__(
        self,
        private_key: Optional[FDHPrivateKey] = None,
        public_key: Optional[FDHPublicKey] = None,
        algorithm: Optional[hashes.HashAlgorithm] = None,
        rng=None,
        max_retries: Optional[int] = None,
    ):
        if private_key is None and public_key is None:
            raise InputError("FDHSignatures needs a private key, a public key or both")
        if public_key is None:
            public_key = private_key.public_key()
        elif private_key is not None and private_key.public_key() != public_key:
            raise InputError("public key does not belong to the private key")

        self.private_key = private_key
        self.public_key = public_key
        self.algorithm = algorithm if algorithm is not None else hashes.SHA256()
        self.rng = rng if rng is not None else default_rng()
        self.max_retries = max_retries

    def sign(self, data: bytes) -> bytes:
        """
        Create a signature using the RSA private key.

        How it works:
        1. Hash the data onto the full range of the modulus
        2. Apply the private-key operation to the digest
        3. Anyone can verify by applying the public key and comparing digests
        """
        if self.private_key is None:
            raise InputError("this FDHSignatures instance has no private key")
        return sign(self.rng, self.private_key, data, self.algorithm, self.max_retries)

    def verify(self, data: bytes, signature: bytes) -> bool:
        """Verify a signature using the public key."""
        try:
            verify(self.public_key, data, signature, self.algorithm, self.max_retries)
        except VerificationError:
            logger.warning("Rejected an invalid %s signature", self.algorithm.name)
            return False
        return True
