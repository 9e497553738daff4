"""
Blind signatures with RSA-FDH.

The requester gets a signature on a message while the signer only ever sees a
blinded digest. The private key **must not** be used for anything other than
blind signing: whoever can submit a blinded value can get any value signed,
including ciphertexts or digests meant for other protocols.

Example:

    digest = blind.hash_message(public_key, message)
    blinded_digest, unblinder = blind.blind(rng, public_key, digest)

    # the signer only receives blinded_digest
    blind_signature = blind.sign(rng, private_key, blinded_digest)

    signature = blind.unblind(public_key, blind_signature, unblinder)
    blind.verify(public_key, digest, signature)
"""

from __future__ import annotations

import logging
from typing import Optional

from cryptography.hazmat.primitives import hashes

from .blinding import blind, unblind
from .errors import InputError
from .hashing import hash_message
from .keys import FDHPrivateKey, FDHPublicKey, public_key_of
from .signatures import sign_blinded as sign
from .signatures import verify as verify_message
from .signatures import verify_raw as verify
from .utils.random_generator import default_rng

logger = logging.getLogger(__name__)

__all__ = [
    'hash_message',
    'blind',
    'sign',
    'unblind',
    'verify',
    'verify_message',
    'BlindSigner',
    'BlindRequester',
]


class BlindSigner:
    """
    Signer side of the blind protocol.

    Think of it like a notary who stamps sealed envelopes: the signer receives
    blinded digests, signs them and hands them back without ever learning the
    messages.
    """

    def __init__(self, private_key: FDHPrivateKey, rng=None):
        if not isinstance(private_key, FDHPrivateKey):
            raise InputError(f"Expected an FDHPrivateKey, got {type(private_key).__name__}")
        self._private_key = private_key
        self.rng = rng if rng is not None else default_rng()
        self.signed_count = 0

    @property
    def public_key(self) -> FDHPublicKey:
        return self._private_key.public_key()

    def sign(self, blinded_digest: bytes) -> bytes:
        """Sign a blinded digest and return the blind signature."""
        blind_signature = sign(self.rng, self._private_key, blinded_digest)
        self.signed_count += 1
        logger.debug("Signed blinded digest number %d", self.signed_count)
        return blind_signature


class BlindRequester:
    """
    Requester side of the blind protocol for a single message.

    Steps:
    1. prepare() hashes and blinds the message, keeping the unblinder
    2. The blinded digest goes to the signer
    3. finalize() unblinds the returned signature and checks it

    The unblinder is single-use, so an instance handles exactly one request.
    """

    def __init__(
        self,
        public_key: FDHPublicKey,
        message: bytes,
        algorithm: Optional[hashes.HashAlgorithm] = None,
        rng=None,
        max_retries: Optional[int] = None,
    ):
        self.public_key = public_key_of(public_key)
        self.message = message
        self.algorithm = algorithm if algorithm is not None else hashes.SHA256()
        self.rng = rng if rng is not None else default_rng()
        self.max_retries = max_retries
        self.digest = hash_message(self.public_key, message, self.algorithm, max_retries)
        self._blinded_digest: Optional[bytes] = None
        self._unblinder: Optional[bytes] = None
        self._finished = False

    def prepare(self) -> bytes:
        """Return the blinded digest to send to the signer."""
        if self._finished:
            raise InputError("this blind signing request has already been finalized")
        if self._blinded_digest is None:
            self._blinded_digest, self._unblinder = blind(self.rng, self.public_key, self.digest)
        return self._blinded_digest

    def finalize(self, blind_signature: bytes) -> bytes:
        """
        Unblind the signer's answer and verify it against the message.

        Raises VerificationError if the signer returned a bad signature.
        """
        if self._finished:
            raise InputError("this blind signing request has already been finalized")
        if self._unblinder is None:
            raise InputError("prepare() must be called before finalize()")

        signature = unblind(self.public_key, blind_signature, self._unblinder)
        verify_message(self.public_key, self.message, signature, self.algorithm, self.max_retries)

        self._finished = True
        self._unblinder = None
        self._blinded_digest = None
        return signature
