"""
Full Domain Hash.

A plain hash like SHA-256 only covers 256 bits, but an RSA signature needs a
value spread over the whole range [0, n). The full domain hash stretches the
hash output to the byte length of the modulus and retries until the result is
smaller than n.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from cryptography.hazmat.primitives import hashes

from .config import MAX_RETRIES_LIMIT
from .errors import HashingError, InputError
from .keys import FDHPublicKey, public_key_of

logger = logging.getLogger(__name__)

# Block indexes are fed to the hash as a single byte.
MAX_BLOCKS = 256


class FullDomainHash:
    """
    Hash of arbitrary output length built on top of a fixed-size hash.

    For a given iv the output is:

        H(data || iv || 0) || H(data || iv || 1) || ...   truncated to output_size

    Any `cryptography` hash algorithm can be used, e.g. hashes.SHA256().
    """

    def __init__(self, output_size: int, algorithm: Optional[hashes.HashAlgorithm] = None):
        if output_size < 1:
            raise InputError(f"output size must be positive, got {output_size}")
        self.algorithm = algorithm if algorithm is not None else hashes.SHA256()
        blocks = -(-output_size // self.algorithm.digest_size)
        if blocks > MAX_BLOCKS:
            raise InputError(
                f"{self.algorithm.name} cannot produce {output_size} bytes, "
                f"at most {MAX_BLOCKS * self.algorithm.digest_size} are possible"
            )
        self.output_size = output_size
        self._blocks = blocks
        self._inner = hashes.Hash(self.algorithm)

    def update(self, data: bytes) -> "FullDomainHash":
        self._inner.update(data)
        return self

    def digest(self, iv: int) -> bytes:
        """Produce output_size bytes for the given iv without consuming the hasher."""
        if not 0 <= iv <= MAX_RETRIES_LIMIT:
            raise InputError(f"iv must fit in one byte, got {iv}")
        seeded = self._inner.copy()
        seeded.update(bytes([iv]))

        output = b""
        for index in range(self._blocks):
            block = seeded.copy()
            block.update(bytes([index]))
            output += block.finalize()
        return output[: self.output_size]

    def digest_in_domain(
        self,
        modulus: int,
        iv: int = 0,
        max_retries: int = MAX_RETRIES_LIMIT,
    ) -> Tuple[bytes, int]:
        """
        Return the first digest whose big-endian value is below `modulus`.

        Bits above the bit length of `modulus` are cleared first, so a
        modulus that does not fill its top byte still succeeds at least half
        of the time per attempt. Starting from `iv`, the counter is
        incremented after every digest that is too large. The result is
        deterministic, so a verifier recomputes the same digest without
        knowing the final iv.

        Returns:
            (digest, iv) where iv is the counter that produced the digest.
        """
        if not 0 <= max_retries <= MAX_RETRIES_LIMIT:
            raise InputError(f"max_retries must be between 0 and {MAX_RETRIES_LIMIT}")
        mask = (1 << modulus.bit_length()) - 1
        while iv <= max_retries:
            value = int.from_bytes(self.digest(iv), "big") & mask
            if value < modulus:
                if iv:
                    logger.debug("Full domain hash landed below the modulus after %d retries", iv)
                return value.to_bytes(self.output_size, "big"), iv
            iv += 1
        raise HashingError(f"no digest below the modulus within {max_retries} retries")


def expand(
    public_key: FDHPublicKey,
    message: bytes,
    algorithm: Optional[hashes.HashAlgorithm] = None,
    max_retries: Optional[int] = None,
) -> Tuple[bytes, int]:
    """
    Hash a message onto the RSA domain of `public_key`.

    The digest is exactly `public_key.size` bytes long and its value is
    smaller than the modulus. The retry count is only informative: verifiers
    find the same digest by running the same search.
    """
    key = public_key_of(public_key)
    hasher = FullDomainHash(key.size, algorithm)
    hasher.update(message)
    if max_retries is None:
        max_retries = MAX_RETRIES_LIMIT
    return hasher.digest_in_domain(key.n, 0, max_retries)


def hash_message(
    public_key: FDHPublicKey,
    message: bytes,
    algorithm: Optional[hashes.HashAlgorithm] = None,
    max_retries: Optional[int] = None,
) -> bytes:
    """Hash a message as a Full Domain Hash, dropping the retry count."""
    digest, _retries = expand(public_key, message, algorithm, max_retries)
    return digest
