"""
Blinding and unblinding of digests.

The requester multiplies the digest by r^e before sending it to the signer.
For a random r the product is uniformly distributed, so the signer learns
nothing about the digest. Since (m * r^e)^d = m^d * r (mod n), dividing the
blind signature by r leaves a normal signature on m.
"""

from __future__ import annotations

from typing import Tuple

from Crypto.Util.number import GCD, inverse

from .errors import InputError
from .keys import FDHPublicKey, bytes_to_int, int_to_bytes, public_key_of
from .utils.random_generator import default_rng, random_unit


def blind(rng, public_key: FDHPublicKey, digest: bytes) -> Tuple[bytes, bytes]:
    """
    Blind the given digest.

    A fresh blinding factor r is drawn from `rng` on every call (pass None for
    the OS random source). Never reuse an unblinder across requests and never
    derive it from the digest.

    Returns:
        (blinded_digest, unblinder), both `public_key.size` bytes long.
    """
    key = public_key_of(public_key)
    m = bytes_to_int(digest, key)
    if rng is None:
        rng = default_rng()

    r = random_unit(rng, key.n)
    blinded = (m * pow(r, key.e, key.n)) % key.n
    return int_to_bytes(blinded, key), int_to_bytes(r, key)


def unblind(public_key: FDHPublicKey, blind_signature: bytes, unblinder: bytes) -> bytes:
    """
    Remove the blinding factor from a blind signature.

    The result is not checked here; verify it against the message afterwards.
    """
    key = public_key_of(public_key)
    s = bytes_to_int(blind_signature, key)
    r = bytes_to_int(unblinder, key)
    if r == 0 or GCD(r, key.n) != 1:
        raise InputError("unblinder is not invertible modulo n")

    return int_to_bytes((s * inverse(r, key.n)) % key.n, key)
