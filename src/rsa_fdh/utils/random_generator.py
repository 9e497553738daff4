"""
Random sources for blinding and key generation.

Every randomized operation takes its random source as an argument. Anything
with a `randrange` and a `getrandbits` method works: the default is
secrets.SystemRandom, which reads from the OS, and tests can pass a seeded
random.Random to get reproducible runs.
"""

import logging
import secrets

from Crypto.Util.number import GCD

logger = logging.getLogger(__name__)


def default_rng() -> secrets.SystemRandom:
    """Return a cryptographically secure random source."""
    return secrets.SystemRandom()


def random_unit(rng, n: int) -> int:
    """
    Draw r uniformly from [1, n) with gcd(r, n) == 1.

    A value sharing a factor with n cannot be inverted, so it is thrown away
    and a new one is drawn. For a real RSA modulus this practically never
    happens.
    """
    while True:
        r = rng.randrange(1, n)
        if GCD(r, n) == 1:
            return r
        logger.debug("Discarded a random value that is not invertible modulo n")


def random_bytes_function(rng):
    """Adapt a random source to the `randfunc(count) -> bytes` form pycryptodome expects."""

    def randfunc(count: int) -> bytes:
        if count == 0:
            return b""
        return rng.getrandbits(8 * count).to_bytes(count, "big")

    return randfunc
