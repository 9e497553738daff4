"""
RSA keys for the FDH signature schemes.

The keys are thin wrappers around the RSA numbers. A blind-signing private key
signs anything it is given, so it must not be shared with encryption or any
other RSA use (see "Dangers of RSA blind signing"). Wrapping the numbers in
dedicated types keeps an FDHPrivateKey from being passed to code expecting a
general purpose `cryptography` key, and the other way around.
"""

from __future__ import annotations

import logging

from Crypto.Util.number import GCD, getPrime, inverse
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import InputError, SigningError
from .utils.random_generator import default_rng, random_bytes_function, random_unit

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_EXPONENT = 65537

# Smallest size accepted by cryptography's key generator.
MIN_SECURE_KEY_SIZE = 1024


def byte_length(n: int) -> int:
    """Number of bytes needed to hold n, i.e. ceil(bitlen(n) / 8)."""
    return (n.bit_length() + 7) // 8


class FDHPublicKey:
    """
    Public half of an RSA-FDH key: the modulus n and the exponent e.

    Used by requesters to hash and blind messages and by anyone to verify.
    """

    __slots__ = ("_n", "_e")

    def __init__(self, n: int, e: int):
        if n < 3 or n % 2 == 0:
            raise InputError("RSA modulus must be an odd integer greater than 2")
        if e < 3 or e >= n:
            raise InputError("RSA public exponent must be in the range [3, n)")
        self._n = n
        self._e = e

    @property
    def n(self) -> int:
        return self._n

    @property
    def e(self) -> int:
        return self._e

    @property
    def bits(self) -> int:
        return self._n.bit_length()

    @property
    def size(self) -> int:
        """Byte length of the modulus; every digest and signature has this length."""
        return byte_length(self._n)

    def raw_verify(self, s: int) -> int:
        """Raw public-key operation s^e mod n."""
        if not 0 <= s < self._n:
            raise InputError("signature representative out of range")
        return pow(s, self._e, self._n)

    @classmethod
    def from_cryptography(cls, key) -> "FDHPublicKey":
        """Wrap a `cryptography` RSAPublicKey or RSAPublicNumbers."""
        if isinstance(key, rsa.RSAPublicKey):
            key = key.public_numbers()
        if not isinstance(key, rsa.RSAPublicNumbers):
            raise InputError(f"Expected an RSA public key, got {type(key).__name__}")
        return cls(key.n, key.e)

    def __eq__(self, other):
        if not isinstance(other, FDHPublicKey):
            return NotImplemented
        return self._n == other._n and self._e == other._e

    def __hash__(self):
        return hash((self._n, self._e))

    def __repr__(self):
        return f"FDHPublicKey(bits={self.bits}, e={self._e})"


class FDHPrivateKey:
    """
    Private half of an RSA-FDH key.

    The only operation offered is the raw signing primitive x^d mod n. There is
    deliberately no decrypt method.
    """

    __slots__ = ("_public", "_d", "_p", "_q", "_dmp1", "_dmq1", "_iqmp")

    def __init__(self, n: int, e: int, d: int, p: int, q: int):
        if p * q != n:
            raise InputError("RSA primes do not multiply to the modulus")
        self._public = FDHPublicKey(n, e)
        self._d = d
        self._p = p
        self._q = q
        self._dmp1 = rsa.rsa_crt_dmp1(d, p)
        self._dmq1 = rsa.rsa_crt_dmq1(d, q)
        self._iqmp = rsa.rsa_crt_iqmp(p, q)
        # A wrong d would only show up as failed signatures later on.
        if pow(pow(2, e, n), d, n) != 2:
            raise InputError("RSA private exponent does not match the public exponent")

    @property
    def n(self) -> int:
        return self._public.n

    @property
    def e(self) -> int:
        return self._public.e

    @property
    def d(self) -> int:
        return self._d

    @property
    def bits(self) -> int:
        return self._public.bits

    @property
    def size(self) -> int:
        return self._public.size

    def public_key(self) -> FDHPublicKey:
        return self._public

    def _crt(self, c: int) -> int:
        m1 = pow(c, self._dmp1, self._p)
        m2 = pow(c, self._dmq1, self._q)
        h = (self._iqmp * (m1 - m2)) % self._p
        return m2 + h * self._q

    def raw_sign(self, x: int, rng=None) -> int:
        """
        Raw private-key operation x^d mod n.

        How it works:
        1. If a random source is given, x is multiplied by r^e for a fresh
           random r so the exponentiation never runs on the caller's value
        2. The exponentiation is done with the CRT parameters
        3. The blinding is removed and the result is checked with the public
           exponent before it is returned
        """
        n, e = self.n, self.e
        if not 0 <= x < n:
            raise InputError("message representative out of range")

        if rng is not None:
            r = random_unit(rng, n)
            s = (self._crt((x * pow(r, e, n)) % n) * inverse(r, n)) % n
        else:
            s = self._crt(x)

        if pow(s, e, n) != x:
            raise SigningError("RSA private-key operation failed its consistency check")
        return s

    @classmethod
    def from_cryptography(cls, key) -> "FDHPrivateKey":
        """Wrap a `cryptography` RSAPrivateKey or RSAPrivateNumbers."""
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.private_numbers()
        if not isinstance(key, rsa.RSAPrivateNumbers):
            raise InputError(f"Expected an RSA private key, got {type(key).__name__}")
        public = key.public_numbers
        return cls(public.n, public.e, key.d, key.p, key.q)

    @classmethod
    def generate(
        cls,
        bits: int,
        rng=None,
        public_exponent: int = DEFAULT_PUBLIC_EXPONENT,
    ) -> "FDHPrivateKey":
        """
        Generate a new key with a modulus of exactly `bits` bits.

        Sizes of 1024 bits and up are generated by `cryptography` (which draws
        from the OS and ignores `rng`). Smaller sizes are only good for tests
        and are built from pycryptodome primes drawn with `rng`.
        """
        if bits >= MIN_SECURE_KEY_SIZE:
            key = rsa.generate_private_key(public_exponent=public_exponent, key_size=bits)
            return cls.from_cryptography(key)

        if bits < 64:
            raise InputError(f"key size must be at least 64 bits, got {bits}")
        logger.warning("Generating an insecure %d-bit RSA key, use it for testing only", bits)

        randfunc = random_bytes_function(rng if rng is not None else default_rng())
        p_bits = bits // 2
        q_bits = bits - p_bits
        while True:
            p = getPrime(p_bits, randfunc=randfunc)
            q = getPrime(q_bits, randfunc=randfunc)
            n = p * q
            if p == q or n.bit_length() != bits:
                continue
            lam = (p - 1) * (q - 1) // GCD(p - 1, q - 1)
            if GCD(public_exponent, lam) != 1:
                continue
            d = inverse(public_exponent, lam)
            return cls(n, public_exponent, d, p, q)

    def __repr__(self):
        return f"FDHPrivateKey(bits={self.bits}, e={self.e})"


def public_key_of(key) -> FDHPublicKey:
    """Return the public key for either key type."""
    if isinstance(key, FDHPrivateKey):
        return key.public_key()
    if isinstance(key, FDHPublicKey):
        return key
    raise InputError(f"Expected an FDH key, got {type(key).__name__}")


def bytes_to_int(data: bytes, key: FDHPublicKey) -> int:
    """
    Decode a big-endian byte string that must represent a residue modulo n.

    Shorter strings are accepted (they are implicitly left-padded), longer
    ones and values >= n raise InputError.
    """
    if len(data) > key.size:
        raise InputError(f"expected at most {key.size} bytes, got {len(data)}")
    value = int.from_bytes(data, "big")
    if value >= key.n:
        raise InputError("value is not smaller than the modulus")
    return value


def int_to_bytes(value: int, key: FDHPublicKey) -> bytes:
    """Encode a residue modulo n as exactly `key.size` big-endian bytes."""
    return value.to_bytes(key.size, "big")

