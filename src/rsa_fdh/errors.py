"""
Exceptions raised by the RSA-FDH signature schemes.
"""


class FDHError(Exception):
    """Base class for every error raised by this package."""


class InputError(FDHError, ValueError):
    """
    A digest, signature or blinding value does not fit the key's modulus.

    Raised when a byte string is longer than the modulus, when its integer
    value is not smaller than the modulus, or when an unblinder cannot be
    inverted.
    """


class HashingError(FDHError):
    """The full domain hash ran out of retries before landing below the modulus."""


class SigningError(FDHError):
    """The raw private-key operation produced an inconsistent result."""


class VerificationError(FDHError):
    """
    The signature does not match.

    Every cause (wrong key, wrong message, corrupted or out of range
    signature) produces the same error and the same message, so a caller
    cannot learn how close a forged signature came.
    """

    def __init__(self):
        super().__init__("invalid signature")
