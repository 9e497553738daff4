"""
RSA-FDH signature schemes.

1. A regular signature scheme with Full Domain Hash (FDH) padding:
   `sign` / `verify` on messages.
2. A blind signature scheme that keeps the message secret from the signer:
   see the `blind` submodule.
"""

from . import blind
from .blinding import blind as blind_digest, unblind
from .blind import BlindRequester, BlindSigner
from .config import FDHConfig, load_config
from .errors import FDHError, HashingError, InputError, SigningError, VerificationError
from .hashing import FullDomainHash, expand, hash_message
from .keys import FDHPrivateKey, FDHPublicKey
from .signatures import FDHSignatures, sign, sign_blinded, sign_raw, verify, verify_raw

__all__ = [
    'blind',
    'blind_digest',
    'unblind',
    'BlindRequester',
    'BlindSigner',
    'FDHConfig',
    'load_config',
    'FDHError',
    'HashingError',
    'InputError',
    'SigningError',
    'VerificationError',
    'FullDomainHash',
    'expand',
    'hash_message',
    'FDHPrivateKey',
    'FDHPublicKey',
    'FDHSignatures',
    'sign',
    'sign_blinded',
    'sign_raw',
    'verify',
    'verify_raw',
]
