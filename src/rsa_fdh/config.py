"""
Configuration for the RSA-FDH schemes.

Values come from environment variables so the demo program and any service
embedding the library can be tuned without code changes:

    RSA_FDH_HASH         hash algorithm name (default SHA256)
    RSA_FDH_MAX_RETRIES  full domain hash retry bound, 0-255 (default 255)
    RSA_FDH_KEY_SIZE     modulus size in bits for generated keys (default 2048)
    RSA_FDH_LOG_LEVEL    logging level name for the demo (default WARNING)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes

from .errors import InputError

logger = logging.getLogger(__name__)

# The retry counter is fed to the hash as a single byte.
MAX_RETRIES_LIMIT = 255

HASH_ALGORITHMS = {
    "SHA224": hashes.SHA224,
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
    "SHA512_256": hashes.SHA512_256,
    "SHA3_256": hashes.SHA3_256,
    "SHA3_384": hashes.SHA3_384,
    "SHA3_512": hashes.SHA3_512,
}


def hash_algorithm_by_name(name: str) -> hashes.HashAlgorithm:
    """Return a fresh hash algorithm instance for a name like "sha256" or "SHA3-256"."""
    key = name.strip().upper().replace("-", "_")
    if key not in HASH_ALGORITHMS:
        raise InputError(f"Unsupported hash algorithm: {name}")
    return HASH_ALGORITHMS[key]()


@dataclass
class FDHConfig:
    """Settings shared by the signer and the requester side."""

    hash_algorithm: str = "SHA256"
    max_retries: int = MAX_RETRIES_LIMIT
    key_size: int = 2048
    log_level: str = "WARNING"

    def __post_init__(self):
        if not 0 <= self.max_retries <= MAX_RETRIES_LIMIT:
            raise InputError(
                f"max_retries must be between 0 and {MAX_RETRIES_LIMIT}, got {self.max_retries}"
            )
        if self.key_size < 64:
            raise InputError(f"key_size must be at least 64 bits, got {self.key_size}")
        # Fail early on a bad name instead of at the first signature.
        hash_algorithm_by_name(self.hash_algorithm)

    def algorithm(self) -> hashes.HashAlgorithm:
        return hash_algorithm_by_name(self.hash_algorithm)


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name, "")
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise InputError(f"{name} must be an integer, got {value!r}") from exc


def load_config() -> FDHConfig:
    """Build an FDHConfig from the RSA_FDH_* environment variables."""
    config = FDHConfig(
        hash_algorithm=os.getenv("RSA_FDH_HASH", "") or "SHA256",
        max_retries=_int_from_env("RSA_FDH_MAX_RETRIES", MAX_RETRIES_LIMIT),
        key_size=_int_from_env("RSA_FDH_KEY_SIZE", 2048),
        log_level=(os.getenv("RSA_FDH_LOG_LEVEL", "") or "WARNING").upper(),
    )
    logger.debug("Loaded configuration: %s", config)
    return config
