"""
Shared fixtures for the RSA-FDH tests.

Run tests with: pytest -v
"""

import os
import random
import sys

import pytest

# Add this directory to the path so `rsa_fdh` imports without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rsa_fdh.keys import FDHPrivateKey

MESSAGE = b"NEVER GOING TO GIVE YOU UP"


@pytest.fixture
def message():
    return MESSAGE


@pytest.fixture
def rng():
    """A seeded random source so failures can be reproduced."""
    return random.Random(20261017)


@pytest.fixture(scope="session")
def key_256():
    # INSECURE 256 bit key, only for quick testing
    return FDHPrivateKey.generate(256, random.Random(256))


@pytest.fixture(scope="session")
def key_512():
    return FDHPrivateKey.generate(512, random.Random(512))


@pytest.fixture(scope="session")
def other_key_256():
    return FDHPrivateKey.generate(256, random.Random(1256))


@pytest.fixture
def retry_bounds(monkeypatch):
    """Record the max_retries every full domain hash search is run with."""
    from rsa_fdh.hashing import FullDomainHash

    seen = []
    search = FullDomainHash.digest_in_domain

    def recording_search(self, modulus, iv=0, max_retries=255):
        seen.append(max_retries)
        return search(self, modulus, iv, max_retries)

    monkeypatch.setattr(FullDomainHash, "digest_in_domain", recording_search)
    return seen
