"""
Utility functions for the RSA-FDH schemes.
"""

from .random_generator import default_rng, random_bytes_function, random_unit

__all__ = ['default_rng', 'random_bytes_function', 'random_unit']
