"""
Shared utilities.
"""

from .random import create_prng, new_seed, resolve_seed

__all__ = ["create_prng", "new_seed", "resolve_seed"]
