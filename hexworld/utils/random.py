"""
Random number generation utilities.

World generation never touches Python's ``random`` module or NumPy's
global generator: every draw goes through an Alea PRNG created from the
run seed, so identical seeds give identical worlds.
"""

import uuid
from typing import Optional, Union

from ..core.alea_prng import AleaPRNG

Seed = Union[str, int]


def new_seed() -> str:
    """Fresh 8-character seed for runs that did not ask for one."""
    return str(uuid.uuid4())[:8]


def resolve_seed(seed: Optional[Seed]) -> str:
    """
    Normalize a user-provided seed.

    Integers and strings are both accepted; ``None`` picks a fresh seed.
    The normalized string is what gets reported back to the caller.
    """
    if seed is None:
        return new_seed()
    return str(seed)


def create_prng(seed: Seed) -> AleaPRNG:
    """Create the run PRNG for a seed."""
    return AleaPRNG(str(seed))
