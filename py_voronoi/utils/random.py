"""
Process-wide random number generation.

Diagram generation draws from a single Alea PRNG so that a seed fully
determines the output. Callers that do not pass their own generator get
the instance managed here.
"""

from typing import Optional

from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng: Optional[AleaPRNG] = None


def set_random_seed(seed: str) -> AleaPRNG:
    """
    Reseed the shared Alea PRNG.

    Args:
        seed: Seed string to use

    Returns:
        The freshly seeded generator
    """
    global _prng
    _prng = AleaPRNG(seed)
    return _prng


def get_prng() -> AleaPRNG:
    """
    Get the shared Alea PRNG instance, creating it on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        _prng = AleaPRNG("default")
    return _prng
