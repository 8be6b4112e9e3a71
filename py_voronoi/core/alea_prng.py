"""
Alea pseudo random number generator.

Based on Johannes Baagøe's Alea algorithm. Seeding with the same string
always yields the same sequence, which makes every generated diagram
reproducible from its seed.
"""

from typing import Sequence, TypeVar

T = TypeVar("T")


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Seedable Alea generator producing floats in [0, 1).

    Seeds may be strings, numbers or an iterable of either.
    """

    def __init__(self, seed):
        """Initialize with seed string or number."""
        self.call_count = 0
        self.seed = seed

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash_n = 0xEFC8249D

        def mash(data):
            nonlocal mash_n
            data = str(data)
            for char in data:
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * 0x100000000  # 2^32
            return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def randint(self, lo: int, hi: int) -> int:
        """Random integer in the inclusive range [lo, hi]."""
        if hi < lo:
            raise ValueError(f"Empty range [{lo}, {hi}]")
        # min() guards against float rounding landing exactly on the span
        return lo + min(int(self.random() * (hi - lo + 1)), hi - lo)

    def uniform(self, lo: float, hi: float) -> float:
        """Random float in [lo, hi)."""
        return lo + self.random() * (hi - lo)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]
