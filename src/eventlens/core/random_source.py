"""
EventLens Random Source

Seeded pseudo-random sequence used by every synthetic producer. The
generator is Mulberry32: an additive Weyl step followed by two
multiply/xor-shift scrambles, all on unsigned 32-bit integers, so the same
seed yields the same sequence on any platform or language.
"""

from typing import Callable, Sequence, TypeVar

UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296  # 2^32
WEYL_INCREMENT = 0x6D2B79F5

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low 32 bits"""
    return (a * b) & UINT32_MASK


class SeededRandom:
    """
    Mulberry32 state machine

    Seeds are reduced modulo 2^32, so negative seeds wrap. Seed 0 is safe:
    the Weyl step moves the state off zero before the first scramble.
    """

    __slots__ = ("seed", "_state")

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._state = self.seed & UINT32_MASK

    def next_uint32(self) -> int:
        self._state = (self._state + WEYL_INCREMENT) & UINT32_MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & UINT32_MASK
        return (t ^ (t >> 14)) & UINT32_MASK

    def next(self) -> float:
        """Next value in [0, 1)"""
        return self.next_uint32() / UINT32_RANGE

    def index(self, n: int) -> int:
        """Draw one value and map it to an index in range(n)"""
        return int(self.next() * n)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.index(len(items))]


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a `next()` function over a fresh generator for `seed`"""
    return SeededRandom(seed).next
