from dataclasses import dataclass
from typing import List, Sequence, TypeVar

T = TypeVar("T")

A = 16807
M = 0x7FFFFFFF  # 2^31-1
BASE_SEED = 0x0B6E755A  # stand-in for seeds that hash to zero

def pm_next(state: int) -> int:
    return (state * A) % M

def seed_from_string(seed: str) -> int:
    """
    Fold an arbitrary string into a Park–Miller start state (1..M-1).
    Polynomial hash over code points, so it does not depend on PYTHONHASHSEED.
    """
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    h %= M
    return h if h else BASE_SEED

@dataclass
class PMRandom:
    state: int

    @classmethod
    def from_seed(cls, seed: str) -> "PMRandom":
        return cls(seed_from_string(seed))

    def next32(self) -> int:
        self.state = pm_next(self.state)
        return self.state

    def next_float(self) -> float:
        # states live in 1..M-1, so this is 0 <= f < 1
        return (self.next32() - 1) / (M - 1)

    def next_int(self, lo: int, hi: int) -> int:
        """Inclusive on both ends."""
        if hi < lo:
            raise ValueError(f"empty range [{lo}, {hi}]")
        return lo + int(self.next_float() * (hi - lo + 1))

    def chance(self, p: float) -> bool:
        return self.next_float() < p

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("choice from empty sequence")
        return seq[self.next_int(0, len(seq) - 1)]

    def shuffle(self, items: List[T]) -> None:
        # Fisher–Yates from the back, in place
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(0, i)
            items[i], items[j] = items[j], items[i]
