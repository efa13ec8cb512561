"""
Seed derivation and deterministic random number generation.

Every prediction is driven by a single seed derived from its inputs, so the
same guide and chromatin state always produce the same report. Arithmetic is
done modulo 2**32 explicitly; Python integers never overflow on their own.
"""

UINT32_MASK = 0xFFFFFFFF

# Linear congruential generator constants (Numerical Recipes)
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_DIVISOR = 4294967295.0  # 2**32 - 1; state 0xFFFFFFFF yields exactly 1.0


def _to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value (two's complement)."""
    value &= UINT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def derive_seed(key: str) -> int:
    """
    Derive an unsigned 32-bit seed from a string key.

    Uses the multiplicative string hash ``h = h * 31 + ord(c)`` with signed
    32-bit wraparound after each character, then folds the result into
    [0, 2**32 - 1].

    Args:
        key: Input key (the engine uses ``sequence + "|" + chromatin_state``)

    Returns:
        Seed as a non-negative integer below 2**32

    Examples:
        >>> derive_seed("A|open")
        1978829093
        >>> derive_seed("")
        0
    """
    acc = 0
    for char in key:
        acc = _to_int32(acc * 31 + ord(char))
    return acc & UINT32_MASK


def make_key(sequence: str, chromatin_state: str) -> str:
    """Build the seed key for a (sequence, chromatin state) pair."""
    return f"{sequence}|{chromatin_state}"


class DeterministicRNG:
    """
    Seeded linear congruential generator producing floats in [0, 1].

    Each call to next() advances the internal state. Instances are not
    shared between predictions and are not thread-safe.

    Example:
        >>> rng = DeterministicRNG(12345)
        >>> rng.next()
        0.02040268574385035
    """

    def __init__(self, seed: int):
        if not 0 <= seed <= UINT32_MASK:
            raise ValueError(f"Seed must be an unsigned 32-bit integer, got {seed}")
        self._state = seed

    @property
    def state(self) -> int:
        """Current 32-bit generator state."""
        return self._state

    def next(self) -> float:
        """Advance the generator and return the next value."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) & UINT32_MASK
        return self._state / LCG_DIVISOR

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.next()

    def __repr__(self) -> str:
        return f"DeterministicRNG(state={self._state})"
