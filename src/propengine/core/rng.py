"""Seeded pseudo-random stream for case generation.

Every generated case is driven by a TestRng built from a 128-bit seed made of
four unsigned 32-bit words. The seed alone determines the stream, which is
what lets a persisted seed reproduce the exact same generated value later.

The generator algorithm is the standard library's Mersenne Twister; only the
seeding contract matters to the engine: from_seed() maps the four words to a
single integer seed, and integer seeding is stable across processes (it is
not affected by hash randomization).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import os
import random

from propengine.constants import U32_LIMIT

__all__ = ["Seed", "TestRng", "validate_seed"]

type Seed = tuple[int, int, int, int]

_SEED_WORDS = 4


def validate_seed(seed: tuple[int, ...]) -> Seed:
    """Check that seed is four unsigned 32-bit words.

    Args:
        seed: Candidate seed

    Returns:
        The seed as a 4-tuple of ints

    Raises:
        ValueError: If the length or any word is out of range
    """
    words = tuple(seed)
    if len(words) != _SEED_WORDS:
        msg = f"Seed must have {_SEED_WORDS} words, got {len(words)}"
        raise ValueError(msg)
    for word in words:
        if not isinstance(word, int) or isinstance(word, bool) or not 0 <= word < U32_LIMIT:
            msg = f"Seed word must be an unsigned 32-bit integer, got {word!r}"
            raise ValueError(msg)
    return (words[0], words[1], words[2], words[3])


class TestRng(random.Random):
    """Random stream with an explicit 4x32-bit seeding contract.

    Subclasses random.Random, so strategies use the familiar API
    (randint, randrange, getrandbits, choice, ...).

    Example:
        >>> a = TestRng.from_seed((1, 2, 3, 4))
        >>> b = TestRng.from_seed((1, 2, 3, 4))
        >>> a.randrange(1000) == b.randrange(1000)
        True
    """

    __test__ = False

    @classmethod
    def from_seed(cls, seed: tuple[int, ...]) -> TestRng:
        """Create a stream fully determined by seed.

        Raises:
            ValueError: If seed is not four unsigned 32-bit words
        """
        words = validate_seed(seed)
        packed = 0
        for word in words:
            packed = (packed << 32) | word
        return cls(packed)

    @classmethod
    def from_entropy(cls) -> TestRng:
        """Create a stream seeded from the operating system's entropy pool."""
        return cls(int.from_bytes(os.urandom(16), "big"))

    def gen_seed(self) -> Seed:
        """Draw a fresh seed from this stream."""
        return (
            self.getrandbits(32),
            self.getrandbits(32),
            self.getrandbits(32),
            self.getrandbits(32),
        )

    def __repr__(self) -> str:
        return "<TestRng>"
