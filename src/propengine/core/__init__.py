"""Core primitives shared across persistence, runtime and strategy layers.

Isolating these here keeps the dependency graph acyclic:

    core <- persistence <- runtime
    core <- strategy

Exports:
    RWLock: Readers-writer lock guarding the persistence file
    SharedCounter: Atomic counter shared between runner clones
    TestRng: Seeded pseudo-random stream
    Seed: Four unsigned 32-bit words

Python 3.13+.
"""

from .counter import SharedCounter
from .rng import Seed, TestRng, validate_seed
from .rwlock import RWLock

__all__ = ["RWLock", "Seed", "SharedCounter", "TestRng", "validate_seed"]
