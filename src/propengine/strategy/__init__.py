"""Value generation: the strategy/value-tree interfaces and basic strategies.

The engine only relies on the ValueTree interface (current, simplify,
complicate) and on Strategy.new_value(). The concrete strategies here cover
what the engine's own tests and simple properties need; richer generator
libraries can implement the same two interfaces.

Exports:
    Strategy, ValueTree - Interfaces
    integers, just, tuples - Basic strategies
    BinarySearch - Integer shrinking tree (useful for custom strategies)

Python 3.13+.
"""

from .combinators import Filter, FlatMap, Just, Map, TupleStrategy, just, tuples
from .numbers import BinarySearch, IntegerRange, integers
from .tree import Strategy, ValueTree

__all__ = [
    "BinarySearch",
    "Filter",
    "FlatMap",
    "IntegerRange",
    "Just",
    "Map",
    "Strategy",
    "TupleStrategy",
    "ValueTree",
    "integers",
    "just",
    "tuples",
]
