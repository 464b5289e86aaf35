"""
Shuffled rotation with back/forward history.

Every item is dispensed exactly once per round; when the round is exhausted
the order is reshuffled and a new round starts. ``previous()`` walks back
through the navigation history without affecting the round, so going back
and then forward again continues with items not yet seen this round.
"""

import logging
import random
from collections.abc import Iterable, MutableSequence, Sequence
from typing import Generic, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``random.Random.randrange`` semantics for a single stop argument."""

    def randrange(self, stop: int) -> int: ...


def shuffle_in_place(values: MutableSequence, rng: RandomSource) -> None:
    """Fisher-Yates: for i from the last index down to 1, swap with j in [0, i]."""
    for i in range(len(values) - 1, 0, -1):
        j = rng.randrange(i + 1)
        values[i], values[j] = values[j], values[i]


class RotationQueue(Generic[T]):
    """
    Pseudo-random play order over a fixed list of items.

    Items are opaque to the queue. The random source can be injected for
    deterministic tests; by default each queue owns its own ``random.Random``.
    """

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self._rng: RandomSource = rng or random.Random()
        self._items: list[T] = []
        self._order: list[int] = []
        self._dispensed: set[int] = set()
        self._history: list[int] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> Sequence[T]:
        return tuple(self._items)

    @property
    def order(self) -> Sequence[int]:
        """Current shuffle, as item indices."""
        return tuple(self._order)

    @property
    def played_count(self) -> int:
        """Entries in the navigation history."""
        return len(self._history)

    @property
    def current(self) -> Optional[T]:
        """Most recently dispensed item, or None before the first ``next()``."""
        if not self._history:
            return None
        return self._items[self._history[-1]]

    def load(self, items: Iterable[T], rng: Optional[RandomSource] = None) -> None:
        """Replace the items, reshuffle, and forget all history."""
        if rng is not None:
            self._rng = rng
        self._items = list(items)
        if not self._items:
            logger.warning("[rotation] Loaded an empty item list")
        self._history = []
        self._dispensed = set()
        self._shuffle()
        logger.info("[rotation] Loaded %d item(s)", len(self._items))

    def next(self) -> Optional[T]:
        """Dispense the next item of the current round, or None when empty."""
        if not self._items:
            return None

        if len(self._dispensed) >= len(self._items):
            logger.debug("[rotation] Round of %d exhausted, reshuffling", len(self._items))
            self._dispensed = set()
            self._shuffle()

        index = self._draw()
        self._dispensed.add(index)
        self._history.append(index)
        return self._items[index]

    def previous(self) -> Optional[T]:
        """Step back one entry in the history; None when there is nothing to go back to."""
        if len(self._history) < 2:
            return None
        self._history.pop()
        return self._items[self._history[-1]]

    def reset(self) -> None:
        """Start a fresh round over the same items."""
        self._history = []
        self._dispensed = set()
        self._shuffle()

    def clear(self) -> None:
        self._items = []
        self._order = []
        self._history = []
        self._dispensed = set()

    def _shuffle(self) -> None:
        self._order = list(range(len(self._items)))
        shuffle_in_place(self._order, self._rng)

    def _draw(self) -> int:
        """Pick a not-yet-dispensed item index, uniformly over the remaining ones."""
        count = len(self._order)
        if count == 1:
            return self._order[0]

        # Rejection sampling, bounded so a degenerate source cannot stall
        for _ in range(count):
            index = self._order[self._rng.randrange(count)]
            if index not in self._dispensed:
                return index

        remaining = [index for index in self._order if index not in self._dispensed]
        return remaining[self._rng.randrange(len(remaining))]
