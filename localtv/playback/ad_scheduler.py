"""
Ad break scheduling on top of a RotationQueue.

After every ``frequency`` normal items a block of ads is generated and
dispensed in full before normal rotation resumes. Consecutive blocks avoid
repeating ads from the previous block when the pool is large enough.
"""

import logging
import random
from collections import deque
from collections.abc import Iterable
from typing import Generic, Optional, TypeVar

from localtv.playback.rotation_queue import RandomSource, RotationQueue, shuffle_in_place
from localtv.schemas import AdBreakConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AdBreakScheduler(Generic[T]):
    """
    Single pull interface over normal items and ad breaks.

    The wrapped RotationQueue never sees ads; ``normal_items_played`` counts
    only items it dispensed.
    """

    def __init__(
        self,
        queue: Optional[RotationQueue[T]] = None,
        config: Optional[AdBreakConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._rng: RandomSource = rng or random.Random()
        self.queue: RotationQueue[T] = queue if queue is not None else RotationQueue(self._rng)
        self._config = config or AdBreakConfig()
        self._ad_items: list[T] = []
        self._pending_block: deque[T] = deque()
        self._last_block_indices: set[int] = set()
        self._normal_items_played = 0
        self._break_taken_at = 0
        self.last_was_ad = False

    @property
    def config(self) -> AdBreakConfig:
        return self._config

    @property
    def ad_items(self) -> tuple[T, ...]:
        return tuple(self._ad_items)

    @property
    def normal_items_played(self) -> int:
        return self._normal_items_played

    @property
    def in_break(self) -> bool:
        """True while ads of the current block are still waiting to be dispensed."""
        return bool(self._pending_block)

    @property
    def pending_block(self) -> tuple[T, ...]:
        return tuple(self._pending_block)

    @property
    def last_block_indices(self) -> frozenset[int]:
        return frozenset(self._last_block_indices)

    def configure(
        self,
        frequency: Optional[int] = None,
        min_per_break: Optional[int] = None,
        max_per_break: Optional[int] = None,
        enabled: Optional[bool] = None,
    ) -> AdBreakConfig:
        """
        Update the cadence. Omitted values keep their current setting.

        Values are clamped (frequency >= 1, min >= 1, max >= min). The change
        applies from the next generated block; a block in flight is untouched.
        """
        values = self._config.model_dump()
        updates = {
            "frequency": frequency,
            "min_per_break": min_per_break,
            "max_per_break": max_per_break,
            "enabled": enabled,
        }
        values.update({key: value for key, value in updates.items() if value is not None})
        self._config = AdBreakConfig(**values)
        logger.info(
            "[ads] Configured: enabled=%s every %d item(s), %d-%d ad(s) per break",
            self._config.enabled,
            self._config.frequency,
            self._config.min_per_break,
            self._config.max_per_break,
        )
        return self._config

    def load(self, items: Iterable[T]) -> None:
        """Load normal items; the ad cadence restarts from zero."""
        self.queue.load(items)
        self._normal_items_played = 0
        self._break_taken_at = 0

    def load_ads(self, items: Iterable[T]) -> None:
        self._ad_items = list(items)
        self._last_block_indices = set()
        logger.info("[ads] Loaded %d ad(s)", len(self._ad_items))

    def clear_ads(self) -> None:
        self._ad_items = []
        self._pending_block.clear()
        self._last_block_indices = set()

    def clear(self) -> None:
        self.queue.clear()
        self._pending_block.clear()
        self._last_block_indices = set()
        self._normal_items_played = 0
        self._break_taken_at = 0
        self.last_was_ad = False

    def previous(self) -> Optional[T]:
        """Step back in the normal rotation; ads are not part of the history."""
        item = self.queue.previous()
        if item is not None:
            self.last_was_ad = False
        return item

    def next(self) -> Optional[T]:
        """Dispense the next ad of a running break, or the next normal item."""
        while True:
            if self._pending_block:
                self.last_was_ad = True
                return self._pending_block.popleft()

            if not self._break_due():
                break

            self._pending_block = deque(self._generate_block())
            self._break_taken_at = self._normal_items_played

        item = self.queue.next()
        if item is not None:
            self._normal_items_played += 1
            self.last_was_ad = False
        return item

    def _break_due(self) -> bool:
        config = self._config
        return (
            config.enabled
            and bool(self._ad_items)
            and self._normal_items_played > 0
            and self._normal_items_played % config.frequency == 0
            and self._break_taken_at != self._normal_items_played
        )

    def _generate_block(self) -> list[T]:
        config = self._config
        pool_size = len(self._ad_items)

        count = config.min_per_break + self._rng.randrange(config.max_per_break - config.min_per_break + 1)
        count = min(count, pool_size)

        candidates = list(range(pool_size))
        shuffle_in_place(candidates, self._rng)

        if pool_size > config.max_per_break:
            fresh = [index for index in candidates if index not in self._last_block_indices]
            if len(fresh) >= count:
                candidates = fresh

        chosen = candidates[:count]
        self._last_block_indices = set(chosen)
        logger.debug("[ads] Break after %d item(s): %d ad(s)", self._normal_items_played, len(chosen))
        return [self._ad_items[index] for index in chosen]
