"""
Idempotency guard for webhook redeliveries.

GitHub may deliver the same event more than once (manual redelivery, timeouts
on our side). Each attempt carries the same X-GitHub-Delivery id, so the ids of
recently accepted deliveries are kept in memory and checked before new work is
scheduled.
"""

import threading
from collections import deque

import structlog

from pr_describer.core.constants import MAX_DELIVERY_IDS

logger = structlog.get_logger(__name__)


class DeliveryDeduplicator:
    """
    Bounded set of recently seen delivery ids with FIFO eviction.

    The deque keeps insertion order for eviction, the set gives O(1) lookups.
    Lookups never refresh an id's position: the oldest inserted id is always
    the next one evicted.
    """

    def __init__(self, max_size: int = MAX_DELIVERY_IDS):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._order: deque[str] = deque()
        self._ids: set[str] = set()
        self._lock = threading.Lock()

    def seen(self, delivery_id: str) -> bool:
        """Return True if the delivery id was remembered and not yet evicted."""
        return delivery_id in self._ids

    def remember(self, delivery_id: str) -> None:
        """Insert a delivery id, evicting the oldest one when over capacity."""
        with self._lock:
            if delivery_id in self._ids:
                return
            self._order.append(delivery_id)
            self._ids.add(delivery_id)
            if len(self._order) > self.max_size:
                evicted = self._order.popleft()
                self._ids.discard(evicted)
                logger.debug("delivery_id_evicted", delivery_id=evicted)

    def __contains__(self, delivery_id: object) -> bool:
        return delivery_id in self._ids

    def __len__(self) -> int:
        return len(self._order)
