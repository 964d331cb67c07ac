"""
Broadcast coalescer — batches block-status notifications for subscribers.

A scan cycle can update hundreds of records within seconds. Notifications
are buffered and pushed as one `domains:bulk-nawala-updated` message when
either the buffer reaches `max_batch` or `flush_delay` seconds pass with no
new enqueue (debounce: every enqueue restarts the timer).

The buffer lives in memory only; a restart loses it and subscribers
re-fetch full state.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.constants.events import DOMAINS_BULK_BLOCK_STATUS_UPDATED
from app.services.notifier import Notifier
from app.utils.timers import LoopTimerFactory, TimerFactory, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_DELAY = 2.0
DEFAULT_MAX_BATCH = 50


class BroadcastCoalescer:
    def __init__(
        self,
        notifier: Notifier,
        timer_factory: Optional[TimerFactory] = None,
        flush_delay: float = DEFAULT_FLUSH_DELAY,
        max_batch: int = DEFAULT_MAX_BATCH,
    ) -> None:
        self._notifier = notifier
        self._timer_factory = timer_factory or LoopTimerFactory()
        self._flush_delay = flush_delay
        self._max_batch = max_batch
        self._pending: List[Dict[str, Any]] = []
        self._timer: Optional[TimerHandle] = None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def has_timer(self) -> bool:
        return self._timer is not None

    def enqueue(self, notification: Dict[str, Any]) -> None:
        self._pending.append(notification)

        if len(self._pending) >= self._max_batch:
            self.flush()
            return

        self._cancel_timer()
        self._timer = self._timer_factory(self._flush_delay, self._on_timer)

    def flush(self) -> int:
        """Emit everything pending as one message; returns the count sent."""
        self._cancel_timer()
        if not self._pending:
            return 0

        updates, self._pending = self._pending, []
        self._notifier.emit(
            DOMAINS_BULK_BLOCK_STATUS_UPDATED,
            {"updates": updates, "count": len(updates)},
        )
        logger.debug(f"Flushed {len(updates)} block-status update(s)")
        return len(updates)

    def close(self) -> None:
        """Flush what is buffered and drop the timer (shutdown)."""
        self.flush()

    def _on_timer(self) -> None:
        self._timer = None
        self.flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
