import logging

from core.errors import PersistenceFailure

log = logging.getLogger(__name__)

SAVE_DELAY_MS = 1000


class ProgressPersister:
    """Coalesces position changes into one delayed progress write.

    Each call to ``on_position_changed`` restarts the quiet window; only the
    last position seen when the window elapses is written.
    """

    def __init__(self, scheduler, store, delay_ms=SAVE_DELAY_MS, on_failure=None):
        self.scheduler = scheduler
        self.store = store
        self.delay_ms = delay_ms
        self.on_failure = on_failure
        self._pending = None
        self._timer = None
        self.last_saved = None

    @property
    def has_pending(self):
        return self._pending is not None

    def on_position_changed(self, position):
        self._pending = position
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.scheduler.call_later(self.delay_ms, self.flush)

    def cancel(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    def flush(self):
        """Write the pending position now; returns True if a write succeeded."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        position, self._pending = self._pending, None
        if position is None:
            return False

        absolute = position.absolute
        try:
            self.store.update_reading_progress(position.document_id, absolute)
        except Exception as exc:
            failure = exc if isinstance(exc, PersistenceFailure) else PersistenceFailure("Saving reading progress", exc)
            log.warning("Could not save progress for %s: %s", position.document_id, failure)
            if self.on_failure:
                self.on_failure(failure)
            return False

        self.last_saved = (position.document_id, absolute)
        log.debug(
            "Progress saved: page %d/%d (%d/%d)",
            position.page_number,
            position.page_count,
            absolute,
            position.total_absolute_units,
        )
        return True
