"""Trailing-edge debounce: run a callback after a quiet period."""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading


logger = logging.getLogger(__name__)


class Debouncer:
    """Coalesce bursts of triggers into one call ``delay`` seconds after the last.

    Each :meth:`trigger` restarts the window. A non-positive delay runs the
    callback synchronously inside :meth:`trigger`. The timer runs on a daemon
    thread; callers that need determinism use :meth:`flush`.
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        # Bumped on every trigger/cancel so a superseded timer becomes a no-op
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        if self.delay <= 0:
            self.cancel()
            self._callback()
            return

        with self._lock:
            self._cancel_locked()
            generation = self._generation
            timer = threading.Timer(self.delay, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def flush(self) -> bool:
        """Run a pending callback now. Returns False when nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._cancel_locked()
        self._callback()
        return True

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
        try:
            self._callback()
        except Exception:
            logger.exception("Debounced callback failed")
