"""
Background worker — one daemon thread draining a bounded queue of callables.

Producers (any application thread) submit without blocking; when the queue
is full the item is dropped and counted. ``flush`` is the only call that
blocks, and it is bounded by its timeout.
"""

import logging
import queue
import threading
import time
from typing import Any, Callable, Optional

from tracewire.consts import DEFAULT_MAX_QUEUE_SIZE

logger = logging.getLogger(__name__)

_TERMINATOR = object()


class BackgroundWorker:
    def __init__(self, max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE, name: str = "tracewire-worker"):
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=max_queue_size)
        self._name = name
        self._lock = threading.Lock()
        self._processed_cond = threading.Condition(self._lock)
        # Sequence numbers: flush waits for the submitted count seen at call time.
        self._submitted_seq = 0
        self._processed_seq = 0
        self._thread: Optional[threading.Thread] = None
        self._stopped = False
        self._stats = {
            "submitted": 0,
            "dropped": 0,
            "errors": 0,
        }

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._stopped or self.is_alive:
                return
            self._thread = threading.Thread(target=self._target, name=self._name, daemon=True)
            self._thread.start()

    def submit(self, callback: Callable[[], None]) -> bool:
        """Queue a callback. Returns False if it was dropped."""
        self.start()
        with self._lock:
            if self._stopped:
                self._stats["dropped"] += 1
                return False
            try:
                self._queue.put_nowait(callback)
            except queue.Full:
                logger.warning("Background queue full, dropping item")
                self._stats["dropped"] += 1
                return False
            self._submitted_seq += 1
            self._stats["submitted"] += 1
        return True

    def flush(self, timeout_seconds: float) -> bool:
        """Block until the queue is drained or the timeout elapses.

        Returns True when everything submitted before the call has been
        processed. Items submitted while waiting are not waited for.
        """
        deadline = time.monotonic() + max(0.0, timeout_seconds)
        with self._processed_cond:
            target = self._submitted_seq
            while self._processed_seq < target:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._processed_cond.wait(remaining)
        return True

    def kill(self) -> None:
        """Stop the thread once the item in progress finishes. Queued items are discarded."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            thread = self._thread
        if thread is None:
            return
        self._discard_pending()
        try:
            self._queue.put_nowait(_TERMINATOR)
        except queue.Full:
            logger.debug("Background queue full, worker will stop after the current item")

    def _discard_pending(self) -> None:
        discarded = 0
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
            discarded += 1
        if discarded:
            logger.debug(f"Discarded {discarded} queued items")
            self._mark_processed(discarded)

    def _target(self) -> None:
        while True:
            callback = self._queue.get()
            if callback is _TERMINATOR:
                return
            try:
                callback()
            except Exception as e:
                logger.error(f"Background worker item failed: {e}")
                self._count("errors")
            finally:
                self._mark_processed(1)

    def _mark_processed(self, n: int) -> None:
        with self._processed_cond:
            self._processed_seq += n
            self._processed_cond.notify_all()

    def _count(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    @property
    def queue_depth(self) -> int:
        return self._queue.qsize()

    @property
    def stats(self) -> dict[str, int]:
        with self._lock:
            return {**self._stats, "queue_depth": self.queue_depth}
