"""
Test support — fakes for the runtime, hub and transport, and envelope assertions.

    runtime = FakeRuntime()
    hub = RecordingHub()
    integration = ShutdownHookIntegration(runtime)
    integration.register(hub, Options())
    runtime.fire()
    assert hub.flush_calls == [15000]
"""

import threading
import time
from typing import Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel

from tracewire.envelope import Envelope, EnvelopeItem
from tracewire.errors import ShutdownInProgressError
from tracewire.models.event import Event
from tracewire.models.transaction import Transaction
from tracewire.serializer import Serializer, default_serializer
from tracewire.transport.base import Transport

T = TypeVar("T", bound=BaseModel)


class FakeRuntime:
    """Records hook attach/detach calls instead of touching the real process exit."""

    def __init__(self, refuse: bool = False):
        self.refuse = refuse
        self.added: list[threading.Thread] = []
        self.removed: list[threading.Thread] = []
        self._lock = threading.Lock()

    def add_shutdown_hook(self, hook: threading.Thread) -> None:
        if self.refuse:
            raise ShutdownInProgressError()
        with self._lock:
            self.added.append(hook)

    def remove_shutdown_hook(self, hook: threading.Thread) -> bool:
        with self._lock:
            self.removed.append(hook)
        return hook in self.added

    @property
    def attached(self) -> list[threading.Thread]:
        with self._lock:
            return [h for h in self.added if h not in self.removed]

    def fire(self) -> None:
        """Simulate process exit: start every attached hook and wait for it."""
        hooks = self.attached
        for hook in hooks:
            hook.start()
        for hook in hooks:
            hook.join()


class RecordingHub:
    """Stands in for a Hub where only ``flush`` matters."""

    def __init__(self, delay_seconds: float = 0.0, error: Optional[Exception] = None):
        self.delay_seconds = delay_seconds
        self.error = error
        self.flush_calls: list[Optional[int]] = []
        self._lock = threading.Lock()

    def flush(self, timeout_millis: Optional[int] = None) -> bool:
        with self._lock:
            self.flush_calls.append(timeout_millis)
        if self.error is not None:
            raise self.error
        if self.delay_seconds:
            bound = self.delay_seconds if timeout_millis is None else timeout_millis / 1000.0
            time.sleep(min(self.delay_seconds, bound))
            return self.delay_seconds <= bound
        return True


class RecordingTransport(Transport):
    """Keeps every sent envelope, in order."""

    def __init__(self, delay_seconds: float = 0.0, error: Optional[Exception] = None):
        self.delay_seconds = delay_seconds
        self.error = error
        self.envelopes: list[Envelope] = []
        self.closed = False
        self._lock = threading.Lock()

    def send(self, envelope: Envelope) -> None:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        with self._lock:
            self.envelopes.append(envelope)

    def close(self) -> None:
        self.closed = True


def assert_envelope_item(
    items: Iterable[EnvelopeItem],
    kind: type[T],
    predicate: Optional[Callable[[int, T], None]] = None,
    serializer: Optional[Serializer] = None,
) -> T:
    """Return the first item whose bytes decode as ``kind``, whatever its type tag.

    Raises AssertionError if no item decodes.
    """
    serializer = serializer or default_serializer
    for index, item in enumerate(items):
        decoded = serializer.deserialize(item.data, kind)
        if decoded is not None:
            if predicate is not None:
                predicate(index, decoded)
            return decoded
    raise AssertionError(f"No item found of type: {kind.__name__}")


def check_event(envelope: Envelope, predicate: Optional[Callable[[Event], None]] = None) -> Event:
    """Decode the first item of ``envelope`` as an event, or fail."""
    if not envelope.items:
        raise AssertionError("envelope has no items")
    event = envelope.items[0].get_event()
    if event is None:
        raise AssertionError("event is null")
    if predicate is not None:
        predicate(event)
    return event


def check_transaction(envelope: Envelope, predicate: Optional[Callable[[Transaction], None]] = None) -> Transaction:
    if not envelope.items:
        raise AssertionError("envelope has no items")
    transaction = envelope.items[0].get_transaction()
    if transaction is None:
        raise AssertionError("transaction is null")
    if predicate is not None:
        predicate(transaction)
    return transaction
