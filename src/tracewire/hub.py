"""
Hub — owns the transport and the background queue for one SDK instance.

Capture methods never raise: a payload that cannot be serialized or queued
is logged and dropped. ``flush`` is the one blocking call, bounded by its
timeout, and is safe to call from any thread (the shutdown hook calls it
from its own).
"""

import logging
import threading
import time
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from tracewire.consts import SDK_NAME, VERSION
from tracewire.envelope import Envelope
from tracewire.errors import SerializationError
from tracewire.integrations import Integration, default_integrations
from tracewire.models.event import Event, Level, new_event_id, utc_now_iso
from tracewire.models.sdk import SdkVersion
from tracewire.models.transaction import Transaction
from tracewire.options import Options
from tracewire.transport import Transport, make_transport
from tracewire.worker import BackgroundWorker

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)

_DEFAULTED_FIELDS = ("release", "environment", "server_name")


class Hub:
    def __init__(self, options: Optional[Options] = None, transport: Optional[Transport] = None):
        self._options = options or Options()
        if self._options.debug:
            logging.getLogger("tracewire").setLevel(logging.DEBUG)

        self._sdk = SdkVersion(name=SDK_NAME, version=VERSION)
        self._sdk.add_package("pypi:tracewire", VERSION)
        self._transport = transport if transport is not None else make_transport(self._options, self._sdk)
        self._worker = BackgroundWorker(max_queue_size=self._options.max_queue_size)
        self._lock = threading.Lock()
        self._closed = False

        self._integrations: list[Integration] = []
        integrations = self._options.integrations
        for integration in default_integrations() if integrations is None else integrations:
            self._setup_integration(integration)

    @property
    def options(self) -> Options:
        return self._options

    @property
    def sdk(self) -> SdkVersion:
        return self._sdk

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    @property
    def integrations(self) -> tuple[Integration, ...]:
        return tuple(self._integrations)

    @property
    def is_enabled(self) -> bool:
        return not self._closed and self._transport is not None

    def _setup_integration(self, integration: Integration) -> None:
        try:
            integration.register(self, self._options)
        except Exception as e:
            logger.error(f"Integration {integration.name} failed to register: {e}")
            return
        self._integrations.append(integration)

    def _apply_defaults(self, payload: P) -> P:
        updates: dict[str, Any] = {
            name: getattr(self._options, name)
            for name in _DEFAULTED_FIELDS
            if getattr(payload, name, None) is None and getattr(self._options, name) is not None
        }
        if getattr(payload, "event_id", None) is None:
            updates["event_id"] = new_event_id()
        if isinstance(payload, Event) and payload.timestamp is None:
            updates["timestamp"] = utc_now_iso()
        return payload.model_copy(update=updates) if updates else payload

    def _capture(self, payload: BaseModel) -> Optional[str]:
        if self._closed:
            logger.debug(f"Hub closed, dropping {type(payload).__name__}")
            return None
        payload = self._apply_defaults(payload)
        try:
            envelope = Envelope.from_payload(payload, sdk=self._sdk)
        except SerializationError as e:
            logger.error(f"Dropping {type(payload).__name__}: {e}")
            return None
        if not self.capture_envelope(envelope):
            return None
        return envelope.event_id

    def capture_event(self, event: Event) -> Optional[str]:
        """Queue an event. Returns its event id, or None if it was dropped."""
        return self._capture(event)

    def capture_transaction(self, transaction: Transaction) -> Optional[str]:
        return self._capture(transaction)

    def capture_message(self, message: str, level: str = "info", **fields: Any) -> Optional[str]:
        try:
            event = Event(message=message, level=Level(level), **fields)
        except ValueError as e:
            logger.error(f"Dropping message {message!r}: {e}")
            return None
        return self._capture(event)

    def capture_exception(self, exc: BaseException, **fields: Any) -> Optional[str]:
        try:
            event = Event.from_exception(exc, **fields)
        except ValueError as e:
            logger.error(f"Dropping {type(exc).__name__}: {e}")
            return None
        return self._capture(event)

    def capture_envelope(self, envelope: Envelope) -> bool:
        """Queue a prebuilt envelope for the transport. Returns False if dropped."""
        if self._closed:
            return False
        if self._transport is None:
            logger.debug(f"No transport configured, dropping envelope {envelope.event_id}")
            return False
        if len(envelope) == 0:
            logger.warning("Not queueing empty envelope")
            return False
        if envelope.header.sdk is None:
            envelope = envelope.with_header(sdk=self._sdk)

        transport = self._transport

        def _send() -> None:
            transport.send(envelope)

        return self._worker.submit(_send)

    def flush(self, timeout_millis: Optional[int] = None) -> bool:
        """Block until queued envelopes reach the transport or the timeout elapses.

        Returns False on timeout; whatever was not delivered by then may be
        lost. Never raises.
        """
        if timeout_millis is None:
            timeout_millis = self._options.flush_timeout_millis
        deadline = time.monotonic() + timeout_millis / 1000.0
        try:
            drained = self._worker.flush(timeout_millis / 1000.0)
            if self._transport is not None:
                remaining = max(0.0, deadline - time.monotonic())
                drained = self._transport.flush(remaining) and drained
        except Exception as e:
            logger.error(f"Flush failed: {e}")
            return False
        if not drained:
            logger.debug(f"Flush timed out after {timeout_millis}ms")
        return drained

    def close(self, timeout_millis: Optional[int] = None) -> None:
        """Detach integrations, flush and release the transport. Later captures are dropped."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        for integration in self._integrations:
            try:
                integration.close()
            except Exception as e:
                logger.error(f"Integration {integration.name} failed to close: {e}")

        if timeout_millis is None:
            timeout_millis = self._options.shutdown_timeout_millis
        self.flush(timeout_millis)
        self._worker.kill()

        if self._transport is not None:
            try:
                self._transport.close()
            except Exception as e:
                logger.error(f"Transport failed to close: {e}")


_hub: Optional[Hub] = None
_hub_lock = threading.Lock()


def init(options: Optional[Options] = None, **kwargs: Any) -> Hub:
    """Create the process-wide hub, closing any previous one.

    Without explicit ``options`` they are read from the environment, with
    ``kwargs`` taking precedence.
    """
    global _hub
    if options is None:
        options = Options.from_env(**kwargs)
    hub = Hub(options)
    with _hub_lock:
        previous, _hub = _hub, hub
    if previous is not None:
        previous.close()
    return hub


def get_hub() -> Optional[Hub]:
    return _hub


def flush(timeout_millis: Optional[int] = None) -> bool:
    hub = _hub
    if hub is None:
        return True
    return hub.flush(timeout_millis)
