"""Hub capture, flush and close."""

import threading
import time

import pytest

import tracewire
from tracewire import Envelope, Event, Hub, Options, ShutdownHookIntegration, Transaction
from tracewire.testing import FakeRuntime, RecordingTransport, check_event, check_transaction


def make_hub(transport, **kwargs) -> Hub:
    kwargs.setdefault("integrations", [])
    return Hub(Options(**kwargs), transport=transport)


def test_capture_event_reaches_transport(transport, event):
    hub = make_hub(transport)

    event_id = hub.capture_event(event)
    assert hub.flush(5000)

    assert event_id == event.event_id
    assert len(transport.envelopes) == 1
    sent = transport.envelopes[0]
    assert sent.event_id == event.event_id
    assert sent.header.sdk.name == "tracewire.python"
    assert check_event(sent).message == "disk almost full"
    hub.close()


def test_capture_transaction(transport, transaction):
    hub = make_hub(transport)

    hub.capture_transaction(transaction)
    hub.flush(5000)

    assert check_transaction(transport.envelopes[0]).transaction == "GET /users"
    hub.close()


def test_options_fill_unset_fields(transport):
    hub = make_hub(transport, release="1.2.0", environment="staging")

    hub.capture_event(Event(message="hi", environment="prod"))
    hub.flush(5000)

    event = check_event(transport.envelopes[0])
    assert event.release == "1.2.0"
    assert event.environment == "prod"
    hub.close()


def test_capture_message_and_exception(transport):
    hub = make_hub(transport)

    hub.capture_message("hello", level="warning")
    try:
        raise KeyError("missing")
    except KeyError as e:
        hub.capture_exception(e)
    hub.flush(5000)

    message, error = (check_event(env) for env in transport.envelopes)
    assert message.level == "warning"
    assert error.level == "error"
    assert error.exception[0].type == "KeyError"
    hub.close()


def test_invalid_message_fields_are_dropped(transport, caplog):
    hub = make_hub(transport)

    assert hub.capture_message("hi", level="warn") is None
    assert hub.capture_message("hi", tags="not-a-dict") is None
    assert hub.capture_exception(KeyError("x"), level="loud") is None
    hub.flush(5000)

    assert transport.envelopes == []
    assert "Dropping" in caplog.text
    hub.close()


def test_captured_event_gets_id_and_timestamp(transport):
    hub = make_hub(transport)

    event_id = hub.capture_event(Event(message="bare"))
    hub.flush(5000)

    sent = check_event(transport.envelopes[0])
    assert event_id is not None
    assert sent.event_id == event_id
    assert sent.timestamp is not None
    hub.close()


def test_unserializable_event_is_dropped(transport):
    hub = make_hub(transport)

    assert hub.capture_event(Event(extra={"handle": object()})) is None
    hub.flush(5000)

    assert transport.envelopes == []
    hub.close()


def test_empty_envelope_not_queued(transport):
    hub = make_hub(transport)
    assert hub.capture_envelope(Envelope()) is False
    hub.close()


def test_no_transport_drops():
    hub = Hub(Options(integrations=[]))
    assert hub.transport is None
    assert hub.is_enabled is False
    assert hub.capture_message("nowhere") is None
    assert hub.flush(0) is True
    hub.close()


def test_flush_times_out_with_slow_transport(event):
    transport = RecordingTransport(delay_seconds=0.5)
    hub = make_hub(transport)
    hub.capture_event(event)

    started = time.monotonic()
    assert hub.flush(50) is False
    assert time.monotonic() - started < 0.45

    assert hub.flush(5000) is True
    assert len(transport.envelopes) == 1
    hub.close()


def test_flush_uses_configured_timeout_by_default(event):
    transport = RecordingTransport(delay_seconds=0.3)
    hub = make_hub(transport, flush_timeout_millis=10)
    hub.capture_event(event)

    assert hub.flush() is False
    hub.close(timeout_millis=5000)


def test_flush_concurrent_with_producers(transport):
    hub = make_hub(transport, max_queue_size=1000)
    stop = threading.Event()

    def produce():
        while not stop.is_set():
            hub.capture_message("tick")
            time.sleep(0.001)

    producers = [threading.Thread(target=produce) for _ in range(4)]
    for p in producers:
        p.start()
    time.sleep(0.05)

    hub.flush(2000)
    stop.set()
    for p in producers:
        p.join()

    assert hub.flush(5000) is True
    assert all(env.items[0].type == "event" for env in transport.envelopes)
    hub.close()


def test_flush_returns_while_producers_keep_capturing():
    transport = RecordingTransport(delay_seconds=0.02)
    hub = make_hub(transport, max_queue_size=10)
    stop = threading.Event()

    def produce():
        while not stop.is_set():
            hub.capture_message("tick")
            time.sleep(0.001)

    producer = threading.Thread(target=produce)
    producer.start()
    try:
        time.sleep(0.05)
        started = time.monotonic()
        assert hub.flush(5000) is True
        assert time.monotonic() - started < 2.5
    finally:
        stop.set()
        producer.join()
    hub.close()


def test_transport_errors_are_contained(event):
    transport = RecordingTransport(error=RuntimeError("connection reset"))
    hub = make_hub(transport)

    assert hub.capture_event(event) == event.event_id
    assert hub.flush(5000) is True
    hub.close()


def test_close_is_idempotent_and_drops_later_captures(transport, event):
    hub = make_hub(transport)
    hub.close()
    hub.close()

    assert transport.closed
    assert hub.capture_event(event) is None
    assert hub.is_enabled is False


def test_default_integrations_register_shutdown_hook(transport):
    hub = Hub(Options(), transport=transport)
    try:
        assert [type(i) for i in hub.integrations] == [ShutdownHookIntegration]
        assert hub.integrations[0].hook is not None
    finally:
        hub.close()
    assert hub.integrations[0].hook is None


def test_shutdown_hook_flushes_hub(event):
    runtime = FakeRuntime()
    transport = RecordingTransport(delay_seconds=0.05)
    hub = Hub(Options(integrations=[ShutdownHookIntegration(runtime)]), transport=transport)
    hub.capture_event(event)

    runtime.fire()

    assert len(transport.envelopes) == 1
    hub.close()
    assert len(runtime.removed) == 1


def test_failing_integration_is_skipped(transport):
    class Broken(tracewire.Integration):
        name = "broken"

        def register(self, hub, options):
            raise RuntimeError("nope")

    hub = make_hub(transport, integrations=[Broken()])
    assert hub.integrations == ()
    hub.close()


class TestProcessHub:
    @pytest.fixture(autouse=True)
    def reset(self, monkeypatch):
        monkeypatch.setattr("tracewire.hub._hub", None)
        yield
        hub = tracewire.get_hub()
        if hub is not None:
            hub.close()

    def test_init_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TRACEWIRE_RELEASE", "9.9.9")
        hub = tracewire.init(integrations=[])
        assert hub.options.release == "9.9.9"
        assert tracewire.get_hub() is hub

    def test_init_replaces_previous_hub(self):
        first = tracewire.init(Options(integrations=[]))
        second = tracewire.init(Options(integrations=[]))
        assert tracewire.get_hub() is second
        assert first.is_enabled is False
        assert first.capture_message("late") is None

    def test_flush_without_hub(self):
        assert tracewire.flush(0) is True
