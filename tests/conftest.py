import pytest

from tracewire import Event, Options, Span, Transaction
from tracewire.testing import FakeRuntime, RecordingHub, RecordingTransport


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def hub() -> RecordingHub:
    return RecordingHub()


@pytest.fixture
def options() -> Options:
    return Options()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def event() -> Event:
    return Event.new(message="disk almost full", level="warning", tags={"host": "db-1"})


@pytest.fixture
def transaction() -> Transaction:
    return Transaction.new(
        transaction="GET /users",
        start_timestamp=1700000000.0,
        timestamp=1700000000.25,
        tags={"route": "/users"},
        spans=[
            Span(
                span_id="a1b2c3d4e5f60718",
                trace_id="0123456789abcdef0123456789abcdef",
                op="db.query",
                description="SELECT * FROM users",
                start_timestamp=1700000000.05,
                timestamp=1700000000.2,
            ),
        ],
    )
