"""
Transaction payload — a timed operation made of spans.
"""

from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel

from tracewire.models.event import new_event_id


class Span(BaseModel):
    span_id: str
    trace_id: str
    start_timestamp: float
    parent_span_id: Optional[str] = None
    op: Optional[str] = None
    description: Optional[str] = None
    timestamp: Optional[float] = None  # unset while the span is still running
    status: Optional[str] = None


class Transaction(BaseModel):
    """Envelope item type "transaction"."""

    item_type: ClassVar[str] = "transaction"

    transaction: str  # transaction name, e.g. "GET /users"
    start_timestamp: float
    event_id: Optional[str] = None
    type: Literal["transaction"] = "transaction"
    platform: str = "python"
    timestamp: Optional[float] = None
    release: Optional[str] = None
    environment: Optional[str] = None
    server_name: Optional[str] = None
    tags: Optional[dict[str, str]] = None
    contexts: Optional[dict[str, Any]] = None
    spans: list[Span] = []

    @classmethod
    def new(cls, **fields: Any) -> "Transaction":
        fields.setdefault("event_id", new_event_id())
        return cls(**fields)

    @property
    def duration(self) -> Optional[float]:
        if self.timestamp is None:
            return None
        return self.timestamp - self.start_timestamp
