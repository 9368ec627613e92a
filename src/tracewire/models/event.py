"""
Event payload — a single error or message captured by the application.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel


def new_event_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Level(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class ExceptionValue(BaseModel):
    type: str
    value: Optional[str] = None
    module: Optional[str] = None
    stacktrace: Optional[list[dict[str, Any]]] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionValue":
        return cls(type=type(exc).__name__, value=str(exc), module=type(exc).__module__)


class Event(BaseModel):
    """Envelope item type "event". Fields not sent decode to None, never to a zero value."""

    item_type: ClassVar[str] = "event"

    event_id: Optional[str] = None
    timestamp: Optional[str] = None
    type: Literal["event"] = "event"
    platform: str = "python"
    level: Optional[Level] = None
    message: Optional[str] = None
    logger: Optional[str] = None
    release: Optional[str] = None
    environment: Optional[str] = None
    server_name: Optional[str] = None
    tags: Optional[dict[str, str]] = None
    extra: Optional[dict[str, Any]] = None
    exception: Optional[list[ExceptionValue]] = None

    @classmethod
    def new(cls, **fields: Any) -> "Event":
        """Build an event stamped with a fresh id and the current time."""
        fields.setdefault("event_id", new_event_id())
        fields.setdefault("timestamp", utc_now_iso())
        return cls(**fields)

    @classmethod
    def from_exception(cls, exc: BaseException, **fields: Any) -> "Event":
        fields.setdefault("level", Level.ERROR)
        return cls.new(exception=[ExceptionValue.from_exception(exc)], **fields)
