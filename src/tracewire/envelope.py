"""
Envelope and envelope items — the unit handed to a transport.

An envelope is a header plus an ordered list of items. Each item carries its
type tag and the bytes the serializer produced when the item was built; the
bytes never change afterwards, so the wire image stays stable even if the
originating payload object is mutated later.
"""

from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from tracewire.errors import SerializationError
from tracewire.models.attachment import Attachment
from tracewire.models.event import Event
from tracewire.models.sdk import SdkVersion
from tracewire.models.transaction import Transaction

if TYPE_CHECKING:
    from tracewire.serializer import Serializer

T = TypeVar("T", bound=BaseModel)


class ItemType(str, Enum):
    EVENT = "event"
    TRANSACTION = "transaction"
    ATTACHMENT = "attachment"


class EnvelopeHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: Optional[str] = None
    sent_at: Optional[str] = None
    sdk: Optional[SdkVersion] = None


class EnvelopeItemHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str  # unknown tags read off the wire are kept as-is
    length: Optional[int] = Field(default=None, ge=0)
    content_type: Optional[str] = None
    filename: Optional[str] = None


def _serializer(serializer: Optional["Serializer"]) -> "Serializer":
    if serializer is not None:
        return serializer
    from tracewire.serializer import default_serializer
    return default_serializer


class EnvelopeItem:
    """One payload inside an envelope. Immutable once built."""

    __slots__ = ("_header", "_data")

    def __init__(self, header: EnvelopeItemHeader, data: bytes):
        data = bytes(data)
        if header.length != len(data):
            header = header.model_copy(update={"length": len(data)})
        self._header = header
        self._data = data

    @property
    def header(self) -> EnvelopeItemHeader:
        return self._header

    @property
    def type(self) -> str:
        return self._header.type

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def length(self) -> int:
        return len(self._data)

    @classmethod
    def from_payload(cls, payload: BaseModel, serializer: Optional["Serializer"] = None) -> "EnvelopeItem":
        """Serialize a payload model now and freeze the resulting bytes."""
        if isinstance(payload, Attachment):
            return cls.from_attachment(payload)
        data = _serializer(serializer).serialize(payload)
        if data is None:
            raise SerializationError(f"Could not serialize {type(payload).__name__}")
        item_type = getattr(payload, "item_type", type(payload).__name__.lower())
        return cls(EnvelopeItemHeader(type=item_type, content_type="application/json"), data)

    @classmethod
    def from_event(cls, event: Event, serializer: Optional["Serializer"] = None) -> "EnvelopeItem":
        return cls.from_payload(event, serializer)

    @classmethod
    def from_transaction(cls, transaction: Transaction, serializer: Optional["Serializer"] = None) -> "EnvelopeItem":
        return cls.from_payload(transaction, serializer)

    @classmethod
    def from_attachment(cls, attachment: Attachment) -> "EnvelopeItem":
        header = EnvelopeItemHeader(
            type=ItemType.ATTACHMENT.value,
            content_type=attachment.content_type,
            filename=attachment.filename,
        )
        return cls(header, attachment.data)

    def get_typed(self, kind: Type[T], serializer: Optional["Serializer"] = None) -> Optional[T]:
        """Decode this item as ``kind``. None if the type tag differs or the bytes don't fit."""
        if self.type != getattr(kind, "item_type", None):
            return None
        if kind is Attachment:
            return self.get_attachment()  # type: ignore[return-value]
        return _serializer(serializer).deserialize(self._data, kind)

    def get_event(self, serializer: Optional["Serializer"] = None) -> Optional[Event]:
        return self.get_typed(Event, serializer)

    def get_transaction(self, serializer: Optional["Serializer"] = None) -> Optional[Transaction]:
        return self.get_typed(Transaction, serializer)

    def get_attachment(self) -> Optional[Attachment]:
        if self.type != ItemType.ATTACHMENT.value:
            return None
        return Attachment(
            data=self._data,
            filename=self._header.filename or "",
            content_type=self._header.content_type or "application/octet-stream",
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnvelopeItem):
            return NotImplemented
        return self._header == other._header and self._data == other._data

    def __hash__(self) -> int:
        return hash((self._header.type, self._data))

    def __repr__(self) -> str:
        return f"EnvelopeItem(type={self.type!r}, length={self.length})"


class Envelope:
    """Ordered batch of items. The first item is conventionally the primary payload."""

    def __init__(self, header: Optional[EnvelopeHeader] = None, items: Optional[Iterable[EnvelopeItem]] = None):
        self._header = header or EnvelopeHeader()
        self._items: list[EnvelopeItem] = list(items or [])

    @property
    def header(self) -> EnvelopeHeader:
        return self._header

    @property
    def event_id(self) -> Optional[str]:
        return self._header.event_id

    @property
    def items(self) -> tuple[EnvelopeItem, ...]:
        return tuple(self._items)

    def add(self, item: EnvelopeItem) -> "Envelope":
        self._items.append(item)
        return self

    def add_payload(self, payload: BaseModel, serializer: Optional["Serializer"] = None) -> "Envelope":
        return self.add(EnvelopeItem.from_payload(payload, serializer))

    def get_typed(self, kind: Type[T], serializer: Optional["Serializer"] = None) -> Optional[T]:
        """Decode the first item tagged as ``kind``.

        Only the first positional match is considered; if it fails to decode
        the result is None even when a later item of the same type would
        decode. Iterate ``items`` to see every match.
        """
        tag = getattr(kind, "item_type", None)
        for item in self._items:
            if item.type == tag:
                return item.get_typed(kind, serializer)
        return None

    def get_event(self, serializer: Optional["Serializer"] = None) -> Optional[Event]:
        return self.get_typed(Event, serializer)

    def get_transaction(self, serializer: Optional["Serializer"] = None) -> Optional[Transaction]:
        return self.get_typed(Transaction, serializer)

    @classmethod
    def from_payload(
        cls,
        payload: BaseModel,
        sdk: Optional[SdkVersion] = None,
        serializer: Optional["Serializer"] = None,
    ) -> "Envelope":
        header = EnvelopeHeader(event_id=getattr(payload, "event_id", None), sdk=sdk)
        return cls(header, [EnvelopeItem.from_payload(payload, serializer)])

    @classmethod
    def from_event(cls, event: Event, sdk: Optional[SdkVersion] = None,
                   serializer: Optional["Serializer"] = None) -> "Envelope":
        return cls.from_payload(event, sdk, serializer)

    @classmethod
    def from_transaction(cls, transaction: Transaction, sdk: Optional[SdkVersion] = None,
                         serializer: Optional["Serializer"] = None) -> "Envelope":
        return cls.from_payload(transaction, sdk, serializer)

    def with_header(self, **fields: object) -> "Envelope":
        """Copy of this envelope with header fields replaced; items are shared."""
        return Envelope(self._header.model_copy(update=fields), self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[EnvelopeItem]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        types = [item.type for item in self._items]
        return f"Envelope(event_id={self.event_id!r}, items={types!r})"
