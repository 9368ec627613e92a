"""
Payload codec — JSON encoding of payloads and the envelope wire image.

Wire image, newline delimited:

    {"event_id":"…","sent_at":"…","sdk":{…}}
    {"type":"event","length":41,"content_type":"application/json"}
    <41 payload bytes>
    {"type":"attachment","length":5,"filename":"a.txt"}
    <5 payload bytes>

Payloads are read by their declared length, so binary attachments may
contain newlines. An item header without a length runs to the next newline.
"""

import logging
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from tracewire.envelope import Envelope, EnvelopeHeader, EnvelopeItem, EnvelopeItemHeader
from tracewire.models.event import utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

NEWLINE = b"\n"


class Serializer:
    def serialize(self, payload: BaseModel) -> Optional[bytes]:
        """Encode a payload model. Returns None (and logs) instead of raising."""
        try:
            return payload.model_dump_json(exclude_none=True).encode("utf-8")
        except Exception as e:
            logger.error(f"Failed to serialize {type(payload).__name__}: {e}")
            return None

    def deserialize(self, data: bytes, kind: type[T]) -> Optional[T]:
        """Decode ``data`` as ``kind``. Returns None if the bytes don't fit that kind."""
        try:
            return kind.model_validate_json(data)
        except ValidationError:
            return None

    def serialize_envelope(self, envelope: Envelope) -> bytes:
        header = envelope.header
        if header.sent_at is None:
            header = header.model_copy(update={"sent_at": utc_now_iso()})
        parts = [header.model_dump_json(exclude_none=True).encode("utf-8"), NEWLINE]
        for item in envelope.items:
            parts.append(item.header.model_dump_json(exclude_none=True).encode("utf-8"))
            parts.append(NEWLINE)
            parts.append(item.data)
            parts.append(NEWLINE)
        return b"".join(parts)

    def deserialize_envelope(self, data: bytes) -> Optional[Envelope]:
        """Parse a wire image. Truncated or corrupt input yields None."""
        try:
            return self._read_envelope(bytes(data))
        except (ValidationError, ValueError) as e:
            logger.debug(f"Discarding unreadable envelope: {e}")
            return None

    def _read_envelope(self, data: bytes) -> Envelope:
        end = _line_end(data, 0)
        envelope = Envelope(EnvelopeHeader.model_validate_json(data[:end]))
        pos = end + 1
        while pos < len(data):
            end = _line_end(data, pos)
            line = data[pos:end]
            if not line.strip():
                pos = end + 1
                continue
            item_header = EnvelopeItemHeader.model_validate_json(line)
            start = end + 1
            if item_header.length is None:
                stop = _line_end(data, start)
            else:
                stop = start + item_header.length
                if stop > len(data):
                    raise ValueError(f"truncated {item_header.type} item: expected {item_header.length} bytes")
            if data[stop:stop + 1] not in (NEWLINE, b""):
                raise ValueError(f"missing terminator after {item_header.type} item")
            envelope.add(EnvelopeItem(item_header, data[start:stop]))
            pos = stop + 1
        return envelope


def _line_end(data: bytes, start: int) -> int:
    end = data.find(NEWLINE, start)
    return len(data) if end < 0 else end


default_serializer = Serializer()
