"""
Attachment payload — opaque bytes sent alongside an event.
"""

from pathlib import Path
from typing import ClassVar, Optional

from pydantic import BaseModel


class Attachment(BaseModel):
    item_type: ClassVar[str] = "attachment"

    data: bytes
    filename: str
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "Attachment":
        p = Path(path)
        return cls(
            data=p.read_bytes(),
            filename=p.name,
            content_type=content_type or "application/octet-stream",
        )
