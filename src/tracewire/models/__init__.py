from tracewire.models.attachment import Attachment
from tracewire.models.event import Event, ExceptionValue, Level
from tracewire.models.sdk import SdkPackage, SdkVersion
from tracewire.models.transaction import Span, Transaction

__all__ = [
    "Attachment",
    "Event",
    "ExceptionValue",
    "Level",
    "SdkPackage",
    "SdkVersion",
    "Span",
    "Transaction",
]
