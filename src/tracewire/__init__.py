"""
tracewire — error and performance telemetry SDK for Python.

Payloads are packed into envelopes and queued on a background worker; a
shutdown hook flushes the queue, within a timeout, before the process exits.
"""

import logging

from tracewire.consts import VERSION
from tracewire.envelope import Envelope, EnvelopeHeader, EnvelopeItem, EnvelopeItemHeader, ItemType
from tracewire.errors import (
    ConfigurationError,
    SerializationError,
    ShutdownInProgressError,
    TracewireError,
    TransportError,
)
from tracewire.hub import Hub, flush, get_hub, init
from tracewire.integrations import Integration, ShutdownHookIntegration
from tracewire.models import Attachment, Event, Level, SdkVersion, Span, Transaction
from tracewire.options import Options
from tracewire.serializer import Serializer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = VERSION
__all__ = [
    "Attachment",
    "ConfigurationError",
    "Envelope",
    "EnvelopeHeader",
    "EnvelopeItem",
    "EnvelopeItemHeader",
    "Event",
    "Hub",
    "Integration",
    "ItemType",
    "Level",
    "Options",
    "SdkVersion",
    "SerializationError",
    "Serializer",
    "ShutdownHookIntegration",
    "ShutdownInProgressError",
    "Span",
    "TracewireError",
    "Transaction",
    "TransportError",
    "flush",
    "get_hub",
    "init",
]
