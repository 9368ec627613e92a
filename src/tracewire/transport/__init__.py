from typing import Optional

from tracewire.models.sdk import SdkVersion
from tracewire.options import Options
from tracewire.transport.base import Transport
from tracewire.transport.http import HttpTransport


def make_transport(options: Options, sdk: Optional[SdkVersion] = None) -> Optional[Transport]:
    """HTTP transport when a DSN is configured, otherwise none (envelopes are dropped)."""
    if not options.dsn:
        return None
    return HttpTransport(options, sdk=sdk)


__all__ = ["Transport", "HttpTransport", "make_transport"]
