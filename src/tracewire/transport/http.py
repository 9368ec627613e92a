"""
HTTP transport — posts envelope wire images to the DSN's envelope endpoint.
"""

import logging
from typing import Optional

import httpx

from tracewire.consts import ENVELOPE_CONTENT_TYPE, SDK_NAME, VERSION
from tracewire.dsn import Dsn
from tracewire.envelope import Envelope
from tracewire.errors import ConfigurationError, TransportError
from tracewire.models.sdk import SdkVersion
from tracewire.options import Options
from tracewire.serializer import Serializer, default_serializer
from tracewire.transport.base import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


class HttpTransport(Transport):
    def __init__(
        self,
        options: Options,
        sdk: Optional[SdkVersion] = None,
        client: Optional[httpx.Client] = None,
        serializer: Optional[Serializer] = None,
    ):
        if not options.dsn:
            raise ConfigurationError("HttpTransport requires a DSN")
        self._dsn = Dsn.parse(options.dsn)
        self._sdk = sdk or SdkVersion(name=SDK_NAME, version=VERSION)
        self._serializer = serializer or default_serializer
        self._client = client or httpx.Client(timeout=DEFAULT_TIMEOUT_S)
        self._stats = {"sent": 0, "failed": 0}

    @property
    def dsn(self) -> Dsn:
        return self._dsn

    @property
    def stats(self) -> dict[str, int]:
        return dict(self._stats)

    def _headers(self) -> dict[str, str]:
        client = f"{self._sdk.name}/{self._sdk.version}"
        return {
            "Content-Type": ENVELOPE_CONTENT_TYPE,
            "User-Agent": client,
            "X-Tracewire-Auth": f"tracewire_key={self._dsn.public_key}, tracewire_client={client}",
        }

    def _post(self, body: bytes) -> None:
        resp = self._client.post(self._dsn.envelope_url, content=body, headers=self._headers())
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code)

    def send(self, envelope: Envelope) -> None:
        if len(envelope) == 0:
            logger.warning("Not sending empty envelope")
            return
        body = self._serializer.serialize_envelope(envelope)
        try:
            self._post(body)
        except (TransportError, httpx.HTTPError) as e:
            self._stats["failed"] += 1
            logger.warning(f"Dropping envelope {envelope.event_id}: {e}")
            return
        self._stats["sent"] += 1
        logger.debug(f"Sent envelope {envelope.event_id} ({len(body)} bytes)")

    def close(self) -> None:
        self._client.close()
