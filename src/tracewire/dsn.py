"""
DSN parsing — ``https://<public_key>@<host>[:<port>][/<path>]/<project_id>``.
"""

from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

from tracewire.errors import ConfigurationError


class Dsn(BaseModel):
    model_config = ConfigDict(frozen=True)

    scheme: str
    public_key: str
    host: str
    port: Optional[int] = None
    path: str = ""
    project_id: str

    @classmethod
    def parse(cls, value: str) -> "Dsn":
        try:
            parts = urlsplit(value)
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid DSN: {e}", {"dsn": value})
        if parts.scheme not in ("http", "https"):
            raise ConfigurationError(f"Unsupported DSN scheme: {parts.scheme!r}", {"dsn": value})
        if not parts.username:
            raise ConfigurationError("DSN is missing a public key", {"dsn": value})
        if not parts.hostname:
            raise ConfigurationError("DSN is missing a host", {"dsn": value})
        path, _, project_id = parts.path.rstrip("/").rpartition("/")
        if not project_id:
            raise ConfigurationError("DSN is missing a project id", {"dsn": value})
        return cls(
            scheme=parts.scheme,
            public_key=parts.username,
            host=parts.hostname,
            port=port,
            path=path,
            project_id=project_id,
        )

    @property
    def netloc(self) -> str:
        return f"{self.host}:{self.port}" if self.port else self.host

    @property
    def envelope_url(self) -> str:
        return f"{self.scheme}://{self.netloc}{self.path}/api/{self.project_id}/envelope/"
