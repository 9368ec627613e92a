"""
SDK options — keyword arguments, environment variables or a JSON file.

Precedence when loading with ``Options.from_env``: config file, then
environment, then explicit overrides.
"""

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tracewire.consts import (
    DEFAULT_FLUSH_TIMEOUT_MILLIS,
    DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_SHUTDOWN_TIMEOUT_MILLIS,
)
from tracewire.dsn import Dsn
from tracewire.errors import ConfigurationError

CONFIG_FILE_ENV = "TRACEWIRE_CONFIG_FILE"

ENV_FIELDS = {
    "TRACEWIRE_DSN": "dsn",
    "TRACEWIRE_RELEASE": "release",
    "TRACEWIRE_ENVIRONMENT": "environment",
    "TRACEWIRE_SERVER_NAME": "server_name",
    "TRACEWIRE_DEBUG": "debug",
    "TRACEWIRE_ENABLE_SHUTDOWN_HOOK": "enable_shutdown_hook",
    "TRACEWIRE_FLUSH_TIMEOUT_MILLIS": "flush_timeout_millis",
    "TRACEWIRE_SHUTDOWN_TIMEOUT_MILLIS": "shutdown_timeout_millis",
    "TRACEWIRE_MAX_QUEUE_SIZE": "max_queue_size",
}


class Options(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    dsn: Optional[str] = None
    release: Optional[str] = None
    environment: Optional[str] = None
    server_name: Optional[str] = None
    debug: bool = False

    # Shutdown flush
    enable_shutdown_hook: bool = True
    flush_timeout_millis: int = Field(default=DEFAULT_FLUSH_TIMEOUT_MILLIS, ge=0)
    shutdown_timeout_millis: int = Field(default=DEFAULT_SHUTDOWN_TIMEOUT_MILLIS, ge=0)

    max_queue_size: int = Field(default=DEFAULT_MAX_QUEUE_SIZE, ge=1)

    # None means the default set; [] disables every integration.
    integrations: Optional[list[Any]] = None

    @field_validator("dsn")
    @classmethod
    def _check_dsn(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            Dsn.parse(value)
        except ConfigurationError as e:
            raise ValueError(str(e))
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "Options":
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        config_file = env.get(CONFIG_FILE_ENV)
        if config_file:
            values.update(_load_config_file(config_file))
        for var, field in ENV_FIELDS.items():
            if env.get(var):
                values[field] = env[var]
        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid tracewire options: {e}", {"errors": e.errors(include_context=False)})


def _load_config_file(path: str) -> dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}", {"path": path})
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a JSON object", {"path": path})
    return data
