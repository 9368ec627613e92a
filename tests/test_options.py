"""Options and DSN parsing."""

import json

import pytest
from pydantic import ValidationError

from tracewire import ConfigurationError, Options
from tracewire.dsn import Dsn

DSN = "https://public@ingest.example.com/42"


def test_defaults():
    options = Options()
    assert options.enable_shutdown_hook is True
    assert options.flush_timeout_millis == 15000
    assert options.shutdown_timeout_millis == 2000
    assert options.integrations is None
    assert options.dsn is None


def test_negative_timeout_rejected():
    with pytest.raises(ValidationError):
        Options(flush_timeout_millis=-1)


def test_invalid_dsn_rejected():
    with pytest.raises(ValidationError):
        Options(dsn="ftp://nobody")


def test_empty_dsn_means_disabled():
    assert Options(dsn="").dsn is None


def test_from_env():
    options = Options.from_env({
        "TRACEWIRE_DSN": DSN,
        "TRACEWIRE_ENABLE_SHUTDOWN_HOOK": "false",
        "TRACEWIRE_FLUSH_TIMEOUT_MILLIS": "10000",
        "TRACEWIRE_ENVIRONMENT": "staging",
    })
    assert options.dsn == DSN
    assert options.enable_shutdown_hook is False
    assert options.flush_timeout_millis == 10000
    assert options.environment == "staging"


def test_precedence_file_env_overrides(tmp_path):
    config = tmp_path / "tracewire.json"
    config.write_text(json.dumps({"release": "from-file", "environment": "from-file", "max_queue_size": 7}))

    options = Options.from_env(
        {"TRACEWIRE_CONFIG_FILE": str(config), "TRACEWIRE_ENVIRONMENT": "from-env", "TRACEWIRE_RELEASE": "from-env"},
        release="explicit",
    )

    assert options.release == "explicit"
    assert options.environment == "from-env"
    assert options.max_queue_size == 7


def test_bad_env_value_raises_configuration_error():
    with pytest.raises(ConfigurationError) as exc_info:
        Options.from_env({"TRACEWIRE_FLUSH_TIMEOUT_MILLIS": "soon"})
    assert exc_info.value.code == "configuration_error"


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError):
        Options.from_env({"TRACEWIRE_CONFIG_FILE": str(tmp_path / "nope.json")})


def test_config_file_must_be_object(tmp_path):
    config = tmp_path / "list.json"
    config.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        Options.from_env({"TRACEWIRE_CONFIG_FILE": str(config)})


class TestDsn:
    def test_parse(self):
        dsn = Dsn.parse("https://abc@ingest.example.com:8443/base/42")
        assert dsn.public_key == "abc"
        assert dsn.host == "ingest.example.com"
        assert dsn.port == 8443
        assert dsn.path == "/base"
        assert dsn.project_id == "42"
        assert dsn.envelope_url == "https://ingest.example.com:8443/base/api/42/envelope/"

    def test_envelope_url_without_port(self):
        assert Dsn.parse(DSN).envelope_url == "https://ingest.example.com/api/42/envelope/"

    @pytest.mark.parametrize("value", [
        "ingest.example.com/42",
        "https://ingest.example.com/42",
        "https://key@ingest.example.com/",
        "https://key@ingest.example.com:notaport/42",
    ])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError):
            Dsn.parse(value)
