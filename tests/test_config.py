"""Tests for environment-sourced configuration."""

import pytest

from core.config import Config, load_config
from core.exceptions import ConfigurationError


def test_defaults_with_empty_environment():
    config = load_config({})

    assert config == Config()
    assert config.proxy.port == 8080
    assert config.proxy.host == "0.0.0.0"
    assert config.proxy.secret == ""
    assert config.proxy.service_name == "gdg-c6-proxy"
    assert config.proxy.max_body_bytes == 0
    assert config.upstream.allowed_prefix == "https://baas-api"
    assert config.upstream.port == 443
    assert config.upstream.timeout == 15.0
    assert config.credentials.cert_dir == "/tmp/certs"
    assert config.logging.debug is False


def test_environment_overrides():
    config = load_config(
        {
            "PORT": "9090",
            "PROXY_SECRET": "abc",
            "C6_CERT_B64": "Y2VydA==",
            "C6_KEY_B64": "a2V5",
            "C6_CERT_DIR": "/run/certs",
            "UPSTREAM_TIMEOUT": "2.5",
            "PROXY_DEBUG": "true",
        }
    )

    assert config.proxy.port == 9090
    assert config.proxy.secret == "abc"
    assert config.credentials.cert_b64 == "Y2VydA=="
    assert config.credentials.key_b64 == "a2V5"
    assert config.credentials.cert_dir == "/run/certs"
    assert config.upstream.timeout == 2.5
    assert config.logging.debug is True


def test_empty_values_fall_back_to_defaults():
    config = load_config({"PORT": "", "PROXY_SECRET": ""})

    assert config.proxy.port == 8080
    assert config.proxy.secret == ""


@pytest.mark.parametrize(
    "env",
    [{"PORT": "http"}, {"PORT": "70000"}, {"UPSTREAM_TIMEOUT": "0"}, {"PROXY_MAX_BODY_BYTES": "-1"}],
)
def test_invalid_values_raise_configuration_error(env):
    with pytest.raises(ConfigurationError):
        load_config(env)


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.setenv("PORT", "8181")

    assert load_config().proxy.port == 8181
