"""Configuration models and loading."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError


class ProxySettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    secret: str = ""
    service_name: str = "gdg-c6-proxy"
    max_body_bytes: int = Field(default=0, ge=0)


class UpstreamSettings(BaseModel):
    allowed_prefix: str = "https://baas-api"
    port: int = 443
    timeout: float = Field(default=15.0, gt=0)


class CredentialSettings(BaseModel):
    cert_b64: str = ""
    key_b64: str = ""
    cert_dir: str = "/tmp/certs"


class LoggingSettings(BaseModel):
    log_dir: str = "logs"
    debug: bool = False


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# section -> field -> environment variable
ENV_VARS: dict[str, dict[str, str]] = {
    "proxy": {
        "host": "HOST",
        "port": "PORT",
        "secret": "PROXY_SECRET",
        "service_name": "PROXY_SERVICE_NAME",
        "max_body_bytes": "PROXY_MAX_BODY_BYTES",
    },
    "upstream": {
        "allowed_prefix": "C6_ALLOWED_PREFIX",
        "timeout": "UPSTREAM_TIMEOUT",
    },
    "credentials": {
        "cert_b64": "C6_CERT_B64",
        "key_b64": "C6_KEY_B64",
        "cert_dir": "C6_CERT_DIR",
    },
    "logging": {
        "log_dir": "PROXY_LOG_DIR",
        "debug": "PROXY_DEBUG",
    },
}


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build configuration from environment variables, read once at startup.

    Unset or empty variables fall back to the model defaults.
    """
    if environ is None:
        environ = os.environ

    data: dict[str, dict[str, str]] = {}
    for section, fields in ENV_VARS.items():
        values = {}
        for field, var in fields.items():
            value = environ.get(var, "")
            if value != "":
                values[field] = value
        data[section] = values

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
