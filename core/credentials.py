"""Client certificate material for the mTLS leg."""

import base64
import binascii
import ssl
from dataclasses import dataclass
from pathlib import Path

from core.config import CredentialSettings
from core.exceptions import ConfigurationError

CERT_FILENAME = "cert.pem"
KEY_FILENAME = "key.pem"


@dataclass(frozen=True)
class CredentialMaterial:
    """Decoded client certificate and private key (PEM)."""

    certificate: bytes
    private_key: bytes

    def __repr__(self) -> str:
        return (
            f"CredentialMaterial(certificate=<{len(self.certificate)} bytes>, "
            f"private_key=<{len(self.private_key)} bytes>)"
        )


def load_credentials(settings: CredentialSettings) -> CredentialMaterial:
    """Decode certificate and key from their base64 environment values.

    Raises:
        ConfigurationError: if either value is missing or does not decode to PEM text.
    """
    if not settings.cert_b64 or not settings.key_b64:
        raise ConfigurationError("C6_CERT_B64 and C6_KEY_B64 env vars required")

    certificate = _decode_pem("C6_CERT_B64", settings.cert_b64)
    private_key = _decode_pem("C6_KEY_B64", settings.key_b64)
    return CredentialMaterial(certificate=certificate, private_key=private_key)


def write_credentials(material: CredentialMaterial, cert_dir: str | Path) -> tuple[Path, Path]:
    """Persist the PEM files, the key readable by the owner only."""
    directory = Path(cert_dir)
    directory.mkdir(parents=True, exist_ok=True)

    cert_path = directory / CERT_FILENAME
    cert_path.write_bytes(material.certificate)

    key_path = directory / KEY_FILENAME
    key_path.touch(mode=0o600, exist_ok=True)
    key_path.chmod(0o600)
    key_path.write_bytes(material.private_key)
    return cert_path, key_path


def build_ssl_context(material: CredentialMaterial, cert_dir: str | Path) -> ssl.SSLContext:
    """Create a verifying client context that presents the bank certificate."""
    cert_path, key_path = write_credentials(material, cert_dir)
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    try:
        context.load_cert_chain(certfile=str(cert_path), keyfile=str(key_path))
    except ssl.SSLError as e:
        raise ConfigurationError(f"Invalid client certificate or key: {e}") from e
    return context


def _decode_pem(name: str, value: str) -> bytes:
    try:
        text = base64.b64decode(value.strip()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ConfigurationError(f"{name} is not base64-encoded PEM: {e}") from e
    if not text.strip():
        raise ConfigurationError(f"{name} decodes to an empty value")
    return text.encode("utf-8")
