"""CLI entry point for c6-mtls-proxy."""

import ssl
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from app import create_app
from core.auth import BearerAuthenticator
from core.config import ENV_VARS, Config, load_config
from core.credentials import build_ssl_context, load_credentials
from core.exceptions import ConfigurationError
from ui.console_logger import ConsoleLogger
from ui.log_utils import mask, write_cli_log

console = Console()

SECRET_FIELDS = {"secret", "cert_b64", "key_b64"}


def main():
    """Main CLI entry point."""
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--config":
            config = _load_or_exit()
            _print_config(config)
            return

        if arg == "--check":
            config = _load_or_exit()
            _check(config)
            return

        console.print(f"[red][ERROR][/red] Unknown argument: {escape(arg)}")
        _print_help()
        sys.exit(2)

    config = _load_or_exit()
    ssl_context = _ssl_context_or_exit(config)

    if not BearerAuthenticator(config.proxy.secret).configured:
        console.print("[yellow]Warning:[/yellow] PROXY_SECRET not set, every request will be rejected")

    log_root = Path(config.logging.log_dir)
    logger = ConsoleLogger(log_root=log_root, debug=config.logging.debug, console=console)
    write_cli_log("STARTUP", "mTLS certificates loaded from env vars", log_root=log_root)

    import uvicorn

    app = create_app(config, logger, ssl_context=ssl_context)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    console.print(f"[bold cyan]C6 mTLS Proxy[/bold cyan] running on port {config.proxy.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", log_root=log_root, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log(
            "SHUTDOWN",
            "Proxy stopped",
            log_root=log_root,
            duration=str(duration),
            **logger.request_count,
        )


def _load_or_exit() -> Config:
    try:
        return load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {escape(str(e))}")
        sys.exit(1)


def _ssl_context_or_exit(config: Config) -> ssl.SSLContext:
    """Decode and persist the client certificate; exit 1 before binding if unusable."""
    try:
        credentials = load_credentials(config.credentials)
        return build_ssl_context(credentials, config.credentials.cert_dir)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {escape(str(e))}")
        sys.exit(1)


def _check(config: Config) -> None:
    """Validate credentials and report readiness without starting the server."""
    _ssl_context_or_exit(config)
    console.print(f"[green]Credentials OK[/green] ({config.credentials.cert_dir})")

    if BearerAuthenticator(config.proxy.secret).configured:
        console.print("[green]PROXY_SECRET configured[/green]")
    else:
        console.print("[yellow]PROXY_SECRET not set[/yellow] (all requests will be rejected)")
    console.print(f"[bold]Allowed prefix:[/bold] {config.upstream.allowed_prefix}")


def _print_config(config: Config) -> None:
    """Print effective configuration with secrets masked."""
    data = config.model_dump()
    for section, fields in ENV_VARS.items():
        console.print(f"[bold]{section}[/bold]")
        for field, var in fields.items():
            value = data[section][field]
            if field in SECRET_FIELDS:
                value = mask(value) if value else "(unset)"
            console.print(f"  {var:<22} {value}", highlight=False)


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]C6 mTLS Proxy[/bold cyan]

Relays authenticated requests to the C6 Bank API over mutual TLS.

[bold]Usage:[/bold]
    c6-mtls-proxy              Start the proxy
    c6-mtls-proxy --check      Validate credentials and exit
    c6-mtls-proxy --config     Show effective configuration
    c6-mtls-proxy --help       Show this help

[bold]Environment:[/bold]
    PORT           Listen port (default 8080)
    PROXY_SECRET   Bearer token required from callers
    C6_CERT_B64    Base64 client certificate PEM
    C6_KEY_B64     Base64 client private key PEM
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
