"""Console request log for the running proxy."""

from datetime import datetime
from pathlib import Path
from urllib.parse import urlsplit

from rich.console import Console
from rich.markup import escape

from ui.log_utils import LOG_ROOT, write_cli_log, write_request_log


class ConsoleLogger:
    """Print one line per proxied, rejected or failed request."""

    def __init__(
        self,
        log_root: Path = LOG_ROOT,
        debug: bool = False,
        console: Console | None = None,
    ):
        self.log_root = log_root
        self.debug = debug
        self.console = console or Console()
        self.request_count = {"relayed": 0, "rejected": 0, "failed": 0}

    def log_proxy(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        status: int,
        elapsed_ms: float,
    ) -> None:
        """Log a request relayed to the bank."""
        self.request_count["relayed"] += 1
        parts = urlsplit(url)
        style = "green" if status < 400 else "yellow"
        self.console.print(
            f"[dim]{self._now()}[/dim] [cyan]{method:<6}[/cyan] {escape(parts.netloc + parts.path)} "
            f"[{style}]{status}[/{style}] [dim]{elapsed_ms:.0f}ms[/dim]",
            highlight=False,
        )
        write_cli_log(
            "PROXY",
            f"{method} {parts.netloc}{parts.path}",
            log_root=self.log_root,
            status=status,
            elapsed_ms=f"{elapsed_ms:.0f}",
        )
        if self.debug:
            write_request_log(
                method,
                url,
                headers,
                status=status,
                elapsed_ms=elapsed_ms,
                log_root=self.log_root,
            )

    def log_rejected(self, path: str, status: int, reason: str) -> None:
        """Log a request refused before any outbound I/O."""
        self.request_count["rejected"] += 1
        self.console.print(
            f"[dim]{self._now()}[/dim] [yellow]{status}[/yellow] {escape(path)} [dim]{escape(reason)}[/dim]",
            highlight=False,
        )
        write_cli_log("REJECT", reason, log_root=self.log_root, path=path, status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log a failed relay."""
        self.request_count["failed"] += 1
        self.console.print(
            f"[dim]{self._now()}[/dim] [red]{status}[/red] {escape(route)} {escape(message)}",
            highlight=False,
        )
        write_cli_log("ERROR", message, log_root=self.log_root, route=route, status=status)

    @staticmethod
    def _now() -> str:
        return datetime.now().strftime("%H:%M:%S")
