"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (ConsoleLogger)."""

    def log_proxy(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        status: int,
        elapsed_ms: float,
    ) -> None: ...
    def log_rejected(self, path: str, status: int, reason: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
