"""Header construction for upstream requests."""

from typing import Any

HOP_BY_HOP_HEADERS = frozenset({"host", "authorization", "connection", "content-length"})


class HeaderSanitizer:
    """Build the headers sent on the mTLS leg from the caller's headers."""

    def sanitize(self, headers: dict[str, Any], body: str | None = None) -> dict[str, str]:
        """Drop connection-identifying headers and reframe the body length."""
        upstream: dict[str, str] = {}
        for key, value in headers.items():
            if key.lower() in HOP_BY_HOP_HEADERS:
                continue
            upstream[key] = str(value)
        if body:
            upstream["content-length"] = str(len(body.encode("utf-8")))
        return upstream
