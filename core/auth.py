"""Shared-secret bearer authentication for inbound callers."""

import hmac


class BearerAuthenticator:
    """Accept requests whose Authorization header is exactly `Bearer <secret>`."""

    def __init__(self, secret: str) -> None:
        self._expected = f"Bearer {secret}" if secret else ""

    @property
    def configured(self) -> bool:
        return bool(self._expected)

    def is_authorized(self, header: str | None) -> bool:
        """Return True only for an exact match; an unset secret rejects everything."""
        if not self._expected:
            return False
        return hmac.compare_digest((header or "").encode("utf-8"), self._expected.encode("utf-8"))
