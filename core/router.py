"""Destination allow-list - decides where credentialed traffic may go."""

from dataclasses import dataclass
from urllib.parse import urlsplit

DEFAULT_ALLOWED_PREFIX = "https://baas-api"


@dataclass(frozen=True)
class DestinationDecision:
    """Outcome of an allow-list check."""

    allowed: bool
    reason: str = ""


class DestinationPolicy:
    """Only URLs under the bank's API prefix may be relayed."""

    def __init__(self, allowed_prefix: str = DEFAULT_ALLOWED_PREFIX):
        self.allowed_prefix = allowed_prefix

    def decide(self, url: str | None) -> DestinationDecision:
        """Return whether the URL may be contacted, and why not if it may not."""
        if not url:
            return DestinationDecision(allowed=False, reason="missing url")
        if not url.startswith(self.allowed_prefix):
            return DestinationDecision(allowed=False, reason="prefix mismatch")
        if self._has_userinfo(url):
            # https://baas-api@elsewhere/ matches the prefix but targets another host
            return DestinationDecision(allowed=False, reason="userinfo in url")
        return DestinationDecision(allowed=True)

    def allows(self, url: str | None) -> bool:
        return self.decide(url).allowed

    @staticmethod
    def _has_userinfo(url: str) -> bool:
        try:
            netloc = urlsplit(url).netloc
        except ValueError:
            return True
        return "@" in netloc
