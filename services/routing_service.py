"""Preparation of proxy payloads for the relay."""

from typing import Any

from core.exceptions import DestinationNotAllowed
from core.headers import HeaderSanitizer
from core.request_types import PreparedRequest, ProxyRequest
from core.router import DestinationPolicy


class RoutingService:
    """Validate, allow-list and sanitize a payload before it reaches the relay."""

    def __init__(
        self,
        policy: DestinationPolicy,
        sanitizer: HeaderSanitizer,
    ) -> None:
        self._policy = policy
        self._sanitizer = sanitizer

    def prepare(self, payload: Any) -> PreparedRequest:
        """Turn a decoded `/proxy` payload into a relay-ready request.

        The destination is checked on the raw `url` first, so a foreign URL is
        refused even when other fields are mistyped.

        Raises:
            DestinationNotAllowed: url is missing or outside the allow-list.
            InvalidProxyRequest: payload is not an object or has mistyped fields.
        """
        if isinstance(payload, dict):
            self._check_destination(payload.get("url"))

        request = ProxyRequest.parse(payload)

        headers = self._sanitizer.sanitize(request.headers, request.body)
        return PreparedRequest(
            method=request.method.upper(),
            url=request.url,
            headers=headers,
            body=request.body,
        )

    def _check_destination(self, url: Any) -> None:
        # A truthy non-string url is left to model validation
        if url and not isinstance(url, str):
            return
        decision = self._policy.decide(url or "")
        if not decision.allowed:
            raise DestinationNotAllowed(decision.reason)
