"""mTLS relay of prepared requests to the bank."""

import asyncio
import ssl

import httpx

from core.exceptions import UpstreamConnectionError, UpstreamError, UpstreamTimeoutError
from core.request_types import PreparedRequest, UpstreamResponse

DEFAULT_TIMEOUT = 15.0
UPSTREAM_PORT = 443

# httpx adds these to every request; the bank only sees them when the caller sent them
CLIENT_DEFAULT_HEADERS = frozenset({"accept", "accept-encoding", "user-agent"})


def create_mtls_client(verify: ssl.SSLContext | bool, timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Build the outbound client; `verify` is the context carrying the client certificate."""
    return httpx.AsyncClient(
        verify=verify,
        timeout=httpx.Timeout(timeout),
        follow_redirects=False,
        trust_env=False,
    )


class UpstreamClient:
    """Relay one request over mutual TLS and collect the full response."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT,
        port: int = UPSTREAM_PORT,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._port = port

    async def relay(self, prepared: PreparedRequest) -> UpstreamResponse:
        """Send the request and return the origin's response as received.

        Raises:
            UpstreamTimeoutError: the whole exchange exceeded the deadline.
            UpstreamConnectionError: DNS, TLS, connection or protocol failure.
            UpstreamError: the URL or headers cannot be put on the wire.
        """
        request = self._build_request(prepared)
        try:
            async with asyncio.timeout(self._timeout):
                response = await self._client.send(request, stream=True)
                try:
                    raw = b"".join([chunk async for chunk in response.aiter_raw()])
                finally:
                    await response.aclose()
        except (TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeoutError("Request timeout", url=prepared.url) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(str(e) or type(e).__name__, url=prepared.url) from e

        return UpstreamResponse(
            status=response.status_code,
            headers=self._collect_headers(response.headers),
            body=raw.decode("utf-8", errors="replace"),
        )

    def _build_request(self, prepared: PreparedRequest) -> httpx.Request:
        try:
            url = httpx.URL(prepared.url).copy_with(port=self._port)
        except httpx.InvalidURL as e:
            raise UpstreamError(f"Invalid URL: {e}", url=prepared.url) from e

        content = prepared.body.encode("utf-8") if prepared.body else None
        try:
            request = self._client.build_request(
                prepared.method,
                url,
                headers=prepared.headers,
                content=content,
            )
        except ValueError as e:
            # httpx only accepts ASCII header names and values
            raise UpstreamError(f"Invalid request headers: {e}", url=prepared.url) from e

        # Only send client defaults the caller asked for; the body is relayed raw
        sent = {key.lower() for key in prepared.headers}
        for name in CLIENT_DEFAULT_HEADERS - sent:
            request.headers.pop(name, None)
        return request

    @staticmethod
    def _collect_headers(headers: httpx.Headers) -> dict[str, str]:
        """Flatten response headers; repeated names are comma-joined."""
        collected: dict[str, str] = {}
        for key, value in headers.multi_items():
            if key in collected:
                collected[key] = f"{collected[key]}, {value}"
            else:
                collected[key] = value
        return collected
