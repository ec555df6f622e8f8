"""Custom exception hierarchy for the C6 mTLS proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration or credential material is missing or invalid."""


class UpstreamError(ProxyError):
    """Raised when the relay to the bank fails at the transport level.

    Attributes:
        message: Human-readable error message
        url: Destination URL of the failed call (optional)
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class UpstreamTimeoutError(UpstreamError):
    """Raised when the relay exceeds its deadline."""


class UpstreamConnectionError(UpstreamError):
    """Raised on DNS, TLS handshake, reset or protocol failures."""


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""


class InvalidJSON(ProxyError):
    """Request body is not valid JSON."""


class InvalidProxyRequest(ProxyError):
    """Proxy payload is not an object or carries fields of the wrong type."""


class DestinationNotAllowed(ProxyError):
    """Target URL is outside the destination allow-list."""
