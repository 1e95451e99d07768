"""Custom exception hierarchy for the rewriting proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class MissingParameter(ProxyError):
    """Raised when the ``url`` query parameter is absent or empty."""


class InvalidURL(ProxyError):
    """Raised when a target does not parse as an absolute http(s) URL.

    Attributes:
        message: Error message
        raw_url: The caller-supplied target that failed validation
    """

    def __init__(self, message: str, raw_url: str | None = None) -> None:
        super().__init__(message)
        self.raw_url = raw_url


class UpstreamUnreachable(ProxyError):
    """Raised when the origin cannot be reached (DNS, connect, timeout).

    Attributes:
        message: Error message
        url: Target URL that was being fetched
        host_not_found: True when name resolution failed
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        host_not_found: bool = False,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.host_not_found = host_not_found


class InternalFailure(ProxyError):
    """Raised when processing a fetched response fails unexpectedly."""
