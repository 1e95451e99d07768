"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProxyRequest:
    """Caller-supplied target, possibly missing a scheme."""

    raw_url: str


@dataclass(frozen=True)
class NormalizedURL:
    """Absolute http(s) URL that passed validation.

    Build these with ``core.urls.normalize_url``; ``value`` is the serialized
    form used both for fetching and as the rewrite base.
    """

    value: str
    scheme: str
    host: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UpstreamResponse:
    """Raw result of fetching a NormalizedURL."""

    status_code: int
    reason: str
    content_type: str
    body: bytes
    url: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class RewriteContext:
    """Base URL and proxy endpoint for a single rewrite pass."""

    base_url: NormalizedURL
    endpoint: str = "/api/proxy"


@dataclass(frozen=True)
class ProxyResult:
    """Response payload handed back to the HTTP layer."""

    status_code: int
    content: bytes | str
    media_type: str | None
