"""Outbound fetching of proxy targets."""

import socket

import httpx

from core.exceptions import InvalidURL, UpstreamUnreachable
from core.request_types import NormalizedURL, UpstreamResponse

# Resolver messages as surfaced by glibc, macOS and Windows
_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "no address associated",
    "temporary failure in name resolution",
)


def is_host_not_found(exc: BaseException) -> bool:
    """Check whether a request error was caused by name resolution."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__

    message = str(exc).lower()
    return any(marker in message for marker in _DNS_FAILURE_MARKERS)


class Fetcher:
    """Issue single GET requests against arbitrary origins.

    Timeout, User-Agent and redirect policy live on the shared client built
    in the app lifespan. There is no retry: the first failure is surfaced.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: NormalizedURL) -> UpstreamResponse:
        """Fetch ``url`` and return the raw upstream response.

        Non-2xx responses are returned like any other; only transport-level
        failures raise.

        Raises:
            UpstreamUnreachable: DNS, connection or timeout failure.
            InvalidURL: httpx rejected the target.
        """
        try:
            response = await self._client.get(url.value)
        except httpx.InvalidURL as e:
            raise InvalidURL(f"Invalid URL format: {e}", url.value) from e
        except httpx.TimeoutException as e:
            raise UpstreamUnreachable("Upstream timeout", url=url.value) from e
        except httpx.RequestError as e:
            raise UpstreamUnreachable(
                str(e) or type(e).__name__,
                url=url.value,
                host_not_found=is_host_not_found(e),
            ) from e

        return UpstreamResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            content_type=response.headers.get("content-type", ""),
            body=response.content,
            url=str(response.url),
        )
