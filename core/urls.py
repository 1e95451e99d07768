"""Target URL normalization and proxy URL construction."""

import re
from urllib.parse import quote, urljoin

import httpx

from core.exceptions import InvalidURL
from core.request_types import NormalizedURL

DEFAULT_SCHEME = "https"
HTTP_SCHEMES = ("http", "https")
MAX_PORT = 65535

# httpx percent-encodes these in hosts instead of rejecting them
_FORBIDDEN_AUTHORITY = re.compile(r"[\s\x00-\x1f\x7f<>^|]")


def has_http_scheme(raw_url: str) -> bool:
    lowered = raw_url[:8].lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def normalize_url(raw_url: str) -> NormalizedURL:
    """Turn caller input into a validated absolute http(s) URL.

    Input without an ``http://``/``https://`` prefix gets ``https://``
    prepended. The result is serialized the way a browser address bar would
    show it: lower-case scheme and host, default port dropped, ``/`` for an
    empty path, ``\\`` before the query read as ``/``.

    Raises:
        InvalidURL: The result is not a well-formed absolute URL.
    """
    candidate = raw_url.strip()
    if not candidate:
        raise InvalidURL("Invalid URL format", raw_url)
    if not has_http_scheme(candidate):
        candidate = f"{DEFAULT_SCHEME}://{candidate}"

    scheme, _, rest = candidate.partition("://")
    end = min((i for i in (rest.find("?"), rest.find("#")) if i >= 0), default=len(rest))
    authority, _, path = rest[:end].replace("\\", "/").partition("/")
    if (
        not authority
        or _FORBIDDEN_AUTHORITY.search(authority)
        or authority.count("[") != authority.count("]")
    ):
        raise InvalidURL("Invalid URL format", raw_url)

    try:
        url = httpx.URL(f"{scheme}://{authority}/{path}{rest[end:]}")
    except httpx.InvalidURL as e:
        raise InvalidURL(f"Invalid URL format: {e}", raw_url) from e

    if url.scheme not in HTTP_SCHEMES or not url.raw_host:
        raise InvalidURL("Invalid URL format: missing host", raw_url)
    if url.port is not None and not 0 <= url.port <= MAX_PORT:
        raise InvalidURL(f"Invalid URL format: port out of range: {url.port}", raw_url)

    host = url.raw_host.decode("ascii")
    if ":" in host:
        host = f"[{host}]"
    return NormalizedURL(value=str(url), scheme=url.scheme, host=host)


def resolve_reference(reference: str, base: NormalizedURL | str) -> str:
    """Resolve an attribute value against the document base.

    A blank reference resolves to the base itself.

    Raises:
        ValueError: The reference cannot be combined with the base.
    """
    return urljoin(str(base), reference.strip())


def encode_query_value(value: str) -> str:
    """Percent-encode a value for use inside a query string."""
    return quote(value, safe="")


def build_proxy_url(endpoint: str, target: str) -> str:
    """Return ``<endpoint>?url=<encoded target>``."""
    return f"{endpoint}?url={encode_query_value(target)}"
