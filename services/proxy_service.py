"""Proxy orchestration: normalize, fetch, dispatch."""

from core.dispatch import ContentDispatcher, is_html
from core.exceptions import InvalidURL
from core.protocols import RequestLogger
from core.request_types import (
    NormalizedURL,
    ProxyRequest,
    ProxyResult,
    RewriteContext,
    UpstreamResponse,
)
from core.urls import normalize_url
from services.fetcher import Fetcher

PROXY_ROUTE = "proxy"
ASSET_ROUTE = "asset"


class ProxyService:
    """Serve proxy and asset requests for a single target each."""

    def __init__(
        self,
        fetcher: Fetcher,
        dispatcher: ContentDispatcher,
        logger: RequestLogger,
        endpoint: str = "/api/proxy",
    ) -> None:
        self._fetcher = fetcher
        self._dispatcher = dispatcher
        self._logger = logger
        self._endpoint = endpoint

    async def proxy(self, request: ProxyRequest) -> ProxyResult | UpstreamResponse:
        """Fetch a target and rewrite it when it is HTML.

        Returns the raw UpstreamResponse when the origin answered with a
        non-2xx status so the caller can forward it.
        """
        url = normalize_url(request.raw_url)
        upstream = await self._fetcher.fetch(url)
        if not upstream.is_success:
            self._log_upstream_error(PROXY_ROUTE, upstream)
            return upstream

        context = RewriteContext(base_url=self._base_url(upstream, url), endpoint=self._endpoint)
        result = self._dispatcher.dispatch(upstream, context)
        self._logger.log_fetch(
            PROXY_ROUTE,
            upstream.url,
            upstream.status_code,
            upstream.content_type,
            rewritten=is_html(upstream.content_type),
            size=len(upstream.body),
        )
        return result

    async def asset(self, request: ProxyRequest) -> ProxyResult | UpstreamResponse:
        """Fetch a target and pass it through without content-type branching."""
        url = normalize_url(request.raw_url)
        upstream = await self._fetcher.fetch(url)
        if not upstream.is_success:
            self._log_upstream_error(ASSET_ROUTE, upstream)
            return upstream

        self._logger.log_fetch(
            ASSET_ROUTE,
            upstream.url,
            upstream.status_code,
            upstream.content_type,
            size=len(upstream.body),
        )
        return self._dispatcher.passthrough(upstream)

    def _base_url(self, upstream: UpstreamResponse, requested: NormalizedURL) -> NormalizedURL:
        """Use the final URL after redirects as the document base."""
        if upstream.url == requested.value:
            return requested
        try:
            return normalize_url(upstream.url)
        except InvalidURL:
            return requested

    def _log_upstream_error(self, route: str, upstream: UpstreamResponse) -> None:
        self._logger.log_error(
            route,
            upstream.status_code,
            f"{upstream.reason or 'Upstream error'} ({upstream.url})",
        )
