"""Content-type branching for fetched responses."""

from core.exceptions import InternalFailure
from core.request_types import ProxyResult, RewriteContext, UpstreamResponse
from core.rewriter import rewrite_html

HTML_CONTENT_TYPE = "text/html"
HTML_RESPONSE_MEDIA_TYPE = "text/html; charset=utf-8"


def is_html(content_type: str) -> bool:
    return HTML_CONTENT_TYPE in content_type.lower()


class ContentDispatcher:
    """Pass binary content through untouched, rewrite HTML."""

    def dispatch(self, upstream: UpstreamResponse, context: RewriteContext) -> ProxyResult:
        """Build the proxy response for a successful upstream fetch."""
        if not is_html(upstream.content_type):
            return self.passthrough(upstream)

        text = upstream.body.decode("utf-8", errors="replace")
        try:
            rewritten = rewrite_html(text, context)
        except Exception as e:
            raise InternalFailure(f"HTML rewrite failed: {e}") from e

        return ProxyResult(
            status_code=upstream.status_code,
            content=rewritten,
            media_type=HTML_RESPONSE_MEDIA_TYPE,
        )

    def passthrough(self, upstream: UpstreamResponse) -> ProxyResult:
        """Return the body byte-for-byte with the upstream content type."""
        return ProxyResult(
            status_code=upstream.status_code,
            content=upstream.body,
            media_type=upstream.content_type or None,
        )
