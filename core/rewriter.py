"""HTML reference rewriting.

Rewrites ``href``/``src``/``action`` attribute values and CSS
``background-image: url(...)`` declarations so they point back at the proxy
endpoint, then injects a ``<base>`` tag as a backstop for anything the
targeted passes did not match. This is attribute-level text substitution,
not DOM reconstruction: single-quoted and unquoted attributes as well as
script-built URLs are left alone.
"""

import html as html_lib
import re
from collections.abc import Callable

from core.request_types import RewriteContext
from core.urls import build_proxy_url, resolve_reference

PROTOCOL_RELATIVE_HREF = re.compile(r'href="//')
PROTOCOL_RELATIVE_SRC = re.compile(r'src="//')

# Negative lookaheads hold the per-attribute exclusion lists
HREF_PATTERN = re.compile(r'href="(?!(?:https?:|mailto:|#|javascript:|data:))([^"]+)"')
SRC_PATTERN = re.compile(r'src="(?!(?:https?:|data:))([^"]+)"')
ACTION_PATTERN = re.compile(r'action="(?!(?:https?:))([^"]+)"')
BACKGROUND_IMAGE_PATTERN = re.compile(
    r"""background-image:\s*url\(["']?(?!(?:https?:|data:))([^"')\s]+)["']?\)"""
)

BASE_TAG_MARKER = "<base "
HEAD_OPEN_PATTERN = re.compile(r"<head\b[^>]*>", re.IGNORECASE)

RewritePass = Callable[[str, RewriteContext], str]


def normalize_protocol_relative(html: str, context: RewriteContext) -> str:
    """Assume HTTPS for scheme-less ``//host/path`` references."""
    html = PROTOCOL_RELATIVE_HREF.sub('href="https://', html)
    return PROTOCOL_RELATIVE_SRC.sub('src="https://', html)


def _attribute_rewriter(attribute: str, pattern: re.Pattern[str]) -> RewritePass:
    def rewrite(html: str, context: RewriteContext) -> str:
        def replace(match: re.Match[str]) -> str:
            try:
                target = resolve_reference(match.group(1), context.base_url)
            except ValueError:
                return match.group(0)
            return f'{attribute}="{build_proxy_url(context.endpoint, target)}"'

        return pattern.sub(replace, html)

    rewrite.__name__ = f"rewrite_{attribute}"
    rewrite.__doc__ = f"Route ``{attribute}`` attribute values through the proxy endpoint."
    return rewrite


rewrite_href = _attribute_rewriter("href", HREF_PATTERN)
rewrite_src = _attribute_rewriter("src", SRC_PATTERN)
# Only the destination changes; method/enctype attributes are not matched.
rewrite_action = _attribute_rewriter("action", ACTION_PATTERN)


def rewrite_background_images(html: str, context: RewriteContext) -> str:
    """Route ``background-image: url(...)`` arguments through the proxy endpoint."""

    def replace(match: re.Match[str]) -> str:
        url = match.group(1).replace('"', "").replace("'", "")
        try:
            target = resolve_reference(url, context.base_url)
        except ValueError:
            return match.group(0)
        return f"background-image: url({build_proxy_url(context.endpoint, target)})"

    return BACKGROUND_IMAGE_PATTERN.sub(replace, html)


def inject_base_tag(html: str, context: RewriteContext) -> str:
    """Insert ``<base href=... target="_top">`` right after ``<head>``.

    Documents that already carry a base tag, or have no head to anchor to,
    are returned unchanged.
    """
    if BASE_TAG_MARKER in html:
        return html

    head = HEAD_OPEN_PATTERN.search(html)
    if head is None:
        return html

    href = html_lib.escape(str(context.base_url), quote=True)
    base_tag = f'<base href="{href}" target="_top">'
    return html[: head.end()] + base_tag + html[head.end():]


# Order matters: later passes must see the output of earlier ones.
REWRITE_PASSES: tuple[RewritePass, ...] = (
    normalize_protocol_relative,
    rewrite_href,
    rewrite_src,
    rewrite_action,
    rewrite_background_images,
    inject_base_tag,
)


def rewrite_html(html: str, context: RewriteContext) -> str:
    """Run every rewrite pass over ``html`` in order."""
    for rewrite_pass in REWRITE_PASSES:
        html = rewrite_pass(html, context)
    return html
