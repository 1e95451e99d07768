"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from core.config import Config
from core.exceptions import InternalFailure, InvalidURL, MissingParameter, UpstreamUnreachable
from core.protocols import RequestLogger
from core.request_types import ProxyRequest, ProxyResult, UpstreamResponse
from services.proxy_service import ASSET_ROUTE, PROXY_ROUTE
from ui.log_utils import write_incoming_log


def _json_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message, "status": status_code}, status_code=status_code)


def _target_from_query(request: Request) -> ProxyRequest:
    """Read the required ``url`` query parameter."""
    raw_url = request.query_params.get("url")
    if not raw_url:
        raise MissingParameter("URL parameter is required")
    return ProxyRequest(raw_url=raw_url)


def _unreachable_status(error: UpstreamUnreachable) -> int:
    return 404 if error.host_not_found else 500


def _to_response(result: ProxyResult) -> Response:
    """Build the outgoing response; only Content-Type is forwarded."""
    headers = {"Content-Type": result.media_type} if result.media_type else None
    return Response(content=result.content, status_code=result.status_code, headers=headers)


def _log_incoming(request: Request, config: Config) -> None:
    if config.proxy.debug:
        write_incoming_log(
            request.method,
            request.url.path,
            dict(request.headers),
            dict(request.query_params),
        )


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response:
    """Handle /api/proxy: fetch, rewrite HTML, pass everything else through."""
    _log_incoming(request, config)
    service = request.app.state.proxy_service

    try:
        result = await service.proxy(_target_from_query(request))
    except MissingParameter as e:
        return _json_error(str(e), 400)
    except InvalidURL:
        return _json_error("Invalid URL format", 400)
    except UpstreamUnreachable as e:
        status = _unreachable_status(e)
        logger.log_error(PROXY_ROUTE, status, str(e))
        return _json_error(f"Proxy error: {e}", status)
    except InternalFailure as e:
        logger.log_error(PROXY_ROUTE, 500, str(e))
        return _json_error(f"Proxy error: {e}", 500)
    except Exception as e:
        logger.log_error(PROXY_ROUTE, 500, repr(e))
        return _json_error(f"Proxy error: {str(e) or type(e).__name__}", 500)

    if isinstance(result, UpstreamResponse):
        return _json_error(f"Failed to fetch: {result.reason}", result.status_code)
    return _to_response(result)


async def handle_asset(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response:
    """Handle /api/asset: fetch and pass through, plain-text errors."""
    _log_incoming(request, config)
    service = request.app.state.proxy_service

    try:
        result = await service.asset(_target_from_query(request))
    except MissingParameter:
        return PlainTextResponse("Missing URL parameter", status_code=400)
    except InvalidURL:
        return PlainTextResponse("Invalid URL format", status_code=400)
    except UpstreamUnreachable as e:
        status = _unreachable_status(e)
        logger.log_error(ASSET_ROUTE, status, str(e))
        return PlainTextResponse("Failed to fetch asset", status_code=status)
    except Exception as e:
        logger.log_error(ASSET_ROUTE, 500, repr(e))
        return PlainTextResponse("Failed to fetch asset", status_code=500)

    if isinstance(result, UpstreamResponse):
        return PlainTextResponse(f"Error: {result.reason}", status_code=result.status_code)
    return _to_response(result)
