"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_asset, handle_proxy
from core.config import Config
from core.dispatch import ContentDispatcher
from core.protocols import RequestLogger
from services.fetcher import Fetcher
from services.proxy_service import ProxyService


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        fetch = config.fetch
        limits = httpx.Limits(
            max_connections=fetch.max_connections,
            max_keepalive_connections=fetch.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            headers={"User-Agent": fetch.user_agent},
            timeout=fetch.timeout,
            limits=limits,
            follow_redirects=fetch.follow_redirects,
            transport=transport,
        )
        app.state.proxy_service = ProxyService(
            fetcher=Fetcher(client),
            dispatcher=ContentDispatcher(),
            logger=logger,
            endpoint=config.rewrite.endpoint,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Frame Proxy", version="0.1.0", lifespan=lifespan)

    @app.get(config.rewrite.endpoint)
    async def proxy(request: Request):
        return await handle_proxy(request, config, logger)

    @app.get(config.rewrite.asset_endpoint)
    async def asset(request: Request):
        return await handle_asset(request, config, logger)

    return app
