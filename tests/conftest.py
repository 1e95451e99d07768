"""Shared fixtures for proxy tests."""

from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps everything in memory."""

    def __init__(self) -> None:
        self.fetches: list[dict] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_fetch(
        self,
        route: str,
        url: str,
        status: int,
        content_type: str,
        *,
        rewritten: bool = False,
        size: int = 0,
    ) -> None:
        self.fetches.append(
            {
                "route": route,
                "url": url,
                "status": status,
                "content_type": content_type,
                "rewritten": rewritten,
                "size": size,
            }
        )

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_client(logger: RecordingLogger):
    """Build a TestClient whose outbound requests hit a mock origin."""
    clients: list[TestClient] = []

    def factory(
        origin: Callable[[httpx.Request], httpx.Response],
        config: Config | None = None,
    ) -> TestClient:
        app = create_app(config or Config(), logger, transport=httpx.MockTransport(origin))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)
