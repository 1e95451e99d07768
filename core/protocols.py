"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_fetch(
        self,
        route: str,
        url: str,
        status: int,
        content_type: str,
        *,
        rewritten: bool = False,
        size: int = 0,
    ) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
