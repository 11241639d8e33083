"""HTTP middleware shared by every route: access logging and request deadlines."""

from __future__ import annotations

import asyncio
import logging
import time
from http import HTTPStatus

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("gamf.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request with its status and duration."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        started = time.perf_counter()
        status_code = HTTPStatus.INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s %s %.1fms",
                request.method,
                request.url.path,
                int(status_code),
                elapsed_ms,
            )


class RequestTimeoutMiddleware:
    """Abort requests that exceed a fixed wall-clock budget.

    The wrapped application is cancelled at the deadline. If it has not begun
    its response yet, the client receives a 503 instead.
    """

    def __init__(self, app: ASGIApp, *, timeout_seconds: float) -> None:
        self.app = app
        self._timeout = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_wrapper), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Request %s %s exceeded %.1fs budget",
                scope.get("method"),
                scope.get("path"),
                self._timeout,
            )
            if response_started:
                raise
            response = JSONResponse(
                {"error": "request timed out"},
                status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            )
            await response(scope, receive, send)


__all__ = ["AccessLogMiddleware", "RequestTimeoutMiddleware"]
