"""Middleware — request context, API key authentication, error handling, CORS.

Every request gets an ``X-Request-ID`` (the caller's, when it is a valid UUID)
which is bound into the structlog context, so ``api.assessment_scored`` and
any error log line for that request carry the same id.
"""

from __future__ import annotations

import secrets
import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from neuroaura.config import get_settings

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PLACEHOLDER_SECRET = "change-me-to-a-random-secret"

# Reachable without a key: liveness and the OpenAPI pages.
_OPEN_PATHS = frozenset({"/health", "/docs", "/docs/oauth2-redirect", "/openapi.json", "/redoc"})


def _request_id(raw: str | None) -> str:
    """Reuse the caller's id when it parses as a UUID, otherwise mint one."""
    if raw:
        try:
            return str(uuid.UUID(raw))
        except ValueError:
            pass
    return str(uuid.uuid4())


def _presented_key(request: Request) -> str:
    key = request.headers.get("X-API-Key")
    if key:
        return key
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    return token.strip() if scheme.lower() == "bearer" else ""


# ── Request context ───────────────────────────────────────────


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, bind it for logging, and log the finished request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.monotonic()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path != "/health":
            logger.info(
                "http.request",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.monotonic() - start) * 1000, 1),
            )
        return response


# ── Errors ────────────────────────────────────────────────────


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn anything the routes did not handle into a 500 that names the request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception:
            request_id = getattr(request.state, "request_id", None)
            logger.exception("http.unhandled_error", method=request.method, path=request.url.path)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error.", "request_id": request_id},
            )


# ── API key ───────────────────────────────────────────────────


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Require ``api_secret_key`` on scoring and history routes.

    Left open while the key is unset or still the placeholder, so a local
    install works out of the box.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        expected = get_settings().api_secret_key
        if expected in ("", PLACEHOLDER_SECRET) or request.url.path in _OPEN_PATHS:
            return await call_next(request)

        if not secrets.compare_digest(_presented_key(request).encode(), expected.encode()):
            logger.warning("http.unauthorized", path=request.url.path)
            return JSONResponse(status_code=401, content={"detail": "Invalid or missing API key."})
        return await call_next(request)


# ── Wiring ────────────────────────────────────────────────────


def _cors_origins(raw: str) -> list[str]:
    raw = raw.strip()
    if raw == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware stack.

    Starlette runs the last-added middleware first, so requests pass through
    request context, then the error handler, then the API key check, then CORS.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(get_settings().cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(APIKeyMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestContextMiddleware)
