"""Shared FastAPI middleware."""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse

from app.core.config import get_settings


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


class MaxBodySizeMiddleware(BaseHTTPMiddleware):
    """Reject requests with bodies larger than MAX_REQUEST_BODY_BYTES."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        limit = get_settings().MAX_REQUEST_BODY_BYTES

        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > limit:
                    return _error("Payload too large.", 413)
            except ValueError:
                return _error("Invalid Content-Length header.", 400)

        if request.method in ("GET", "HEAD", "OPTIONS"):
            return await call_next(request)

        # Chunked bodies carry no content-length; Starlette caches request.body()
        body = await request.body()
        if body and len(body) > limit:
            return _error("Payload too large.", 413)

        return await call_next(request)
