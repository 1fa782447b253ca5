"""
Request body size limit middleware.
Rejects oversized request bodies before they reach the route handlers.
"""
import logging
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware enforcing a maximum request body size."""

    def __init__(self, app, max_body_bytes: int):
        super().__init__(app)
        self.max_body_bytes = max_body_bytes

    def _reject(self, request: Request, size: int) -> Response:
        logger.warning(
            f"Rejected {request.method} {request.url.path}: body of {size} bytes "
            f"exceeds {self.max_body_bytes}"
        )
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"error": "request body too large"},
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method not in ("POST", "PUT", "PATCH"):
            return await call_next(request)

        declared = request.headers.get("content-length", "")
        if declared.isdigit():
            if int(declared) > self.max_body_bytes:
                return self._reject(request, int(declared))
            return await call_next(request)

        # Chunked upload: count while reading and stop at the cap
        buffer = bytearray()
        async for chunk in request.stream():
            buffer.extend(chunk)
            if len(buffer) > self.max_body_bytes:
                return self._reject(request, len(buffer))

        # Same cache Request.body() fills; the body is replayed to inner handlers
        request._body = bytes(buffer)
        return await call_next(request)
