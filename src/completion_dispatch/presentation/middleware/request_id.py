"""Request ID middleware for generating correlation IDs."""

import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, unbind_contextvars


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to each request.

    The ID is stored on ``request.state``, bound into structlog's context
    for the duration of the request and echoed in the response headers.
    """

    def __init__(self, app, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse an upstream ID (load balancer, gateway) when present
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id

        bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            unbind_contextvars("request_id")

        response.headers[self.header_name] = request_id
        return response
