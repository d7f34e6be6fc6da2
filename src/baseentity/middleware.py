"""FastAPI middleware for request tracing and observability."""

import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from baseentity.logging import bind_pricing_environment

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind per-request logging context.

    - Reads X-Request-ID from request headers, or generates a UUID if missing
    - Binds request_id and the process pricing environment (pricing_date,
      calc_env, taken from app.state) to structlog context, so every log
      line in the request carries them
    - Echoes X-Request-ID in the response headers

    Usage:
        app.state.pricing_environment = settings.pricing_environment()
        app.add_middleware(RequestContextMiddleware)
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        bind_pricing_environment(request.app.state.pricing_environment)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
