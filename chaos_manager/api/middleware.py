import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request_id to the structlog context for every request.

    Unhandled errors are turned into a JSON 500 here, inside CORS, so the
    response still carries the request id and CORS headers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        log.info("request_started")

        try:
            response = await call_next(request)
        except Exception:
            log.exception("unhandled_error")
            response = JSONResponse(status_code=500, content={"detail": "Internal server error"})

        log.info("request_completed", status_code=response.status_code)

        response.headers["X-Request-ID"] = request_id
        return response
