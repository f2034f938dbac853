"""Per-request access log.

Assigns a request id (``request.state.request_id``, echoed in every
ApiResponse and in the ``X-Request-ID`` header) and logs one line per request
once the response is ready. When the request carried a valid token, the
authenticated caller is included:

    INFO GET /api/v1/users/42 200 3ms req_a1b2c3d4e5f6 caller=42/user
    INFO POST /api/v1/auth 401 1ms req_0f9e8d7c6b5a caller=-
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("um.request")

REQUEST_ID_HEADER = "X-Request-ID"


def describe_caller(request: Request) -> str:
    principal = getattr(request.state, "principal", None)
    if principal is None:
        return "-"
    return f"{principal.user_id}/{principal.role}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        log = logger.info if response.status_code < 500 else logger.warning
        log(
            "%s %s %d %.0fms %s caller=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
            describe_caller(request),
        )
        return response
