"""Request context middleware."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from erp_api.utils.request_id import REQUEST_ID_HEADER, resolve_request_id

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to every request and response.

    Authentication itself is not done here; it runs in the per-route
    access gate so that public routes are known before any request work.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response from downstream handler
        """
        request.state.request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"[{request.state.request_id}]"
        )
        return response
