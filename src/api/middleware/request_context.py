# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request context middleware.

Binds a request id into the structlog context for the duration of each
request and echoes it back in the X-Request-ID header. Exceptions that
escape the route handlers and the registered exception handlers are
logged here and answered with a generic 500.

Example:
    GET /api/auth/reset-password/...
    X-Request-ID: 3f2c...          (optional, generated when absent)
"""

import logging
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.errors import error_response
from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware binding per-request logging context."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request inside a bound logging context.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        bind_context(request_id=request_id, method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error while processing request")
            response = error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                INTERNAL_ERROR_MESSAGE,
            )
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
