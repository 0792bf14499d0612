"""Request/response logging middleware."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from platify.core.request_id import bind_request_id, generate_request_id, unbind_request_id

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses with timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        request_id = generate_request_id()
        token = bind_request_id(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else None

        logger.info(
            f"Request: {method} {path}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "query": dict(request.query_params) or None,
                "client_ip": client_ip,
                "user_agent": request.headers.get("user-agent", "Unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled error: {method} {path} - {str(e)}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise
        finally:
            unbind_request_id(token)

        logger.info(
            f"Response: {method} {path} - {response.status_code}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response
