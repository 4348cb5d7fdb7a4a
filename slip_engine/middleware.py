"""
Middleware for request logging and error handling.

Provides:
- Request/response logging
- Request ID generation
- Error handling
- Processing time headers
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import ENGINE_VERSION
from .logging_config import safe_log

logger = logging.getLogger("engine_api.middleware")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        start_time = time.time()
        request_id = f"req_{int(start_time * 1000)}_{os.urandom(4).hex()}"
        path = request.url.path
        method = request.method
        client_ip = request.client.host if request.client else "unknown"

        # Store request ID in request state
        request.state.request_id = request_id

        logger.info(safe_log(
            f"[{request_id}] {method} {path} | "
            f"Client: {client_ip} | "
            f"Started at: {datetime.now(timezone.utc).isoformat()}"
        ))

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            logger.info(safe_log(
                f"[{request_id}] COMPLETED | "
                f"Status: {response.status_code} | "
                f"Duration: {duration:.4f}s | "
                f"Path: {path}"
            ))

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Engine-Version"] = ENGINE_VERSION
            response.headers["X-Processing-Time"] = f"{duration:.4f}"

            return response

        except Exception as e:
            duration = time.time() - start_time

            logger.error(safe_log(
                f"[{request_id}] CRASHED | "
                f"Error: {str(e)} | "
                f"Duration: {duration:.4f}s | "
                f"Path: {path}"
            ))
            logger.exception(e)

            return Response(
                content=json.dumps({
                    "error": "Internal server error",
                    "request_id": request_id,
                    "message": str(e)
                }),
                status_code=500,
                media_type="application/json",
                headers={
                    "X-Request-ID": request_id,
                    "X-Engine-Version": ENGINE_VERSION
                }
            )
