"""Logging configuration"""

import logging
import os
import time
import uuid
from typing import Callable
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Polled constantly by load balancers and the frontend
QUIET_PATHS = {"/health"}


def setup_logging() -> logging.Logger:
    """Configure JSON-style logging

    LOG_LEVEL selects the root level (default: INFO).
    """
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": %(message)s}',
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    return logging.getLogger("api_server")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging"""

    def __init__(self, app: FastAPI):
        super().__init__(app)
        self.logger = logging.getLogger("api_server")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse an upstream id so frontend and server logs line up
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        request.state.request_id = request_id

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
            "ip": request.client.host if request.client else "unknown",
        }

        if response.status_code >= 500:
            self.logger.error(str(log_data))
        elif response.status_code >= 400:
            self.logger.warning(str(log_data))
        elif request.url.path in QUIET_PATHS:
            self.logger.debug(str(log_data))
        else:
            self.logger.info(str(log_data))

        response.headers["X-Request-ID"] = request_id
        return response
