"""
Request logging middleware.
Assigns request ids, times each request and logs slow or failing requests.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Adds X-Request-ID and X-Processing-Time headers to every response.
    The request id is stored on request.state so error responses can echo it.
    """
    
    def __init__(self, app: ASGIApp, slow_request_threshold: float = 1.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold  # seconds
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.perf_counter()
        
        try:
            response = await call_next(request)
        except Exception as exc:
            processing_time = time.perf_counter() - start_time
            logger.error(
                f"Request error [{request_id}]: {request.method} {request.url.path} "
                f"{type(exc).__name__} ({processing_time:.3f}s)",
                extra={"request_id": request_id, "path": request.url.path, "method": request.method}
            )
            raise
        
        processing_time = time.perf_counter() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        
        log_message = (
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({processing_time:.3f}s) [{request_id}]"
        )
        if processing_time > self.slow_request_threshold:
            logger.warning(f"Slow request: {log_message}")
        elif response.status_code >= 500:
            logger.error(log_message)
        else:
            logger.info(log_message)
        
        return response
