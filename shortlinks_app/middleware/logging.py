"""Access log middleware."""

import time
import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shortlinks_app.routing.classifier import classify


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    One log line per request: method, path, request class, status, timing.
    
    Admin requests also record whether access was granted. Headers (and so
    credentials) are never logged. 5xx responses are logged at ERROR.
    """
    
    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlinks_app.access")
    
    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        request_class = classify(request.method, request.url.path)
        
        response = await call_next(request)
        
        duration_ms = (time.perf_counter() - start_time) * 1000
        client_ip = request.client.host if request.client else "unknown"
        access = ""
        if request_class.requires_auth:
            access = " access=denied" if response.status_code == 401 else " access=granted"
        
        level = logging.ERROR if response.status_code >= 500 else logging.INFO
        self.logger.log(
            level,
            f"{request.method} {request.url.path} [{request_class.value}]{access} "
            f"-> {response.status_code} in {duration_ms:.2f}ms from {client_ip}",
        )
        return response
