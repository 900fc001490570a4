"""
Haulpay - Security Middleware

FastAPI middleware for:
1. Security Headers (CSP, framing, sniffing, HSTS in production)
2. Request Logging
"""

import time
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# Pages use small inline handlers (Print button) and inline styles
DEFAULT_CSP = "; ".join([
    "default-src 'self'",
    "script-src 'self' 'unsafe-inline'",
    "style-src 'self' 'unsafe-inline'",
    "img-src 'self' data:",
    "frame-ancestors 'none'",
    "form-action 'self'",
])


# ============================================================================
# SECURITY HEADERS MIDDLEWARE
# ============================================================================

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Headers:
    - Content-Security-Policy
    - X-Content-Type-Options
    - X-Frame-Options
    - Strict-Transport-Security (production only)
    - Referrer-Policy
    """

    def __init__(
        self,
        app: FastAPI,
        csp_policy: Optional[str] = None,
        development_mode: bool = False,
    ):
        super().__init__(app)
        self.development_mode = development_mode
        self.csp_policy = csp_policy or DEFAULT_CSP

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if request.url.path.startswith("/static"):
            return response

        response.headers["Content-Security-Policy"] = self.csp_policy
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if not self.development_mode:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


# ============================================================================
# REQUEST LOGGING MIDDLEWARE
# ============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log login attempts, payroll access and every failed request.
    Never logs bodies, so passwords and pay amounts stay out of the logs.
    """

    SENSITIVE_PATHS = [
        "/api/login",
        "/login",
        "/api/admin",
        "/api/employee",
    ]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path
        method = request.method

        response = await call_next(request)

        duration = time.time() - start_time
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        is_sensitive = any(path.startswith(p) for p in self.SENSITIVE_PATHS)

        if is_sensitive or response.status_code >= 400:
            logger.log(
                log_level,
                f"{method} {path} - {response.status_code} - {duration:.3f}s - {client_ip}",
                extra={
                    "method": method,
                    "path": path,
                    "status": response.status_code,
                    "duration": duration,
                    "client_ip": client_ip,
                }
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


# ============================================================================
# SETUP FUNCTION
# ============================================================================

def setup_security_middleware(app: FastAPI, development_mode: bool = False):
    """
    Setup all security middleware for the application.

    Args:
        app: FastAPI application instance
        development_mode: If True, HSTS is not sent
    """
    # Later middleware wraps earlier ones; logging stays outermost
    app.add_middleware(
        SecurityHeadersMiddleware,
        development_mode=development_mode,
    )
    app.add_middleware(RequestLoggingMiddleware)

    logger.info(f"Security middleware configured: development_mode={development_mode}")
