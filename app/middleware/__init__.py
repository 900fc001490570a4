"""
Haulpay - Middleware Package

Security headers and request logging for FastAPI.
"""

from app.middleware.security import (
    SecurityHeadersMiddleware,
    RequestLoggingMiddleware,
    setup_security_middleware,
)

__all__ = [
    "SecurityHeadersMiddleware",
    "RequestLoggingMiddleware",
    "setup_security_middleware",
]
