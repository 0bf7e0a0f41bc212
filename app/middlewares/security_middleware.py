from typing import Callable, Dict, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds a fixed set of security headers to every response."""

    default_headers: Dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    def __init__(self, app, custom_headers: Optional[Dict[str, str]] = None):
        super().__init__(app)
        self.headers = {**self.default_headers, **(custom_headers or {})}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        for header_name, header_value in self.headers.items():
            response.headers[header_name] = header_value

        return response


class ProdSecurityMiddleware(SecurityHeadersMiddleware):
    # The API only ever returns JSON, so nothing needs to be framed or executed
    default_headers = {
        **SecurityHeadersMiddleware.default_headers,
        "X-Frame-Options": "DENY",
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
        "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
        "Cross-Origin-Resource-Policy": "same-site",
        "Cache-Control": "no-store",
    }


class DevSecurityMiddleware(SecurityHeadersMiddleware):
    # Swagger UI at /docs needs inline scripts and the CDN assets
    default_headers = {
        **SecurityHeadersMiddleware.default_headers,
        "X-Frame-Options": "SAMEORIGIN",
        "Content-Security-Policy": "default-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; img-src 'self' data: https:;",
    }
