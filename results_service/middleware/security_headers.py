from __future__ import annotations

from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# The API only serves JSON, so nothing needs to be loaded or framed
DEFAULT_CONTENT_SECURITY_POLICY = "default-src 'none'; frame-ancestors 'none'"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response.

    Headers already set by a handler are left alone.
    """

    def __init__(
        self,
        app,
        *,
        hsts_max_age: int = 31536000,
        hsts_include_subdomains: bool = True,
        content_security_policy: str = DEFAULT_CONTENT_SECURITY_POLICY,
        referrer_policy: str = "no-referrer",
    ):
        super().__init__(app)
        hsts = f"max-age={hsts_max_age}"
        if hsts_include_subdomains:
            hsts += "; includeSubDomains"
        self.headers: Dict[str, str] = {
            "Strict-Transport-Security": hsts,
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Content-Security-Policy": content_security_policy,
            "Referrer-Policy": referrer_policy,
            "Cache-Control": "no-store",
        }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
