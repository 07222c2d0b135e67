"""Security headers middleware.

Learn: Adds standard security headers to every response:
- X-Content-Type-Options / X-Frame-Options / X-XSS-Protection /
  Referrer-Policy on everything
- Strict-Transport-Security only when the request came in over HTTPS
- Cache-Control: no-store on auth endpoints, whose bodies carry tokens
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

NO_STORE_PREFIX = "/api/v1/auth/"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(BASE_HEADERS)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        if request.url.path.startswith(NO_STORE_PREFIX):
            response.headers["Cache-Control"] = "no-store"
        return response
