"""Custom middleware for security headers and the admin gate."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking attacks
    - Referrer-Policy: Controls referrer information sent with requests
    - Content-Security-Policy: Restricts resource loading (basic policy)
    - Strict-Transport-Security: Forces HTTPS (when enabled)
    """

    def __init__(
        self,
        app: ASGIApp,
        enable_hsts: bool = False,
        hsts_max_age: int = 31536000,  # 1 year
    ) -> None:
        super().__init__(app)
        self.enable_hsts = enable_hsts
        self.hsts_max_age = hsts_max_age

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # API-only responses: nothing should be embedded or loaded from them
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "frame-ancestors 'self'; "
            "form-action 'self'"
        )

        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.hsts_max_age}; includeSubDomains"
            )

        return response


class AdminGateMiddleware(BaseHTTPMiddleware):
    """Reject admin requests that carry no session cookie.

    This is only a presence check on the cookie; the token itself and the
    admin claim are verified by the AdminSession dependency on each route.
    """

    def __init__(
        self,
        app: ASGIApp,
        cookie_name: str,
        protected_prefix: str = "/api/admin",
        exempt_paths: tuple[str, ...] = ("/api/admin/auth/login",),
    ) -> None:
        super().__init__(app)
        self.cookie_name = cookie_name
        self.protected_prefix = protected_prefix
        self.exempt_paths = exempt_paths

    def is_protected(self, path: str) -> bool:
        """Whether the path requires an admin session cookie."""
        if not path.startswith(self.protected_prefix):
            return False
        return not any(path.startswith(exempt) for exempt in self.exempt_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if (
            request.method != "OPTIONS"
            and self.is_protected(request.url.path)
            and not request.cookies.get(self.cookie_name)
        ):
            return JSONResponse(
                status_code=401,
                content={"success": False, "error": "Not authenticated"},
            )
        return await call_next(request)
