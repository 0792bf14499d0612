"""Security headers, compression and upload size middleware."""

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


def setup_compression(app: FastAPI) -> None:
    """Setup GZip compression middleware."""
    app.add_middleware(GZipMiddleware, minimum_size=1000)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers."""

    async def dispatch(self, request, call_next):
        """Add security headers to response."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class UploadSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject oversized request bodies on upload paths before they are parsed.

    Bodies without a Content-Length are left to the image ingestor, which
    enforces the same limit while streaming to disk.
    """

    def __init__(self, app, max_bytes: int, path_prefix: str = "/api/"):
        super().__init__(app)
        self.max_bytes = max_bytes
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        if request.method == "POST" and request.url.path.startswith(self.path_prefix):
            content_length = request.headers.get("content-length")
            if content_length is not None:
                try:
                    too_large = int(content_length) > self.max_bytes
                except ValueError:
                    return JSONResponse(status_code=400, content={"error": "invalid Content-Length"})
                if too_large:
                    return JSONResponse(status_code=413, content={"error": "image too large"})
        return await call_next(request)
