from fastapi import Request
import logging
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("linkup")

# Routes reachable without a bearer token
PUBLIC_PREFIXES = ("/api/auth/", "/api/media/", "/api-docs", "/api/openapi.json", "/redoc")


class AuthLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        has_auth = bool(request.headers.get("Authorization"))

        if not has_auth and path.startswith("/api/") and not path.startswith(PUBLIC_PREFIXES):
            logger.debug(f"Protected endpoint {path} accessed without auth header")

        response = await call_next(request)

        if response.status_code in (401, 403):
            logger.warning(f"Auth error: {response.status_code} on {request.method} {path} (auth header: {has_auth})")

        return response
