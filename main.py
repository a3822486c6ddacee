"""
main.py

Application entrypoint for the InkConnect API.
- Initializes structured logging
- Sets up FastAPI application and middlewares
- Registers all API routers and the live feed WebSocket
- Integrates rate limiting via SlowAPI
- Adds common security headers
- Configures CORS
- Logs and converts unhandled errors into a JSON 500
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from inkconnect.core.config import settings
from inkconnect.core.limiter import limiter
from inkconnect.core.logging import init_logging

from inkconnect.admin.routes import router as admin_router
from inkconnect.appointment.routes import router as appointment_router
from inkconnect.artist.routes import router as artist_router
from inkconnect.artwork.routes import router as artwork_router
from inkconnect.auth.routes import router as auth_router
from inkconnect.client.routes import router as client_router
from inkconnect.messaging.routes import router as messaging_router
from inkconnect.messaging.websocket import router as websocket_router
from inkconnect.profile.routes import router as profile_router
from inkconnect.review.routes import router as review_router
from inkconnect.site.routes import router as site_router

# -----------------------------
# FastAPI App Initialization
# -----------------------------
init_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=f"{settings.APP_NAME} API")

# -----------------------------
# Middleware Configuration
# -----------------------------
app.state.limiter = limiter


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    return _rate_limit_exceeded_handler(request, exc)  # type: ignore[arg-type]


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# -----------------------------
# Unhandled Errors
# -----------------------------
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"[APP] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"detail": {"error": "Internal server error", "code": "internal_error"}},
    )


# -----------------------------
# Security Headers Middleware
# -----------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add common security headers to responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


app.add_middleware(SecurityHeadersMiddleware)

# -----------------------------
# CORSMiddleware Configuration
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# API Router Registration
# -----------------------------
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(artist_router)
app.include_router(client_router)
app.include_router(appointment_router)
app.include_router(messaging_router)
app.include_router(websocket_router)
app.include_router(artwork_router)
app.include_router(review_router)
app.include_router(admin_router)
app.include_router(site_router)


# -----------------------------
# Root Endpoint
# -----------------------------
@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home() -> Any:
    return f"""
    <html>
        <head>
            <title>{settings.APP_NAME}</title>
        </head>
        <body style="font-family: Arial, sans-serif; text-align: center; padding-top: 50px;">
            <h1>Welcome to <span style="color: #c8a24a;">{settings.APP_NAME}</span></h1>
            <p>API backend for bookings, portfolios and client messaging.</p>
        </body>
    </html>
    """
