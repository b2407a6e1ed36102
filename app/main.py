# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Rehearsalist API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from app.config import settings
from app.dependencies import get_spotify_client
from app.exceptions import (
    CORS_HEADERS,
    rehearsalist_exception_handler,
    unexpected_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    calendar_feed,
    catalog,
    diagnostics,
    health,
    members,
    songs,
    upload,
    users,
)
from app.auth import routes as auth_routes
from core.errors import RehearsalistError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration
    - Shutdown: close the shared Spotify HTTP client
    """
    logger.info(f"Starting Rehearsalist API in {settings.ENVIRONMENT} mode")
    if not settings.spotify_configured:
        logger.warning("Spotify credentials not set - catalog endpoints will fail")

    yield

    logger.info("Shutting down Rehearsalist API")
    if get_spotify_client.cache_info().currsize:
        get_spotify_client().close()


# Create FastAPI application
app = FastAPI(
    title="Rehearsalist API",
    description="""
## Band Rehearsal & Song Voting API

Backend handlers for the Rehearsalist web app. Users and data live in
Supabase; tracks come from the Spotify catalog.

| Endpoint | Purpose |
|----------|---------|
| `POST /api/v1/spotify-search` | Search Spotify tracks |
| `POST /api/v1/get-track-metadata` | Fetch one Spotify track |
| `POST /api/v1/delete-song-suggestion` | Delete a suggestion (suggester or band admin) |
| `POST /api/v1/upload-avatar` | Upload the caller's profile picture |
| `GET /api/v1/calendar-feed?bandId=` | Upcoming rehearsals as iCalendar |
| `POST /api/v1/diag-status` | Caller's memberships and suggestion counts |
| `POST /api/v1/diag-system` | Project-wide status snapshot |
| `POST /api/v1/fix-user-data` | Repair a missing profile |
| `POST /api/v1/create-band-member` | Provision a member account (band admins) |

Authenticated endpoints expect `Authorization: Bearer <supabase access token>`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Verify Supabase JWT tokens"},
        {"name": "Catalog", "description": "Spotify track search and metadata"},
        {"name": "Songs", "description": "Song suggestion management"},
        {"name": "Profiles", "description": "Avatar upload and account repair"},
        {"name": "Calendar", "description": "Rehearsal calendar feeds"},
        {"name": "Members", "description": "Band member provisioning"},
        {"name": "Diagnostics", "description": "Account and system diagnostics"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - answers browser pre-flights from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach permissive CORS headers to every response, browser or not."""
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(RehearsalistError, rehearsalist_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unexpected_exception_handler)


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

# Spotify catalog endpoints
app.include_router(catalog.router, prefix=API_PREFIX, tags=["Catalog"])

# Song suggestion endpoints
app.include_router(songs.router, prefix=API_PREFIX, tags=["Songs"])

# Profile endpoints
app.include_router(upload.router, prefix=API_PREFIX, tags=["Profiles"])
app.include_router(users.router, prefix=API_PREFIX, tags=["Profiles"])

# Calendar feed
app.include_router(calendar_feed.router, prefix=API_PREFIX, tags=["Calendar"])

# Band member provisioning
app.include_router(members.router, prefix=API_PREFIX, tags=["Members"])

# Diagnostics
app.include_router(diagnostics.router, prefix=API_PREFIX, tags=["Diagnostics"])


# =============================================================================
# Pre-flight
# =============================================================================

@app.options(API_PREFIX + "/{path:path}", include_in_schema=False)
async def preflight(path: str):
    """Empty 200 for OPTIONS on any handler, even without browser CORS headers."""
    return Response(status_code=200, headers=CORS_HEADERS)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Rehearsalist API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }
