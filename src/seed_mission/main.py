# src/seed_mission/main.py
"""Main entry point for the Seed Mission application."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from seed_mission.api.v1 import (
    auth_router,
    communities_router,
    members_router,
    proofs_router,
)
from seed_mission.core.errors import register_exception_handlers
from seed_mission.core.logging import configure_logging
from seed_mission.core.settings import settings

configure_logging()

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Mission community API: proofs, hearts, comments and progress",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(proofs_router, prefix="/api/v1")
app.include_router(communities_router, prefix="/api/v1")
app.include_router(members_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("seed_mission.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
