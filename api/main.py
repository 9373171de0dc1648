"""
Sale Triage Platform API - Main Application.

FastAPI application with CORS enabled for the back-office dashboards.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.settings import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI application
app = FastAPI(
    title="Sale Triage Platform API",
    description="REST API for back-office triage and follow-up of telecom sales",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS from CORS_ALLOW_ORIGINS (defaults to all origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "sale-triage-platform-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Sale Triage Platform API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import follow_ups, triage

app.include_router(triage.router, prefix="/api/v1", tags=["Triage"])
app.include_router(follow_ups.router, prefix="/api/v1", tags=["Follow-ups"])
