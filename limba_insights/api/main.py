"""
FastAPI application for limba-insights.

Provides read-only REST access to:
- Grammar feature map and prerequisite chains
- Content listing (CEFR-stratified when unfiltered)
- Grammar coverage audit
- Anonymized telemetry listings and schema introspection
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import Settings, get_settings
from limba_insights import __version__
from limba_insights.db.database import check_connection, shutdown

settings = get_settings()


def configure_logging(settings: Settings) -> None:
    """Send logs to stderr and, when configured, to a rotating file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB", retention=5)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    configure_logging(settings)
    logger.info("Starting limba-insights service...")
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    logger.info("Shutting down limba-insights service...")
    shutdown()


app = FastAPI(
    title="Limba Insights",
    description="""
    Read-only analytics over language-learning content and telemetry.

    ## Features

    - **Grammar**: feature map and bounded, cycle-safe prerequisite trees
    - **Content**: listing with CEFR-stratified sampling
    - **Coverage**: which grammar features have content, which are gaps
    - **Telemetry**: usage, sessions, proficiency, errors, exercises (anonymized)
    """,
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "limba-insights",
        "version": __version__,
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check with an actual database round trip."""
    db_status, db_error = check_connection()

    result: dict[str, Any] = {
        "status": "healthy" if db_status == "ok" else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {"database": db_status},
    }
    if db_error:
        result["errors"] = {"database": db_error}
    return result


@app.get("/config", tags=["Health"])
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive)."""
    return {
        "database": settings.get_database_config(),
        "analytics": {
            "prerequisite_max_depth": settings.prerequisite_max_depth,
            "content_default_limit": settings.content_default_limit,
        },
        "log_level": settings.log_level,
    }


# ========================================
# Import and mount routers
# ========================================

from limba_insights.api.routers import content_router, grammar_router, telemetry_router

app.include_router(grammar_router.router, prefix="/api/grammar", tags=["Grammar"])
app.include_router(content_router.router, prefix="/api/content", tags=["Content"])
app.include_router(telemetry_router.router, prefix="/api/telemetry", tags=["Telemetry"])
app.include_router(telemetry_router.schema_router, prefix="/api/schema", tags=["Schema"])
