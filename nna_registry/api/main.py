"""FastAPI application entry point for the NNA Registry.

Taxonomy lookups, HFN/MFA address conversion and per-path sequence
allocation over one shared, immutable taxonomy snapshot.
"""

import logging

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from nna_registry.api.addresses import router as addresses_router
from nna_registry.api.sequences import router as sequences_router
from nna_registry.api.taxonomy import router as taxonomy_router
from nna_registry.config.settings import Environment, get_settings
from nna_registry.taxonomy.engine import get_registry

APP_VERSION = "0.1.0"

settings = get_settings()

_LOG_NAME_TO_LEVEL: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# --- Structured logging ---
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.ENVIRONMENT == Environment.DEV
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value],
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

# --- FastAPI app ---
app = FastAPI(
    title="NNA Registry API",
    description="Taxonomy resolution and dual addressing (HFN/MFA) for the NNA asset registry.",
    version=APP_VERSION,
)

# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == Environment.DEV else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Routers ---
app.include_router(taxonomy_router)
app.include_router(addresses_router)
app.include_router(sequences_router)


# --- Infrastructure Endpoints (global) ---


@app.get("/health")
async def health_check() -> dict:
    """Liveness probe with component health checks.

    Returns 200 always (degraded status if components are down).
    """
    checks: dict[str, bool] = {"api": True}

    # Taxonomy catalog loads and verifies
    try:
        engine = get_registry().get()
        checks["taxonomy"] = True
    except Exception:
        logger.exception("health_check_taxonomy_failed")
        engine = None
        checks["taxonomy"] = False

    # Database connectivity check
    try:
        from nna_registry.db.session import async_session_factory
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception:
        checks["database"] = False

    all_ok = all(checks.values())

    return {
        "status": "ok" if all_ok else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "taxonomy_version": engine.version if engine is not None else None,
        "checks": checks,
    }


@app.get("/api/version")
async def get_version() -> dict[str, str]:
    """Return application name, version, and environment."""
    return {
        "name": "NNA Registry",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
    }
