from __future__ import annotations

import logging
import os

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    from agent_ranking.config import load_env_files

    load_env_files()

    errors: list[str] = []

    if not os.getenv("FUNDA_API_KEY", "").strip():
        errors.append("FUNDA_API_KEY is not set. Empty strings are not permitted.")

    for name in ("COLLECTION_TOKEN_POOL_SIZE", "COLLECTION_MAX_ATTEMPTS", "RANKING_TOP_K"):
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            value = int(raw)
        except ValueError:
            errors.append(f"{name}='{raw}' is not an integer.")
            continue
        if value < 1:
            errors.append(f"{name}={value} must be at least 1.")

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Agent Ranking API",
        version="1.0.0",
    )

    from agent_ranking.api.routers import rankings_router

    application.include_router(rankings_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application
