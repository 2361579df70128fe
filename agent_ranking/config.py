"""
agent_ranking/config.py

Environment-driven configuration for the listing collection pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_optional_float_env(name: str) -> float | None:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return float(raw_value)
    except ValueError:
        return None


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class FundaAPISettings:
    """
    Upstream listing feed settings.
    """

    base_url: str = "http://partnerapi.funda.nl/feeds/Aanbod.svc/json"
    api_key: str | None = None
    search_type: str = "koop"
    location_path: str = "/amsterdam/"
    garden_location_path: str = "/amsterdam/tuin/"

    def require_api_key(self) -> str:
        if not self.api_key:
            raise RuntimeError("FUNDA_API_KEY is not set. Provide the partner feed key.")
        return self.api_key


@dataclass(frozen=True)
class CollectionSettings:
    """
    Concurrency, pacing and retry behaviour for page collection.
    """

    token_pool_size: int = 25
    worker_count: int = 50
    pacing_seconds: float = 2.0
    backoff_seconds: float = 20.0
    backoff_multiplier: float = 1.0
    max_attempts: int = 5
    timeout_seconds: float = 15.0
    barrier_timeout_seconds: float | None = None


@dataclass(frozen=True)
class RankingSettings:
    """
    Presentation policy applied to final rankings.
    """

    top_k: int = 10


@lru_cache(maxsize=1)
def get_funda_api_settings() -> FundaAPISettings:
    """
    Return cached upstream feed settings from environment variables.
    """

    return FundaAPISettings(
        base_url=_get_str_env(
            "FUNDA_API_BASE_URL",
            "http://partnerapi.funda.nl/feeds/Aanbod.svc/json",
        ),
        api_key=_get_optional_str_env("FUNDA_API_KEY"),
        search_type=_get_str_env("FUNDA_SEARCH_TYPE", "koop"),
        location_path=_get_str_env("FUNDA_LOCATION", "/amsterdam/"),
        garden_location_path=_get_str_env("FUNDA_GARDEN_LOCATION", "/amsterdam/tuin/"),
    )


@lru_cache(maxsize=1)
def get_collection_settings() -> CollectionSettings:
    """
    Return cached collection settings from environment variables.
    """

    barrier_timeout = _get_optional_float_env("COLLECTION_BARRIER_TIMEOUT_SECONDS")
    return CollectionSettings(
        token_pool_size=max(1, _get_int_env("COLLECTION_TOKEN_POOL_SIZE", 25)),
        worker_count=max(1, _get_int_env("COLLECTION_WORKER_COUNT", 50)),
        pacing_seconds=max(0.0, _get_float_env("COLLECTION_PACING_SECONDS", 2.0)),
        backoff_seconds=max(0.0, _get_float_env("COLLECTION_BACKOFF_SECONDS", 20.0)),
        backoff_multiplier=max(1.0, _get_float_env("COLLECTION_BACKOFF_MULTIPLIER", 1.0)),
        max_attempts=max(1, _get_int_env("COLLECTION_MAX_ATTEMPTS", 5)),
        timeout_seconds=max(1.0, _get_float_env("COLLECTION_TIMEOUT_SECONDS", 15.0)),
        barrier_timeout_seconds=(
            max(1.0, barrier_timeout) if barrier_timeout is not None else None
        ),
    )


@lru_cache(maxsize=1)
def get_ranking_settings() -> RankingSettings:
    """
    Return cached ranking settings.
    """

    return RankingSettings(top_k=max(1, _get_int_env("RANKING_TOP_K", 10)))
