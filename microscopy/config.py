"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Entry points (Streamlit app, tests) call
get_settings() so .env values are respected.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))

DEFAULT_LOCATION = "13.0827° N, 80.2707° E"


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


@dataclass
class Settings:
    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("MICROSCOPY_LOG_LEVEL", "INFO"))

    # Splash screen: seconds before Loading -> Ready
    splash_seconds: float = field(
        default_factory=lambda: _env_float("MICROSCOPY_SPLASH_SECONDS", 3.0)
    )

    # History: "memory" (session only) or "sqlite" (durable write-through)
    history_backend: str = field(
        default_factory=lambda: os.getenv("MICROSCOPY_HISTORY_BACKEND", "memory").lower()
    )
    database_url: str = field(
        default_factory=lambda: os.getenv(
            "DATABASE_URL",
            "sqlite:///" + os.path.join(PROJECT_ROOT, "data", "history.db"),
        )
    )

    # Scan source
    scan_timeout_seconds: Optional[float] = field(
        default_factory=lambda: _env_float("MICROSCOPY_SCAN_TIMEOUT_SECONDS", None)
    )
    mock_seed: Optional[int] = field(default_factory=lambda: _env_int("MICROSCOPY_MOCK_SEED"))
    mock_failure_rate: float = field(
        default_factory=lambda: _env_float("MICROSCOPY_MOCK_FAILURE_RATE", 0.0)
    )
    site_location: str = field(
        default_factory=lambda: os.getenv("MICROSCOPY_SITE_LOCATION", DEFAULT_LOCATION)
    )

    # Exports
    export_dir: str = field(
        default_factory=lambda: os.getenv(
            "MICROSCOPY_EXPORT_DIR", os.path.join(PROJECT_ROOT, "data", "exports")
        )
    )


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()
