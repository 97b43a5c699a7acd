"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.

Pricing functions never read these settings; they receive explicit
configuration snapshots. Settings only drive the outer surfaces
(API server, CLI, logging, perpetual defaults for API callers).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Quote Pricing Engine"
    debug: bool = False

    # ── API ──────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["*"]

    # ── Perpetual license defaults ───────────────────────
    perpetual_compensation_term_months: float = 48
    perpetual_license_share: float = 0.7  # share of subscription that is license
    perpetual_maintenance_pct: float = 20.0  # annual, % of license
    perpetual_maintenance_term_years: float = 3
    perpetual_upgrade_protection_pct: float = 15.0

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
