"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Health metrics server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: the server has no auth layer. Opt into `0.0.0.0`
    # explicitly together with HMI_ALLOW_INSECURE_BIND.
    hmi_host: str = "127.0.0.1"
    hmi_port: int = 8001
    hmi_log_level: str = "info"
    hmi_allow_insecure_bind: bool = False

    # Calendar days (streaks, "today", time-of-day patterns) are evaluated
    # in this IANA timezone.
    hmi_timezone: str = "UTC"

    # Time range used by the trend tools when the caller gives none.
    default_time_range_days: int = 30


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
