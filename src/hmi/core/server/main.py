"""Server entry point: ``python -m hmi.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hmi.core.config.settings import Settings, get_settings
from hmi.core.server.app import create_app
from hmi.domains.health.domain_logic.records import TIME_RANGES_DAYS

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host in {"localhost"}:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def check_startup_settings(settings: Settings) -> None:
    """Reject settings the tools would otherwise only fail on per call.

    Raises:
        RuntimeError: For an insecure bind, an unknown timezone, or an
            unsupported default time range.
    """
    if not settings.hmi_allow_insecure_bind and not _is_loopback_host(settings.hmi_host):
        raise RuntimeError(
            "Refusing to bind the health metrics server to a non-loopback host without "
            "an auth layer. Set HMI_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    try:
        ZoneInfo(settings.hmi_timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RuntimeError(f"Unknown HMI_TIMEZONE {settings.hmi_timezone!r}") from exc
    if settings.default_time_range_days not in TIME_RANGES_DAYS:
        raise RuntimeError(
            f"DEFAULT_TIME_RANGE_DAYS must be one of {TIME_RANGES_DAYS}, "
            f"got {settings.default_time_range_days}"
        )


def run() -> None:
    """Start the health metrics MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.hmi_log_level.upper(), logging.INFO))

    check_startup_settings(settings)
    logger.info(
        "Starting Health Metrics & Insights server on %s:%d (timezone %s, default range %d days)",
        settings.hmi_host,
        settings.hmi_port,
        settings.hmi_timezone,
        settings.default_time_range_days,
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.hmi_host,
        port=settings.hmi_port,
    )


if __name__ == "__main__":
    run()
