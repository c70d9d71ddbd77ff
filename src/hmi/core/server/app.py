"""Health Metrics & Insights MCP server application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery (`fastmcp run src/hmi/core/server/app.py:mcp`)
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from hmi.core.config.settings import get_settings
from hmi.domains.health.tools.health_metrics_tools import register_health_metrics_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "Health Metrics & Insights"
SERVER_VERSION = "0.1.0"


def create_app() -> FastMCP:
    """Create and configure the health metrics MCP server.

    The server is stateless: every tool receives the records it needs as
    arguments, so there is no storage or provider to wire up.
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Personal health metrics engine. Pass blood pressure, weight, lab, "
            "doctor visit and goal records to compute BMI, blood pressure "
            "categories, trends, a 0-100 health score, tracking streaks and "
            "plain-language insights. Results are informational, not medical advice."
        ),
    )

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "timezone": settings.hmi_timezone,
            "default_time_range_days": settings.default_time_range_days,
        }

    register_health_metrics_tools(server, settings)
    logger.info("Health metrics tools registered (timezone %s)", settings.hmi_timezone)

    return server


# Module-level instance for FastMCP discovery (`fastmcp run ...app.py:mcp`).
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
