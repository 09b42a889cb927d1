"""Steer API integration.

Usage:
    from steer_dashboard.integrations.steer import SteerClient, SteerConnectionConfig

    async with SteerClient(SteerConnectionConfig(base_url="http://localhost:8080")) as client:
        jobs = await client.test_jobs.list()
"""

from steer_dashboard.integrations.steer.client import ResourceAPI, SteerClient
from steer_dashboard.integrations.steer.config import (
    DashboardConfig,
    SteerConfig,
    SteerConnectionConfig,
    load_config,
)
from steer_dashboard.integrations.steer.exceptions import (
    SteerAPIError,
    SteerConnectionError,
    SteerDecodeError,
)

__all__ = [
    "DashboardConfig",
    "ResourceAPI",
    "SteerAPIError",
    "SteerClient",
    "SteerConfig",
    "SteerConnectionConfig",
    "SteerConnectionError",
    "SteerDecodeError",
    "load_config",
]
