"""Logging configuration for steer_dashboard."""

from steer_dashboard.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
