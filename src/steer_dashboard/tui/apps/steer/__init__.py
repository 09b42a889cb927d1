"""Steer dashboard TUI application."""

from steer_dashboard.tui.apps.steer.app import SteerApp

__all__ = ["SteerApp"]
