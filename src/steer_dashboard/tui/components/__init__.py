"""Reusable TUI components."""

from steer_dashboard.tui.components.modal import Modal

__all__ = ["Modal"]
