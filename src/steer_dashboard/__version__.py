"""Version information for steer_dashboard."""

__version__ = "0.1.0"
