"""Backend integrations for steer_dashboard."""
