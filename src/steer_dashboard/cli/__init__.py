"""Command-line interface for the Steer dashboard."""
