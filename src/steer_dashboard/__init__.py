"""Operator dashboard for Steer HelmRelease and HelmTestJob resources."""

from steer_dashboard.__version__ import __version__

__all__ = ["__version__"]
