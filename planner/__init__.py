"""Planner: per-user events and items behind JWT authentication."""

__version__ = "1.0.0"
