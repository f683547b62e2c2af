"""Route group exports."""

from . import health, network, routes

__all__ = ["health", "network", "routes"]
