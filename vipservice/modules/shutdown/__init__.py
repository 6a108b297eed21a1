"""Shutdown coordination for the service's signal handling and resource cleanup."""

from .coordinator import ShutdownCoordinator, ShutdownHandler

__all__ = ['ShutdownCoordinator', 'ShutdownHandler']
