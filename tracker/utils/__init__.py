"""
Utilities package for the time tracker.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from tracker.utils.logging import configure_for_env, configure_logging, get_logger

__all__ = [
    "configure_for_env",
    "configure_logging",
    "get_logger",
]
