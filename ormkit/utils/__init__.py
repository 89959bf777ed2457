"""
Utilities package for ormkit.

Exports shared helpers for logging and the time source.
Keep this package lightweight and free of database logic.
"""

from ormkit.utils.clock import now
from ormkit.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "now",
]
