"""
Infrastructure Module - Cross-cutting concerns.

This module provides:
- Logging: Structured logging with color support
"""

from .logging import LoggerMixin, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
