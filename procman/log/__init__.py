"""
Logging module for procman.
This module provides functionality to set up console and file logging.
"""

from .setup import setup_logging, resolve_level

__all__ = ["setup_logging", "resolve_level"]
