"""
Utility Module for the Invoice Text Parser.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - File and keyword helpers
"""

from .logger import setup_logger, get_logger
from .helpers import (
    ensure_directory,
    get_file_extension,
    contains_keyword
)

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'contains_keyword'
]
