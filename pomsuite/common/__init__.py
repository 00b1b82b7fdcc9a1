"""
Shared configuration and logging utilities.
"""

from .config_loader import ConfigLoader, ConfigurationError
from .logging_setup import init_logger

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "init_logger",
]
