"""
ReadSpool v0.1.0

Configuration management for ReadSpool.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

from .parser import ConfigParser, ConfigValidationError
from .schema import (
    DEFAULT_CONFIG,
    load_config,
    resolve_gzipped,
    save_config_template,
    validate_config,
)

__all__ = [
    "ConfigParser",
    "ConfigValidationError",
    "DEFAULT_CONFIG",
    "load_config",
    "resolve_gzipped",
    "save_config_template",
    "validate_config",
]
