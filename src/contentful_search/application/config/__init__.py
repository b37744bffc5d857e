"""
Configuration - spaces configuration source and validation.
"""

from .parser import REQUIRED_FIELDS, parse_space_configs
from .settings import load_settings, load_spaces_config

__all__ = [
    "REQUIRED_FIELDS",
    "parse_space_configs",
    "load_settings",
    "load_spaces_config",
]
