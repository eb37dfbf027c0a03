"""
Utility functions for PGA2D.

Includes configuration management.
"""

from .config import Config, load_config, save_config

__all__ = [
    "Config",
    "load_config",
    "save_config",
]
