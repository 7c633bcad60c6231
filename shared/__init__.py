"""
elfdeps Shared Module
=====================

Configuration, logging and console presentation shared by the elfdeps
command-line tool and its analysis core.
"""

from shared.config import DepsConfig, get_config

__all__ = ["DepsConfig", "get_config"]
