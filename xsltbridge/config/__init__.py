"""
Configuration Management
========================

Configuration utilities for the XSLT engine.
"""

from xsltbridge.config.settings import (
    ParserConfig,
    EngineConfig,
    load_config,
    save_config,
    get_config,
    set_config,
    reset_config,
)

__all__ = [
    "ParserConfig",
    "EngineConfig",
    "load_config",
    "save_config",
    "get_config",
    "set_config",
    "reset_config",
]
