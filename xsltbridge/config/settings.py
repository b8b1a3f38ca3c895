"""
Configuration Settings
======================

Configuration dataclasses for the XSLT engine and the processors built on
top of it.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Union
import json
import logging
import os

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "XSLTBRIDGE_"


def _env_flag(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class ParserConfig:
    """Options of the XML parsers handed out by the engine factory."""

    no_network: bool = True
    resolve_entities: bool = False
    remove_blank_text: bool = False
    huge_tree: bool = False


@dataclass
class EngineConfig:
    """
    Complete engine configuration.

    Example:
        config = EngineConfig()
        config.parser.remove_blank_text = True
        save_config(config, Path("xsltbridge.yaml"))
    """

    parser: ParserConfig = field(default_factory=ParserConfig)

    # None keeps the libxslt default recursion limit
    xslt_max_depth: Optional[int] = None
    log_level: str = "WARNING"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'parser': asdict(self.parser),
            'xslt_max_depth': self.xslt_max_depth,
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'EngineConfig':
        """Create from dictionary."""
        config = cls()

        if 'parser' in data:
            config.parser = ParserConfig(**data['parser'])
        if 'xslt_max_depth' in data:
            config.xslt_max_depth = data['xslt_max_depth']
        if 'log_level' in data:
            config.log_level = data['log_level']

        return config

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """
        Create configuration from environment variables.

        Environment variable naming:
        - XSLTBRIDGE_NO_NETWORK
        - XSLTBRIDGE_RESOLVE_ENTITIES
        - XSLTBRIDGE_REMOVE_BLANK_TEXT
        - XSLTBRIDGE_HUGE_TREE
        - XSLTBRIDGE_MAX_DEPTH
        - XSLTBRIDGE_LOG_LEVEL
        """
        config = cls()

        if env_network := os.environ.get(f"{ENV_PREFIX}NO_NETWORK"):
            config.parser.no_network = _env_flag(env_network)
        if env_entities := os.environ.get(f"{ENV_PREFIX}RESOLVE_ENTITIES"):
            config.parser.resolve_entities = _env_flag(env_entities)
        if env_blank := os.environ.get(f"{ENV_PREFIX}REMOVE_BLANK_TEXT"):
            config.parser.remove_blank_text = _env_flag(env_blank)
        if env_huge := os.environ.get(f"{ENV_PREFIX}HUGE_TREE"):
            config.parser.huge_tree = _env_flag(env_huge)
        if env_depth := os.environ.get(f"{ENV_PREFIX}MAX_DEPTH"):
            config.xslt_max_depth = int(env_depth)
        if env_level := os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
            config.log_level = env_level.upper()

        return config


def load_config(config_path: Union[str, Path]) -> EngineConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        EngineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return EngineConfig.from_dict(data)


def save_config(config: EngineConfig, config_path: Union[str, Path]) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    if suffix not in ['.yaml', '.yml', '.json']:
        raise ValueError(f"Unsupported config format: {suffix}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

_global_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """
    Get the global configuration instance.

    Returns the cached configuration or creates a new one from environment.
    """
    global _global_config
    if _global_config is None:
        _global_config = EngineConfig.from_env()
    return _global_config


def set_config(config: EngineConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to default."""
    global _global_config
    _global_config = None
