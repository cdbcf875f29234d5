"""
Configuration Module for the Invoice Text Parser.

Thresholds, scan windows and keyword vocabularies used by the
extractors are read through this module so they can be tuned without
code changes. Every component passes its own default to get_config(),
so a settings file only needs the keys it overrides.

Usage:
    from config import get_config, load_config

    load_config("tuned.yaml")          # optional, before building extractors
    scan = get_config("extraction.vendor.scan_lines", 15)
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"


class ConfigurationManager:
    """
    Process-wide holder of the parsed settings file.

    The first instantiation decides which file is loaded; later calls
    return the same object until reset() is called.

    Attributes:
        config_path (Path): Path to the configuration file.

    Example:
        >>> ConfigurationManager().get("extraction.vendor.scan_lines")
        15
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Load the settings file once.

        Args:
            config_path: Optional path to a YAML file.
                        Defaults to config/settings.yaml.
        """
        if self._initialized:
            return

        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = self._read(self.config_path)
        self._initialized = True

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        """
        Parse a settings file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the document is not a mapping.
            yaml.YAMLError: If the file is not valid YAML.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping: {path}")

        # Log files are relative to the project, not the working directory
        log_path = data.get('logging', {}).get('file', {}).get('path')
        if log_path and not Path(log_path).is_absolute():
            data['logging']['file']['path'] = str(PROJECT_ROOT / log_path)

        return data

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Dotted key (e.g., "extraction.total.max").
            default: Returned when any part of the key is missing.

        Example:
            >>> config.get("input.min_text_length")
            50
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded settings; the next access reloads them."""
        cls._instance = None


def load_config(config_path: Optional[Union[str, Path]] = None) -> ConfigurationManager:
    """
    Replace the active settings with another file.

    Components read their settings when constructed, so call this
    before building extractors.

    Args:
        config_path: YAML file to load, or None for the bundled defaults.

    Returns:
        The new configuration manager.
    """
    ConfigurationManager.reset()
    return ConfigurationManager(str(config_path) if config_path else None)


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'load_config']
