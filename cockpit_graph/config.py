"""
Configuration management for cockpit_graph.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage the CMS host, locales, layout components
and node-graph conventions without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List
import logging


class ConfigManager:
    """
    Manages configuration loading and access for cockpit_graph.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load configuration: {e}")
            # Fall back to default configuration
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "cockpit": {
                "host": ""
            },
            "i18n": {
                "available_lngs": []
            },
            "layout": {
                "custom_components": [],
                "static_prefix": "/static/"
            },
            "graph": {
                "edge_suffix": "___NODE",
                "files_suffix": "_files",
                "missing_relation": "warn"
            },
            "assets": {
                "cache_dir": ".cache/assets",
                "timeout": 30.0
            },
            "database": {
                "filename": "nodes.db"
            },
            "paths": {
                "log_file": "cockpit_graph.log"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "cockpit.host")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("i18n.available_lngs")  # Returns []
            config.get("graph.edge_suffix")  # Returns "___NODE"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def host(self) -> str:
        """Get the CMS host used to absolutize relative inline image URLs."""
        return self.get("cockpit.host", "") or ""

    @property
    def available_lngs(self) -> List[str]:
        """Get the locales a node is produced for (empty means unlocalized)."""
        return list(self.get("i18n.available_lngs", []) or [])

    @property
    def custom_components(self) -> List[str]:
        """Get the allow-list of custom layout components."""
        return list(self.get("layout.custom_components", []) or [])

    @property
    def static_prefix(self) -> str:
        """Get the URL prefix rewritten inline images are served from."""
        return self.get("layout.static_prefix", "/static/")

    @property
    def edge_suffix(self) -> str:
        """Get the key suffix marking an owning-edge reference."""
        return self.get("graph.edge_suffix", "___NODE")

    @property
    def files_suffix(self) -> str:
        """Get the suffix of the per-layout-field asset edge list."""
        return self.get("graph.files_suffix", "_files")

    @property
    def missing_relation_policy(self) -> str:
        """Get what to do with a missing relation target: 'warn' or 'raise'."""
        return self.get("graph.missing_relation", "warn")

    @property
    def asset_cache_dir(self) -> str:
        """Get the directory downloaded inline assets are cached in."""
        return self.get("assets.cache_dir", ".cache/assets")

    @property
    def asset_timeout(self) -> float:
        """Get the remote asset download timeout."""
        return self.get("assets.timeout", 30.0)

    @property
    def database_filename(self) -> str:
        """Get database filename."""
        return self.get("database.filename", "nodes.db")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "cockpit_graph.log")


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
