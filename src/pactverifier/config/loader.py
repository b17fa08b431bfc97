"""
Configuration file loading.

Search order:
1. Explicit path (passed by the build tool or caller)
2. .pactverifier/config.yaml (project root)
3. ~/.pactverifier/config.yaml (user home)
4. Default configuration (environment variables only)

The file holds a ``properties`` mapping using the dotted property names::

    properties:
      pact.verifier.publishResults: "true"
      pact.provider.version: 1.2.3
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from pactverifier.config.settings import VerifierSettings
from pactverifier.core.errors import ConfigurationError

logger = structlog.get_logger()


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    Returns:
        Path to config file or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        return None

    cwd_config = Path.cwd() / ".pactverifier" / "config.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / ".pactverifier" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


class ConfigLoader:
    """Loads verifier settings from a YAML file layered over the environment."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or get_config_path()

    def load(self) -> VerifierSettings:
        """Load settings from file or return environment defaults."""
        if self.config_path and self.config_path.exists():
            return self._load_from_file(self.config_path)
        return VerifierSettings()

    def _load_from_file(self, path: Path) -> VerifierSettings:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("failed_to_load_config", path=str(path), error=str(e))
            return VerifierSettings()

        properties = self._properties(data, path)
        logger.debug("loaded_config", path=str(path), properties=sorted(properties))
        return VerifierSettings.from_properties(properties)

    @staticmethod
    def _properties(data: Any, path: Path) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {path} must contain a mapping", details={"path": str(path)}
            )
        properties = data.get("properties", {}) or {}
        if not isinstance(properties, dict):
            raise ConfigurationError(
                f"'properties' in {path} must be a mapping", details={"path": str(path)}
            )
        return properties


def load_settings(path: str | Path | None = None) -> VerifierSettings:
    """
    Convenience function to load verifier settings.

    Args:
        path: Optional explicit config file path

    Returns:
        VerifierSettings instance
    """
    config_path = Path(path) if path else get_config_path()
    loader = ConfigLoader(config_path)
    return loader.load()
