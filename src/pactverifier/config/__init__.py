"""
Verifier configuration.

Settings come from PACT_* environment variables (or a .env file), optionally
layered with a YAML file of dotted property names.
"""

from pactverifier.config.loader import ConfigLoader, get_config_path, load_settings
from pactverifier.config.settings import VerifierSettings

__all__ = [
    "VerifierSettings",
    "ConfigLoader",
    "get_config_path",
    "load_settings",
]
