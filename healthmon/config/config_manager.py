"""Configuration loading and management."""
import yaml

from ..exceptions import ConfigurationError
from .config import Config
from .display_config import DisplayConfig
from .threshold_config import ThresholdConfig


class ConfigManager:
    """Configuration loading and management."""

    @staticmethod
    def load_config(config_path: str) -> Config:
        """Load configuration from a YAML file.

        Missing sections fall back to defaults; unknown keys and malformed
        YAML raise ConfigurationError.
        """
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read config {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config {config_path} must be a mapping")

        return ConfigManager.from_dict(config_data)

    @staticmethod
    def from_dict(config_data: dict) -> Config:
        """Build a Config from already-parsed data."""
        data = dict(config_data)
        try:
            thresholds = ThresholdConfig(**(data.pop('thresholds', None) or {}))
            display = DisplayConfig(**(data.pop('display', None) or {}))
            return Config(thresholds=thresholds, display=display, **data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
