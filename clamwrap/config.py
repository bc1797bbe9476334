import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional

from .models import ClamConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads a ClamConfig from an optional YAML file plus CLAMWRAP_* environment variables.

    Unknown keys are ignored with a warning.
    """

    env_prefix = "CLAMWRAP_"

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config: Optional[ClamConfig] = None
        self.load_config()

    def load_config(self) -> ClamConfig:
        """Load configuration from file"""
        config_data: Dict[str, Any] = {}
        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}

        # Merge with environment variables
        config_data = self._merge_env_vars(config_data)

        unknown = self.unknown_keys(config_data)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        self.config = ClamConfig(**config_data)
        return self.config

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment variables with configuration"""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                config_key = key[len(self.env_prefix):].lower()
                config_data[config_key] = value

        return config_data

    @staticmethod
    def unknown_keys(config_data: Dict[str, Any]) -> List[str]:
        return sorted(set(config_data) - set(ClamConfig.model_fields))

    def get_config(self) -> ClamConfig:
        """Get current configuration"""
        if self.config is None:
            self.load_config()
        return self.config

    def update_config(self, updates: Dict[str, Any]):
        """Update configuration and save it back to the file

        Raises:
            ValueError: On an unknown key or an invalid value (pydantic's
                ValidationError is a ValueError).
        """
        unknown = self.unknown_keys(updates)
        if unknown:
            raise ValueError(f"Unknown configuration key: {', '.join(unknown)}")

        current = self.get_config().model_dump(mode="json")
        current.update(updates)
        self.config = ClamConfig(**current)

        self.save_config()

    def save_config(self):
        """Save configuration to file"""
        if self.config is None or self.config_path is None:
            return

        config_dict = self.config.model_dump(mode="json")

        with open(self.config_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)
