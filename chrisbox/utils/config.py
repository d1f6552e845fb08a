"""
Configuration management for CHRIS/Proba tools.

Supports:
    - YAML configuration files
    - Environment variable overrides
    - Versioned auxiliary data directory defaults
"""

import copy
import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    'paths': {
        'auxdata_dir': None,      # ~/.chrisbox/auxdata
        'thuillier_table': None,  # Packaged thuillier.img
    },

    # TOA reflectance computation
    'toa': {
        'copy_radiance_bands': False,
        'reflectance_scaling_factor': 1.0e-4,
    },

    # Auxiliary data installation
    'auxdata': {
        'pattern': '.*',
        'module': 'geometric-correction',
    },
}

CONFIG_PATHS = [
    Path.home() / '.chrisbox' / 'config.yaml',
    Path.home() / '.config' / 'chrisbox' / 'config.yaml',
    Path.cwd() / 'chrisbox_config.yaml',
]

ENV_MAPPING = {
    'CHRISBOX_AUXDATA_DIR': ('paths', 'auxdata_dir'),
    'CHRISBOX_THUILLIER_PATH': ('paths', 'thuillier_table'),
    'CHRISBOX_TOA_COPY_RADIANCE': ('toa', 'copy_radiance_bands'),
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Configuration manager with file loading and environment overrides."""

    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._load_config_file()
        self._apply_env_overrides()
        self._apply_defaults()

    @classmethod
    def reset(cls):
        """Drop the singleton so the next access reloads from file and environment."""
        cls._instance = None

    def _load_config_file(self):
        """Load configuration from YAML file if present."""
        for config_path in CONFIG_PATHS:
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        user_config = yaml.safe_load(f) or {}
                    self._merge_config(user_config)
                    logger.info(f"Loaded config from: {config_path}")
                    return
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Failed to load {config_path}: {e}")

    def _merge_config(self, user_config: Dict):
        """Deep merge user config into default config."""
        def merge(base, override):
            for key, value in override.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    merge(base[key], value)
                else:
                    base[key] = value
        merge(self._config, user_config)

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        for env_var, (section, key) in ENV_MAPPING.items():
            if env_var in os.environ:
                value = os.environ[env_var]
                if key == 'copy_radiance_bands':
                    value = _parse_bool(value)
                self._config[section][key] = value
                logger.debug(f"Config override from {env_var}: {section}.{key} = {value}")

    def _apply_defaults(self):
        if not self._config['paths']['auxdata_dir']:
            self._config['paths']['auxdata_dir'] = str(Path.home() / '.chrisbox' / 'auxdata')

    def get(self, *keys, default=None):
        """Get nested config value."""
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        """Set nested config value."""
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    def save(self, path: Optional[Path] = None) -> Path:
        """Save current config to YAML file."""
        if path is None:
            path = CONFIG_PATHS[0]
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self._config, f, default_flow_style=False)
        logger.info(f"Saved config to: {path}")
        return path

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    @property
    def auxdata_root(self) -> Path:
        return Path(self._config['paths']['auxdata_dir']).expanduser()

    @property
    def copy_radiance_bands(self) -> bool:
        return bool(self._config['toa']['copy_radiance_bands'])

    @property
    def reflectance_scaling_factor(self) -> float:
        return float(self._config['toa']['reflectance_scaling_factor'])

    def __repr__(self):
        return f"Config({self._config})"


# Singleton accessor
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
