"""
Tests for configuration management.

Run with: pytest tests/test_config.py -v
"""

from pathlib import Path

import yaml

from chrisbox.utils import config as config_module
from chrisbox.utils.config import Config, get_config


class TestConfig:
    """Test configuration management."""

    def test_config_singleton(self):
        """Config should be a singleton."""
        c1 = Config()
        c2 = Config()
        assert c1 is c2

    def test_config_defaults(self):
        """Config should have sensible defaults."""
        config = get_config()

        assert config.copy_radiance_bands is False
        assert config.reflectance_scaling_factor == 1e-4
        assert config.auxdata_root == Path.home() / '.chrisbox' / 'auxdata'
        assert config.get('paths', 'thuillier_table') is None

    def test_config_get_nested(self):
        """Test nested config access."""
        config = get_config()

        assert config.get('auxdata', 'pattern') == '.*'
        assert config.get('nonexistent', 'key', default='fallback') == 'fallback'

    def test_set_nested(self):
        config = get_config()
        config.set('toa', 'copy_radiance_bands', True)
        assert config.copy_radiance_bands is True

    def test_defaults_not_mutated(self):
        get_config().set('toa', 'reflectance_scaling_factor', 1e-3)
        assert config_module.DEFAULT_CONFIG['toa']['reflectance_scaling_factor'] == 1e-4


class TestConfigSources:

    def test_yaml_file_merged(self, monkeypatch, tmp_path):
        path = tmp_path / 'chrisbox_config.yaml'
        path.write_text(yaml.safe_dump({'toa': {'copy_radiance_bands': True}}))
        monkeypatch.setattr(config_module, 'CONFIG_PATHS', [path])
        Config.reset()

        config = get_config()

        assert config.copy_radiance_bands is True
        # Untouched keys keep their defaults
        assert config.reflectance_scaling_factor == 1e-4

    def test_broken_yaml_ignored(self, monkeypatch, tmp_path):
        path = tmp_path / 'chrisbox_config.yaml'
        path.write_text('toa: [unclosed')
        monkeypatch.setattr(config_module, 'CONFIG_PATHS', [path])
        Config.reset()

        assert get_config().copy_radiance_bands is False

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv('CHRISBOX_AUXDATA_DIR', str(tmp_path / 'aux'))
        monkeypatch.setenv('CHRISBOX_TOA_COPY_RADIANCE', 'yes')
        Config.reset()

        config = get_config()

        assert config.auxdata_root == tmp_path / 'aux'
        assert config.copy_radiance_bands is True

    def test_save_roundtrip(self, tmp_path):
        config = get_config()
        config.set('toa', 'copy_radiance_bands', True)

        path = config.save(tmp_path / 'saved.yaml')

        saved = yaml.safe_load(path.read_text())
        assert saved['toa']['copy_radiance_bands'] is True
