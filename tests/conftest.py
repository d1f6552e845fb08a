"""
Pytest configuration and fixtures for CHRIS/Proba tools tests.
"""

import struct
from datetime import datetime

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Fresh configuration per test, ignoring user config files and environment."""
    from chrisbox.utils import config as config_module

    for env_var in config_module.ENV_MAPPING:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(config_module, 'CONFIG_PATHS', [tmp_path / 'no_config.yaml'])
    config_module.Config.reset()
    yield config_module.get_config()
    config_module.Config.reset()


@pytest.fixture
def pack_table():
    """Build raw table bytes: big-endian count, wavelengths, irradiances."""
    def pack(wavelengths, irradiances, count=None):
        count = len(wavelengths) if count is None else count
        return (struct.pack('>i', count)
                + struct.pack(f'>{len(wavelengths)}d', *wavelengths)
                + struct.pack(f'>{len(irradiances)}d', *irradiances))
    return pack


@pytest.fixture
def flat_table():
    """Flat irradiance of 1500 mW/m^2/nm on a 1 nm grid from 350 to 1100 nm."""
    from chrisbox.auxdata.thuillier import SolarIrradianceTable

    wavelengths = np.arange(350.0, 1101.0, 1.0)
    return SolarIrradianceTable(wavelengths, np.full_like(wavelengths, 1500.0))


@pytest.fixture
def rci_product():
    """Small CHRIS mode 1 product with two radiance bands and a mask band."""
    from chrisbox.io.product import Band, ChrisProduct

    product = ChrisProduct(
        name='CHRIS_TEST', product_type='CHRIS_M1', width=4, height=3,
        start_time=datetime(2006, 7, 4, 10, 30),
        end_time=datetime(2006, 7, 4, 10, 31),
        annotations={'Solar Zenith Angle': '60.0', 'CHRIS Mode': '1', 'Target Name': 'Test'},
    )
    radiance = np.arange(12, dtype=np.int32).reshape(3, 4) * 1000
    product.add_band(Band('radiance_1', radiance, wavelength=490.0, bandwidth=10.0,
                          spectral_band_index=0, unit='mW/m^2/sr/nm'))
    product.add_band(Band('radiance_2', radiance * 2, wavelength=670.0, bandwidth=12.0,
                          spectral_band_index=1, unit='mW/m^2/sr/nm'))
    product.add_band(Band('mask_1', np.zeros((3, 4), dtype=np.int16), wavelength=490.0,
                          bandwidth=10.0, spectral_band_index=0))
    product.add_band(Band('latitude', np.full((3, 4), 51.5, dtype=np.float32)))
    return product
