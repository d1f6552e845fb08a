"""Utility modules for CHRIS/Proba processing."""

from chrisbox.utils.config import Config, get_config
from chrisbox.utils.spectral import (
    acquisition_day,
    azimuthal_difference_angle,
    find_band_index,
    solar_irradiance_correction_factor,
)

__all__ = [
    'Config', 'get_config',
    'acquisition_day', 'azimuthal_difference_angle',
    'find_band_index', 'solar_irradiance_correction_factor',
]
