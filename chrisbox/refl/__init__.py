"""
Reflectance computation for CHRIS/Proba products.

Available processors:
    - ToaReflectanceProcessor: top-of-atmosphere reflectance from radiance
"""

from chrisbox.refl.toa import (
    ToaReflectanceProcessor,
    band_solar_irradiance,
    compute_toa_reflectances,
    radiance_to_reflectance,
)

__all__ = [
    'ToaReflectanceProcessor',
    'band_solar_irradiance',
    'compute_toa_reflectances',
    'radiance_to_reflectance',
]
