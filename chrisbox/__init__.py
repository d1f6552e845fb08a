"""
CHRIS/Proba Processing Tools
============================

Processing core for CHRIS/Proba hyperspectral products.

Modules:
    auxdata: Thuillier solar irradiance table and auxdata installation
    io: Product model and NetCDF product I/O
    refl: TOA reflectance computation
    utils: Configuration and spectral helpers

Usage:
    from chrisbox import load_table, compute_toa_reflectances

    # Extraterrestrial solar irradiance
    table = load_table()

    # Radiance to TOA reflectance
    compute_toa_reflectances('chris_rci.nc', 'chris_toa_refl.nc')
"""

__version__ = '1.0.0'

from chrisbox.auxdata.thuillier import (
    SolarIrradianceTable,
    ResourceMissingError,
    CorruptDataError,
    load_table,
)
from chrisbox.errors import ProcessingError
from chrisbox.refl.toa import compute_toa_reflectances

__all__ = [
    'SolarIrradianceTable',
    'ResourceMissingError',
    'CorruptDataError',
    'ProcessingError',
    'load_table',
    'compute_toa_reflectances',
]
