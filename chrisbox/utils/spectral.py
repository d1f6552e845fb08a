"""
Spectral and geometry helpers shared by the CHRIS/Proba operators.
"""

import math
from datetime import date, datetime
from typing import Optional, Sequence, Union

import numpy as np

from chrisbox.errors import ProcessingError


def find_band_index(wavelengths: Sequence[float],
                    wavelength: float,
                    tolerance: float = math.inf) -> int:
    """
    Get index of the band whose central wavelength is closest to a target.

    Args:
        wavelengths: Central wavelengths in nm
        wavelength: Wavelength of interest in nm
        tolerance: Maximum acceptable distance in nm

    Returns:
        Band index, or -1 if the closest band is farther than tolerance
    """
    wavelengths = np.asarray(wavelengths, dtype=np.float64)
    if wavelengths.size == 0:
        return -1

    deltas = np.abs(wavelengths - wavelength)
    idx = int(np.argmin(deltas))
    if deltas[idx] > tolerance:
        return -1
    return idx


def azimuthal_difference_angle(vaa: float, saa: float) -> float:
    """
    Azimuthal difference between view and sun directions.

    Args:
        vaa: View azimuth angle in degrees
        saa: Sun azimuth angle in degrees

    Returns:
        Difference angle in degrees, folded into [0, 180]
    """
    ada = abs(vaa - saa)
    if ada > 180.0:
        return 360.0 - ada
    return ada


def solar_irradiance_correction_factor(day: int) -> float:
    """
    Correction factor for solar irradiance due to the elliptical orbit.

    Irradiance scales as 1/d^2 where d is the Earth-Sun distance in AU.
    Perihelion falls around day 4.

    Args:
        day: Day of year (1-366)

    Returns:
        Multiplicative factor for irradiance at 1 AU
    """
    d = 1.0 - 0.01673 * math.cos(math.radians(0.9856 * (day - 4)))
    return 1.0 / (d * d)


def acquisition_day(start_time: Optional[Union[datetime, date]],
                    product_name: str = '') -> int:
    """Day of year of a product's start time."""
    if start_time is None:
        raise ProcessingError('acquisition_day', f"no date for product '{product_name}'")
    return start_time.timetuple().tm_yday
