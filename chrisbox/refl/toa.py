"""
TOA reflectance computation for CHRIS/Proba response corrected images.

Physics:
    For a band with solar irradiance E (mW/m^2/nm, corrected for the
    Earth-Sun distance on the acquisition day) and at-sensor radiance L
    (uW/m^2/sr/nm), the top-of-atmosphere reflectance is

        rho_toa = pi * L / (cos(theta_s) * 1000 * E)

    where theta_s is the solar zenith angle. Reflectances are stored as
    int16 with a scaling factor of 1e-4.

    The band irradiance E is a weighted average of the Thuillier table
    over [lambda - w, lambda + w] with weights 1 / (1 + |2 (x - lambda) / w|)^4,
    approximating the band's spectral response.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np

from chrisbox.auxdata.thuillier import SolarIrradianceTable, read_thuillier_table, resolve_table_path
from chrisbox.errors import ProcessingError
from chrisbox.io.product import (
    ATTR_NAME_SOLAR_ZENITH_ANGLE,
    Band,
    ChrisProduct,
    read_product,
    write_product,
)
from chrisbox.utils.config import get_config
from chrisbox.utils.spectral import acquisition_day, solar_irradiance_correction_factor

logger = logging.getLogger(__name__)

TOA_REFL = 'toa_refl'
RADIANCE = 'radiance'
MASK = 'mask'
SOURCE_TYPE_PREFIX = 'CHRIS_M'

_INT16_MIN = np.iinfo(np.int16).min
_INT16_MAX = np.iinfo(np.int16).max


def band_solar_irradiance(table: SolarIrradianceTable, wavelength: float, bandwidth: float) -> float:
    """
    Band-averaged solar irradiance.

    Args:
        table: Solar irradiance table, wavelengths ascending
        wavelength: Band central wavelength in nm
        bandwidth: Band width in nm

    Returns:
        Weighted mean irradiance over the band
    """
    x = table.wavelengths
    window = (x > wavelength - bandwidth) & (x <= wavelength + bandwidth)
    if bandwidth <= 0 or not np.any(window):
        raise ProcessingError(
            'band_solar_irradiance',
            f"no irradiance data for band at {wavelength} nm (width {bandwidth} nm)"
        )

    w = 1.0 / (1.0 + np.abs(2.0 * (x[window] - wavelength) / bandwidth)) ** 4
    return float(np.sum(table.irradiances[window] * w) / np.sum(w))


def radiance_to_reflectance(radiance: np.ndarray, conversion_factor: float,
                            scaling_factor: float) -> np.ndarray:
    """
    Convert radiance samples to scaled int16 reflectance counts.

    Values are rounded half up and saturate at the int16 limits.
    """
    counts = np.trunc(np.asarray(radiance, dtype=np.float64) * conversion_factor / scaling_factor + 0.5)
    return np.clip(counts, _INT16_MIN, _INT16_MAX).astype(np.int16)


class ToaReflectanceProcessor:
    """
    Computes TOA reflectances from a CHRIS/Proba product.

    The target product contains one toa_refl band per radiance band,
    copies of all mask bands and any other bands, and optionally the
    radiance bands themselves.
    """

    def __init__(self,
                 source: ChrisProduct,
                 table: Optional[SolarIrradianceTable] = None,
                 copy_radiance_bands: Optional[bool] = None):
        """
        Initialize processor.

        Args:
            source: Source product (type CHRIS_M*, with radiance bands)
            table: Nominal solar irradiance table (default: configured table)
            copy_radiance_bands: Copy radiance bands to the target (default from config)
        """
        config = get_config()

        self.source = source
        self.copy_radiance_bands = (config.copy_radiance_bands
                                    if copy_radiance_bands is None else copy_radiance_bands)
        self.scaling_factor = config.reflectance_scaling_factor

        self._check_source()

        self.solar_zenith_deg = source.annotation_float(ATTR_NAME_SOLAR_ZENITH_ANGLE)
        self.day = acquisition_day(source.start_time, source.name)

        if table is None:
            table = read_thuillier_table(resolve_table_path())
        self.factor = solar_irradiance_correction_factor(self.day)
        self.table = table.scaled(self.factor)

        self.conversion_factors: Dict[str, float] = {}

        logger.info("ToaReflectanceProcessor initialized")
        logger.info(f"  Source: {source.name} ({source.product_type})")
        logger.info(f"  Solar zenith angle: {self.solar_zenith_deg:.2f} deg")
        logger.info(f"  Acquisition day: {self.day} (irradiance factor {self.factor:.5f})")

    def _check_source(self):
        if not self.source.product_type.startswith(SOURCE_TYPE_PREFIX):
            raise ProcessingError(
                'toa_reflectance',
                f"product type '{self.source.product_type}' is not a CHRIS/Proba RCI"
            )
        if not self.source.find_bands(RADIANCE):
            raise ProcessingError('toa_reflectance', f"product '{self.source.name}' has no radiance bands")

    def _band_irradiance(self, band: Band) -> float:
        return band_solar_irradiance(self.table, band.wavelength, band.bandwidth)

    def _reflectance_band(self, source_band: Band) -> Band:
        irradiance = self._band_irradiance(source_band)
        cos_sza = np.cos(np.radians(self.solar_zenith_deg))
        conversion_factor = np.pi / (cos_sza * 1000.0 * irradiance)

        name = source_band.name.replace(RADIANCE, TOA_REFL, 1)
        self.conversion_factors[name] = conversion_factor
        logger.debug(f"  {name}: E = {irradiance:.3f}, factor = {conversion_factor:.6e}")

        return Band(
            name=name,
            data=radiance_to_reflectance(source_band.geophysical, conversion_factor, self.scaling_factor),
            wavelength=source_band.wavelength,
            bandwidth=source_band.bandwidth,
            spectral_band_index=source_band.spectral_band_index,
            unit='dl',
            scaling_factor=self.scaling_factor,
            solar_flux=irradiance,
            description=f"TOA Reflectance for spectral band {source_band.spectral_band_index + 1}",
            valid_pixel_expression=source_band.valid_pixel_expression,
        )

    def run(self) -> ChrisProduct:
        """
        Build the target product.

        Returns:
            Product named CHRIS_TOA_REFL of type <source type>_TOA_REFL
        """
        source = self.source
        target = ChrisProduct(
            name='CHRIS_TOA_REFL',
            product_type=f'{source.product_type}_TOA_REFL',
            width=source.width,
            height=source.height,
            start_time=source.start_time,
            end_time=source.end_time,
            annotations=source.annotations,
        )

        if self.copy_radiance_bands:
            for band in source.find_bands(RADIANCE):
                copied = target.add_band(band.copy())
                copied.solar_flux = self._band_irradiance(band)

        for band in source.bands.values():
            if band.name.startswith(RADIANCE):
                target.add_band(self._reflectance_band(band))
            elif band.name.startswith(MASK):
                copied = target.add_band(band.copy())
                if band.bandwidth > 0:
                    copied.solar_flux = self._band_irradiance(band)
            else:
                target.add_band(band.copy())

        if self.copy_radiance_bands:
            target.auto_grouping = f'{RADIANCE}:{MASK}:{TOA_REFL}'
        else:
            target.auto_grouping = f'{MASK}:{TOA_REFL}'

        logger.info(f"Computed {len(self.conversion_factors)} TOA reflectance bands")
        return target


def compute_toa_reflectances(source: Union[str, Path, ChrisProduct],
                             output: Optional[Union[str, Path]] = None,
                             copy_radiance_bands: Optional[bool] = None,
                             table: Optional[SolarIrradianceTable] = None) -> ChrisProduct:
    """
    Convenience function for TOA reflectance computation.

    Args:
        source: Source product or path to a product NetCDF
        output: Optional output NetCDF path
        copy_radiance_bands: Copy radiance bands to the target
        table: Solar irradiance table (default: configured table)

    Returns:
        Target product
    """
    if not isinstance(source, ChrisProduct):
        source = read_product(source)

    processor = ToaReflectanceProcessor(source, table=table, copy_radiance_bands=copy_radiance_bands)
    target = processor.run()

    if output is not None:
        write_product(target, output)
    return target
