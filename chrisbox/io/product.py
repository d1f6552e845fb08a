"""
In-memory CHRIS/Proba product model and NetCDF product I/O.

A product is a set of equally sized 2-D bands plus the string-valued
CHRIS main product header ("annotations"). On disk a product is a
NETCDF4 file with dimensions (y, x), one variable per band and the
annotations stored as global attributes prefixed with ``chris_``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import numpy as np
import netCDF4 as nc

from chrisbox.errors import ProcessingError

logger = logging.getLogger(__name__)

# Annotation names of the CHRIS main product header
ATTR_NAME_SOLAR_ZENITH_ANGLE = 'Solar Zenith Angle'
ATTR_NAME_CHRIS_MODE = 'CHRIS Mode'
ATTR_NAME_TARGET_NAME = 'Target Name'

ANNOTATION_PREFIX = 'chris_'

# Band attributes persisted as NetCDF variable attributes
_BAND_ATTRS = {
    'wavelength': 'spectral_wavelength',
    'bandwidth': 'spectral_bandwidth',
    'spectral_band_index': 'spectral_band_index',
    'solar_flux': 'solar_flux',
}


@dataclass(eq=False)
class Band:
    """A single raster band with its spectral properties."""

    name: str
    data: np.ndarray
    wavelength: float = 0.0        # nm
    bandwidth: float = 0.0         # nm
    spectral_band_index: int = -1
    unit: str = ''
    scaling_factor: float = 1.0
    solar_flux: float = 0.0
    description: str = ''
    valid_pixel_expression: str = ''

    @property
    def geophysical(self) -> np.ndarray:
        """Sample values with the scaling factor applied."""
        return self.data * self.scaling_factor

    def copy(self, name: Optional[str] = None) -> 'Band':
        return Band(
            name=name or self.name,
            data=self.data.copy(),
            wavelength=self.wavelength,
            bandwidth=self.bandwidth,
            spectral_band_index=self.spectral_band_index,
            unit=self.unit,
            scaling_factor=self.scaling_factor,
            solar_flux=self.solar_flux,
            description=self.description,
            valid_pixel_expression=self.valid_pixel_expression,
        )


class ChrisProduct:
    """
    CHRIS/Proba product.

    Bands are kept in insertion order and must all match the scene size.
    """

    def __init__(self, name: str, product_type: str, width: int, height: int,
                 start_time: Optional[datetime] = None,
                 end_time: Optional[datetime] = None,
                 annotations: Optional[Dict[str, str]] = None):
        self.name = name
        self.product_type = product_type
        self.width = width
        self.height = height
        self.start_time = start_time
        self.end_time = end_time
        self.annotations: Dict[str, str] = dict(annotations or {})
        self.bands: Dict[str, Band] = {}
        self.auto_grouping = ''

    def add_band(self, band: Band) -> Band:
        if band.data.shape != (self.height, self.width):
            raise ValueError(
                f"Band {band.name} has shape {band.data.shape}, "
                f"expected {(self.height, self.width)}"
            )
        if band.name in self.bands:
            raise ValueError(f"Duplicate band name: {band.name}")
        self.bands[band.name] = band
        return band

    def get_band(self, name: str) -> Band:
        return self.bands[name]

    def find_bands(self, prefix: str,
                   band_filter: Optional[Callable[[Band], bool]] = None) -> List[Band]:
        """Bands whose names start with prefix and are accepted by band_filter."""
        return [
            band for band in self.bands.values()
            if band.name.startswith(prefix) and (band_filter is None or band_filter(band))
        ]

    # -- annotations ---------------------------------------------------------

    def annotation_string(self, name: str) -> str:
        if name not in self.annotations:
            raise ProcessingError('annotation', f"could not find CHRIS annotation '{name}'")
        return self.annotations[name]

    def annotation_float(self, name: str, default: Optional[float] = None) -> float:
        """
        Annotation as float.

        If default is given, a missing annotation returns it; an annotation
        that exists but cannot be parsed always raises.
        """
        if name not in self.annotations and default is not None:
            return default
        value = self.annotation_string(name)
        try:
            return float(value)
        except ValueError:
            raise ProcessingError('annotation', f"could not parse CHRIS annotation '{name}'")

    def annotation_int(self, name: str) -> int:
        value = self.annotation_string(name)
        try:
            return int(value)
        except ValueError:
            raise ProcessingError('annotation', f"could not parse CHRIS annotation '{name}'")

    def set_annotation(self, name: str, value) -> None:
        self.annotations[name] = str(value)

    def __repr__(self):
        return (f"ChrisProduct(name={self.name!r}, type={self.product_type!r}, "
                f"size={self.width}x{self.height}, bands={len(self.bands)})")


def _format_time(value: Optional[datetime]) -> str:
    return value.isoformat() if value is not None else ''


def _parse_time(value: str) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def write_product(product: ChrisProduct, path: Union[str, Path]) -> Path:
    """
    Write a product to NetCDF.

    Args:
        product: Product to write
        path: Output file path

    Returns:
        Path to written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with nc.Dataset(path, 'w', format='NETCDF4') as ds:
        global_attrs = {
            'product_name': product.name,
            'product_type': product.product_type,
            'start_time': _format_time(product.start_time),
            'end_time': _format_time(product.end_time),
            'auto_grouping': product.auto_grouping,
            'history': f'Created {datetime.now().isoformat()}',
        }
        for attr, value in global_attrs.items():
            if value:
                ds.setncattr(attr, value)

        # Annotation names contain spaces, so they are indexed rather than
        # used as attribute names directly
        annotation_names = sorted(product.annotations)
        if annotation_names:
            ds.setncattr('annotation_names', '\n'.join(annotation_names))
        for i, name in enumerate(annotation_names):
            ds.setncattr(f'{ANNOTATION_PREFIX}{i}', product.annotations[name])

        ds.createDimension('y', product.height)
        ds.createDimension('x', product.width)

        for band in product.bands.values():
            var = ds.createVariable(band.name, band.data.dtype, ('y', 'x'), zlib=True, complevel=4)
            # Stored samples are raw; scaling is kept as metadata only
            var.set_auto_maskandscale(False)
            var[:] = band.data
            var.setncattr('scaling_factor', float(band.scaling_factor))
            for attr, nc_attr in _BAND_ATTRS.items():
                var.setncattr(nc_attr, getattr(band, attr))
            if band.unit:
                var.units = band.unit
            if band.description:
                var.long_name = band.description
            if band.valid_pixel_expression:
                var.setncattr('valid_pixel_expression', band.valid_pixel_expression)

    logger.info(f"Wrote product: {path} ({len(product.bands)} bands, "
                f"{product.width}x{product.height})")
    return path


def read_product(path: Union[str, Path]) -> ChrisProduct:
    """
    Read a product written by write_product().

    Raises:
        FileNotFoundError: If path does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Product file not found: {path}")

    logger.info(f"Loading product: {path.name}")
    with nc.Dataset(path) as ds:
        attrs = {name: ds.getncattr(name) for name in ds.ncattrs()}

        names = [n for n in str(attrs.get('annotation_names', '')).split('\n') if n]
        annotations = {
            name: str(attrs[f'{ANNOTATION_PREFIX}{i}'])
            for i, name in enumerate(names)
        }

        product = ChrisProduct(
            name=str(attrs.get('product_name', path.stem)),
            product_type=str(attrs.get('product_type', '')),
            width=len(ds.dimensions['x']),
            height=len(ds.dimensions['y']),
            start_time=_parse_time(str(attrs.get('start_time', ''))),
            end_time=_parse_time(str(attrs.get('end_time', ''))),
            annotations=annotations,
        )
        product.auto_grouping = str(attrs.get('auto_grouping', ''))

        for name, var in ds.variables.items():
            var.set_auto_maskandscale(False)
            var_attrs = {a: var.getncattr(a) for a in var.ncattrs()}
            band = Band(name=name, data=np.asarray(var[:]))
            for attr, nc_attr in _BAND_ATTRS.items():
                if nc_attr in var_attrs:
                    setattr(band, attr, type(getattr(band, attr))(var_attrs[nc_attr]))
            band.scaling_factor = float(var_attrs.get('scaling_factor', 1.0))
            band.unit = str(var_attrs.get('units', ''))
            band.description = str(var_attrs.get('long_name', ''))
            band.valid_pixel_expression = str(var_attrs.get('valid_pixel_expression', ''))
            product.add_band(band)

    logger.info(f"  {product}")
    return product
