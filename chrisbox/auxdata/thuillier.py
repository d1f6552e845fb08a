"""
Thuillier extraterrestrial solar irradiance table.

The table ships with the package as a packed binary resource
(``thuillier.img``) with the layout:

    int32  (big-endian)   row count N
    N x float64 (big-endian)   wavelengths (nm)
    N x float64 (big-endian)   irradiances (mW/m^2/nm)

The reference dataset has N = 8191. The plain-text form of the same
data (two whitespace-separated columns) is used to build and verify the
binary resource.

References:
    Thuillier et al. (2003): The solar spectral irradiance from 200 to
        2400 nm as measured by the SOLSPEC spectrometer from the
        ATLAS and EURECA missions. Solar Physics, 214(1), 1-22.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

THUILLIER_TABLE_PATH = Path(__file__).parent / 'thuillier.img'

REFERENCE_ROW_COUNT = 8191

_COUNT_DTYPE = np.dtype('>i4')
_VALUE_DTYPE = np.dtype('>f8')


class ResourceMissingError(FileNotFoundError):
    """The irradiance table resource could not be opened."""


class CorruptDataError(ValueError):
    """The irradiance table resource holds fewer values than it declares."""


@dataclass(frozen=True, eq=False)
class SolarIrradianceTable:
    """
    Solar spectral irradiance as two parallel, read-only sequences.

    Attributes:
        wavelengths: Wavelengths in nm
        irradiances: Spectral irradiance at each wavelength
    """

    wavelengths: np.ndarray
    irradiances: np.ndarray

    def __post_init__(self):
        wavelengths = np.array(self.wavelengths, dtype=np.float64).ravel()
        irradiances = np.array(self.irradiances, dtype=np.float64).ravel()

        if len(wavelengths) != len(irradiances):
            raise ValueError(
                f"Wavelength and irradiance lengths differ: "
                f"{len(wavelengths)} != {len(irradiances)}"
            )

        wavelengths.flags.writeable = False
        irradiances.flags.writeable = False
        object.__setattr__(self, 'wavelengths', wavelengths)
        object.__setattr__(self, 'irradiances', irradiances)

    @property
    def row_count(self) -> int:
        return len(self.wavelengths)

    def __len__(self) -> int:
        return self.row_count

    def as_array(self) -> np.ndarray:
        """Return the table as a (2, row_count) array: wavelengths, irradiances."""
        return np.vstack([self.wavelengths, self.irradiances])

    def scaled(self, factor: float) -> 'SolarIrradianceTable':
        """
        Return a copy with all irradiances multiplied by ``factor``.

        Used for the Earth-Sun distance correction; this table is unchanged.
        """
        return SolarIrradianceTable(self.wavelengths, self.irradiances * factor)


def read_thuillier_table(path: Union[str, Path]) -> SolarIrradianceTable:
    """
    Decode a binary irradiance table.

    Args:
        path: Path to the binary table

    Returns:
        SolarIrradianceTable with row_count entries per sequence

    Raises:
        ResourceMissingError: If the file cannot be opened
        CorruptDataError: If the header or payload is shorter than declared
    """
    path = Path(path)

    try:
        stream = open(path, 'rb')
    except OSError as e:
        raise ResourceMissingError(
            f"Could not read extraterrestrial solar irradiance table: {path}"
        ) from e

    with stream:
        header = stream.read(_COUNT_DTYPE.itemsize)
        if len(header) < _COUNT_DTYPE.itemsize:
            raise CorruptDataError(f"Irradiance table header truncated: {path}")

        row_count = int(np.frombuffer(header, dtype=_COUNT_DTYPE)[0])
        if row_count < 0:
            raise CorruptDataError(f"Negative row count {row_count} in {path}")

        expected = 2 * row_count * _VALUE_DTYPE.itemsize
        payload = stream.read(expected)

    if len(payload) < expected:
        raise CorruptDataError(
            f"Irradiance table truncated: {path} declares {row_count} rows "
            f"({expected} bytes of values), found {len(payload)} bytes"
        )

    values = np.frombuffer(payload, dtype=_VALUE_DTYPE).astype(np.float64)
    logger.debug(f"Read {row_count} irradiance rows from {path}")

    return SolarIrradianceTable(values[:row_count], values[row_count:])


def load_table() -> SolarIrradianceTable:
    """Load the packaged Thuillier table."""
    return read_thuillier_table(THUILLIER_TABLE_PATH)


def resolve_table_path(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Pick the irradiance table to use.

    An explicit path wins, then ``paths.thuillier_table`` from the
    configuration, then the packaged resource.
    """
    if path is not None:
        return Path(path)

    from chrisbox.utils.config import get_config

    configured = get_config().get('paths', 'thuillier_table')
    if configured:
        return Path(configured).expanduser()
    return THUILLIER_TABLE_PATH


def write_thuillier_table(path: Union[str, Path],
                          wavelengths: Sequence[float],
                          irradiances: Sequence[float]) -> Path:
    """
    Write a binary irradiance table readable by read_thuillier_table().

    Args:
        path: Output path
        wavelengths: Wavelengths in nm
        irradiances: Irradiance values, same length as wavelengths

    Returns:
        Path to written file
    """
    table = SolarIrradianceTable(wavelengths, irradiances)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'wb') as f:
        f.write(np.array([table.row_count], dtype=_COUNT_DTYPE).tobytes())
        f.write(table.wavelengths.astype(_VALUE_DTYPE).tobytes())
        f.write(table.irradiances.astype(_VALUE_DTYPE).tobytes())

    logger.info(f"Wrote irradiance table: {path} ({table.row_count} rows)")
    return path


def read_text_table(path: Union[str, Path]) -> SolarIrradianceTable:
    """
    Parse a plain-text dump of the table.

    The dump is a stream of whitespace-separated numbers read as
    (wavelength, irradiance) pairs, one pair per row.

    Raises:
        ResourceMissingError: If the file cannot be opened
        CorruptDataError: If a value is not numeric or a pair is incomplete
    """
    path = Path(path)

    try:
        with open(path, 'r') as f:
            tokens = f.read().split()
    except OSError as e:
        raise ResourceMissingError(f"Could not read irradiance text table: {path}") from e

    try:
        values = np.array([float(t) for t in tokens], dtype=np.float64)
    except ValueError as e:
        raise CorruptDataError(f"Non-numeric value in {path}: {e}") from e

    if len(values) % 2:
        raise CorruptDataError(f"Odd number of values ({len(values)}) in {path}")

    pairs = values.reshape(-1, 2)
    return SolarIrradianceTable(pairs[:, 0], pairs[:, 1])
