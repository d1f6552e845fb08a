"""
Auxiliary data for CHRIS/Proba processing.

Modules:
    thuillier: Extraterrestrial solar irradiance table (binary resource)
    installer: Versioned on-disk installation of packaged auxdata
"""

from chrisbox.auxdata.thuillier import (
    SolarIrradianceTable,
    ResourceMissingError,
    CorruptDataError,
    THUILLIER_TABLE_PATH,
    load_table,
    read_thuillier_table,
    read_text_table,
    write_thuillier_table,
)
from chrisbox.auxdata.installer import AuxdataInstallState, ensure_installed, get_auxdata_dir

__all__ = [
    'SolarIrradianceTable',
    'ResourceMissingError',
    'CorruptDataError',
    'THUILLIER_TABLE_PATH',
    'load_table',
    'read_thuillier_table',
    'read_text_table',
    'write_thuillier_table',
    'AuxdataInstallState',
    'ensure_installed',
    'get_auxdata_dir',
]
