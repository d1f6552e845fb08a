"""
Auxiliary data installation.

Copies the auxiliary files shipped with the package into a versioned
directory on disk, so that data of different releases never mixes:

    <auxdata root>/chris/<version>/<module>/

Installation happens at most once per AuxdataInstallState handle. Callers
that share a handle (e.g. all operators of one session) share the install;
tests create fresh handles.
"""

import re
import shutil
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from chrisbox.utils.config import get_config

logger = logging.getLogger(__name__)

AUXDATA_SOURCE_DIR = Path(__file__).parent / 'geometric_correction'


@dataclass
class AuxdataInstallState:
    """Installation state handle for ensure_installed()."""

    installed: bool = False
    succeeded: bool = False
    installed_files: List[Path] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


def _package_version() -> str:
    try:
        from chrisbox import __version__
        return __version__
    except ImportError:
        return 'unknown'


def get_auxdata_dir(version: Optional[str] = None,
                    root: Optional[Union[str, Path]] = None,
                    module: Optional[str] = None) -> Path:
    """
    Versioned auxiliary data directory.

    Args:
        version: Software version (default: installed package version)
        root: Auxdata root (default: paths.auxdata_dir from config)
        module: Module subdirectory (default: auxdata.module from config)

    Returns:
        Path to <root>/chris/<version>/<module>
    """
    config = get_config()
    version = version or _package_version() or 'unknown'
    root = Path(root).expanduser() if root is not None else config.auxdata_root
    module = module or config.get('auxdata', 'module', default='geometric-correction')
    return root / 'chris' / version / module


def _install(source_dir: Path, target_dir: Path, pattern: str) -> List[Path]:
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Auxdata source directory not found: {source_dir}")

    regex = re.compile(pattern)
    copied = []
    for source in sorted(source_dir.rglob('*')):
        if not source.is_file():
            continue
        relative = source.relative_to(source_dir)
        if not regex.fullmatch(relative.as_posix()):
            continue

        target = target_dir / relative
        if target.exists():
            logger.debug(f"  Already present: {target}")
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        copied.append(target)
        logger.debug(f"  Installed: {relative}")

    return copied


def ensure_installed(state: AuxdataInstallState,
                     source_dir: Optional[Union[str, Path]] = None,
                     target_dir: Optional[Union[str, Path]] = None,
                     pattern: Optional[str] = None) -> bool:
    """
    Install auxiliary data once for the given state handle.

    Files below source_dir whose relative path matches pattern are copied
    into target_dir; files already present in target_dir are kept.

    Args:
        state: Installation state handle
        source_dir: Directory holding packaged auxdata (default: package auxdata)
        target_dir: Install directory (default: get_auxdata_dir())
        pattern: Regular expression over relative paths (default from config)

    Returns:
        True if the install for this handle succeeded, False if it failed
    """
    with state.lock:
        if state.installed:
            return state.succeeded
        state.installed = True

        source_dir = Path(source_dir) if source_dir is not None else AUXDATA_SOURCE_DIR
        target_dir = Path(target_dir) if target_dir is not None else get_auxdata_dir()
        pattern = pattern or get_config().get('auxdata', 'pattern', default='.*')

        logger.info(f"Installing CHRIS auxdata from {source_dir} into {target_dir}")
        try:
            state.installed_files = _install(source_dir, target_dir, pattern)
        except (OSError, re.error) as e:
            logger.error(f"CHRIS auxdata could not be extracted to {target_dir}: {e}")
            state.succeeded = False
            return False

        logger.info(f"  {len(state.installed_files)} file(s) installed")
        state.succeeded = True
        return True
