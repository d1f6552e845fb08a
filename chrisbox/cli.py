"""
Command-line interface for CHRIS/Proba tools.

Usage:
    chrisbox-toa chris_rci.nc chris_toa_refl.nc --copy-radiance
    chrisbox-thuillier convert thuillier.txt thuillier.img
    chrisbox-auxdata install
    chrisbox-config --show
"""

import sys
import logging
import argparse
from pathlib import Path

from chrisbox.errors import CorruptDataError, ProcessingError, ResourceMissingError

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )


def toa_cli(argv=None):
    """TOA reflectance CLI."""
    parser = argparse.ArgumentParser(
        prog='chrisbox-toa',
        description='CHRIS/Proba TOA Reflectance Computation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  chrisbox-toa chris_rci.nc chris_toa_refl.nc
  chrisbox-toa chris_rci.nc chris_toa_refl.nc --copy-radiance
  chrisbox-toa chris_rci.nc chris_toa_refl.nc --table my_thuillier.img
        """
    )

    parser.add_argument('source', help='Input CHRIS/Proba RCI product (NetCDF)')
    parser.add_argument('output', help='Output TOA reflectance product (NetCDF)')
    parser.add_argument('--copy-radiance', action='store_true', default=None,
                        help='Copy radiance bands to the output product')
    parser.add_argument('--table', default=None,
                        help='Solar irradiance table (default: packaged Thuillier table)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    from chrisbox.auxdata.thuillier import read_thuillier_table, resolve_table_path
    from chrisbox.refl.toa import compute_toa_reflectances

    source_path = Path(args.source)
    if not source_path.exists():
        logger.error(f"Source product not found: {source_path}")
        sys.exit(1)

    try:
        table = read_thuillier_table(resolve_table_path(args.table))
        compute_toa_reflectances(source_path, args.output,
                                 copy_radiance_bands=args.copy_radiance,
                                 table=table)
    except (ResourceMissingError, CorruptDataError, ProcessingError) as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Output written to: {args.output}")


def thuillier_cli(argv=None):
    """Solar irradiance table CLI."""
    parser = argparse.ArgumentParser(
        prog='chrisbox-thuillier',
        description='Thuillier solar irradiance table tools',
    )
    subparsers = parser.add_subparsers(dest='command')

    convert = subparsers.add_parser('convert', help='Convert a text dump to the binary table')
    convert.add_argument('text', help='Two-column text table (wavelength irradiance)')
    convert.add_argument('output', help='Binary table to write')

    info = subparsers.add_parser('info', help='Summarize a binary table')
    info.add_argument('table', nargs='?', default=None,
                      help='Binary table (default: packaged Thuillier table)')

    args = parser.parse_args(argv)
    _configure_logging()

    from chrisbox.auxdata.thuillier import (
        read_text_table, read_thuillier_table, resolve_table_path, write_thuillier_table,
    )

    try:
        if args.command == 'convert':
            table = read_text_table(args.text)
            write_thuillier_table(args.output, table.wavelengths, table.irradiances)

        elif args.command == 'info':
            path = resolve_table_path(args.table)
            table = read_thuillier_table(path)
            print(f"Table: {path}")
            print(f"Rows: {table.row_count}")
            if table.row_count:
                print(f"Wavelength range: {table.wavelengths[0]:.2f} - {table.wavelengths[-1]:.2f} nm")
                print(f"Irradiance range: {table.irradiances.min():.4f} - {table.irradiances.max():.4f}")

        else:
            parser.print_help()
    except (ResourceMissingError, CorruptDataError) as e:
        logger.error(str(e))
        sys.exit(1)


def auxdata_cli(argv=None):
    """Auxiliary data CLI."""
    parser = argparse.ArgumentParser(
        prog='chrisbox-auxdata',
        description='CHRIS/Proba auxiliary data installation',
    )
    parser.add_argument('command', choices=['install', 'path'],
                        help='install: copy packaged auxdata; path: print install directory')
    parser.add_argument('--source', default=None, help='Auxdata source directory')
    parser.add_argument('--target', default=None, help='Install directory')
    parser.add_argument('--pattern', default=None, help='Regular expression over relative paths')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    from chrisbox.auxdata.installer import AuxdataInstallState, ensure_installed, get_auxdata_dir

    if args.command == 'path':
        print(args.target or get_auxdata_dir())
        return

    if not ensure_installed(AuxdataInstallState(), args.source, args.target, args.pattern):
        sys.exit(1)


def config_cli(argv=None):
    """Configuration management CLI."""
    parser = argparse.ArgumentParser(
        prog='chrisbox-config',
        description='CHRIS/Proba Tools Configuration',
    )

    parser.add_argument('--show', action='store_true',
                        help='Show current configuration')
    parser.add_argument('--init', action='store_true',
                        help='Create config file template')

    args = parser.parse_args(argv)

    from chrisbox.utils.config import CONFIG_PATHS, get_config

    config = get_config()

    if args.show:
        import yaml
        print(yaml.safe_dump(config.as_dict(), default_flow_style=False))

    elif args.init:
        config_path = CONFIG_PATHS[0]
        if config_path.exists():
            print(f"Config already exists: {config_path}")
        else:
            config.save(config_path)
            print(f"Created config: {config_path}")

    else:
        parser.print_help()


def main():
    """Main entry point - dispatch to appropriate CLI."""
    if len(sys.argv) < 2:
        print("CHRIS/Proba Processing Tools")
        print()
        print("Commands:")
        print("  chrisbox-toa        - TOA reflectance computation")
        print("  chrisbox-thuillier  - Solar irradiance table tools")
        print("  chrisbox-auxdata    - Auxiliary data installation")
        print("  chrisbox-config     - Configuration management")
        print()
        print("Use --help with any command for details.")
        sys.exit(0)

    # Simple dispatch based on script name
    script_name = Path(sys.argv[0]).stem
    if 'thuillier' in script_name:
        thuillier_cli()
    elif 'auxdata' in script_name:
        auxdata_cli()
    elif 'config' in script_name:
        config_cli()
    else:
        toa_cli()


if __name__ == '__main__':
    main()
