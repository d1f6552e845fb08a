"""
Tests for the command-line interface.

Run with: pytest tests/test_cli.py -v
"""

import pytest

from chrisbox.auxdata.thuillier import read_thuillier_table, write_thuillier_table
from chrisbox.cli import auxdata_cli, config_cli, thuillier_cli, toa_cli
from chrisbox.io.product import read_product, write_product


class TestThuillierCli:

    def test_convert(self, tmp_path):
        text = tmp_path / 'thuillier.txt'
        text.write_text("400.0 1.5\n500.0 1.6\n600.0 1.4\n")
        output = tmp_path / 'thuillier.img'

        thuillier_cli(['convert', str(text), str(output)])

        table = read_thuillier_table(output)
        assert table.wavelengths.tolist() == [400.0, 500.0, 600.0]
        assert table.irradiances.tolist() == [1.5, 1.6, 1.4]

    def test_info(self, tmp_path, capsys):
        path = write_thuillier_table(tmp_path / 't.img', [400.0, 500.0], [1.0, 2.0])

        thuillier_cli(['info', str(path)])

        assert 'Rows: 2' in capsys.readouterr().out

    def test_missing_table_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            thuillier_cli(['info', str(tmp_path / 'missing.img')])
        assert exc.value.code == 1


class TestToaCli:

    def test_process(self, rci_product, flat_table, tmp_path):
        source = write_product(rci_product, tmp_path / 'rci.nc')
        table = write_thuillier_table(tmp_path / 't.img', flat_table.wavelengths, flat_table.irradiances)
        output = tmp_path / 'toa.nc'

        toa_cli([str(source), str(output), '--table', str(table), '--copy-radiance'])

        product = read_product(output)
        assert 'toa_refl_1' in product.bands
        assert 'radiance_1' in product.bands

    def test_missing_source(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            toa_cli([str(tmp_path / 'missing.nc'), str(tmp_path / 'out.nc')])
        assert exc.value.code == 1

    def test_missing_table(self, rci_product, tmp_path):
        source = write_product(rci_product, tmp_path / 'rci.nc')

        with pytest.raises(SystemExit) as exc:
            toa_cli([str(source), str(tmp_path / 'out.nc'), '--table', str(tmp_path / 'none.img')])
        assert exc.value.code == 1

    def test_wrong_product_type(self, rci_product, flat_table, tmp_path):
        rci_product.product_type = 'MER_RR__1P'
        source = write_product(rci_product, tmp_path / 'rci.nc')
        table = write_thuillier_table(tmp_path / 't.img', flat_table.wavelengths, flat_table.irradiances)

        with pytest.raises(SystemExit):
            toa_cli([str(source), str(tmp_path / 'out.nc'), '--table', str(table)])


class TestAuxdataCli:

    def test_install(self, tmp_path):
        source = tmp_path / 'source'
        source.mkdir()
        (source / 'tai-utc.dat').write_text('x')
        target = tmp_path / 'target'

        auxdata_cli(['install', '--source', str(source), '--target', str(target)])

        assert (target / 'tai-utc.dat').exists()

    def test_install_failure_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            auxdata_cli(['install', '--source', str(tmp_path / 'none'), '--target', str(tmp_path / 't')])

    def test_path(self, isolated_config, tmp_path, capsys):
        isolated_config.set('paths', 'auxdata_dir', str(tmp_path))

        auxdata_cli(['path'])

        assert str(tmp_path / 'chris') in capsys.readouterr().out


class TestConfigCli:

    def test_show(self, capsys):
        config_cli(['--show'])
        assert 'copy_radiance_bands' in capsys.readouterr().out
