"""
Tests for the command line interface
"""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from rekapan.cli import cli
from rekapan.storage import ActivationRepository


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('EXTRACTION_PROFILE', 'REKAPAN_SHEET', 'LOG_FILE_PATH', 'TIMEZONE'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


class TestParseCommand:
    """Test the parse command"""

    def test_parse_stdin(self, runner):
        result = runner.invoke(cli, ['parse', '-u', '@Tekno1'], input='AO : X123\nCHANNEL : MYIH\n')

        assert result.exit_code == 0
        assert '"ao": "X123"' in result.output
        assert '"teknisi": "tekno1"' in result.output

    def test_parse_file_with_profile(self, runner, tmp_path):
        source = tmp_path / 'msg.txt'
        source.write_text('AO : X1\nNCLI : 445566\n', encoding='utf-8')

        result = runner.invoke(cli, ['parse', str(source), '--profile', 'extended'])

        assert result.exit_code == 0
        assert '"ncli": "445566"' in result.output


class TestSheetCommands:
    """Test commands that talk to the spreadsheet"""

    @patch('rekapan.cli.create_service')
    def test_init_sheet(self, mock_create_service, runner):
        mock_create_service.return_value.records.ensure_header.return_value = True

        result = runner.invoke(cli, ['init-sheet'])

        assert result.exit_code == 0
        assert 'Header written to REKAPAN QUALITY' in result.output

    @patch('rekapan.cli.create_service')
    def test_report(self, mock_create_service, runner):
        mock_create_service.return_value.technician_ranking.return_value = 'RANKING'

        result = runner.invoke(cli, ['report', '--period', 'weekly'])

        assert result.exit_code == 0
        assert 'RANKING' in result.output
        mock_create_service.return_value.technician_ranking.assert_called_once_with(
            None, 'weekly', None, check_access=False
        )

    @patch('rekapan.cli.create_service')
    def test_export_csv(self, mock_create_service, runner, tmp_path, sheets):
        service = MagicMock()
        service.records = ActivationRepository(sheets, 'REKAPAN QUALITY')
        mock_create_service.return_value = service
        output = tmp_path / 'semua.csv'

        result = runner.invoke(cli, ['export', str(output), '--username', 'tekno1'])

        assert result.exit_code == 0
        assert 'Exported 3 records' in result.output
        assert len(output.read_text(encoding='utf-8').splitlines()) == 4

    @patch('rekapan.cli.render_pdf')
    @patch('rekapan.cli.create_service')
    def test_export_pdf_stamped_in_home_timezone(self, mock_create_service, mock_render_pdf, runner, tmp_path, sheets):
        service = MagicMock()
        service.records = ActivationRepository(sheets, 'REKAPAN QUALITY')
        mock_create_service.return_value = service
        output = tmp_path / 'semua.pdf'

        result = runner.invoke(cli, ['export', str(output)])

        assert result.exit_code == 0
        generated_at = mock_render_pdf.call_args.kwargs['generated_at']
        assert str(generated_at.tzinfo) == 'Asia/Jakarta'
