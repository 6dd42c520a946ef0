"""
Tests for PDF and CSV export
"""

from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

from rekapan.export import render_csv, render_pdf
from rekapan.export.pdf import _cell_text


class TestCsvExport:
    """Test CSV rendering"""

    def test_quoting(self):
        text = render_csv(['A', 'B', 'C'], [['a,b', 'say "hi"', 'plain'], ['line\nbreak', None, '']])

        assert text == 'A,B,C\n"a,b","say ""hi""",plain\n"line\nbreak",,\n'

    def test_header_only(self):
        assert render_csv(['A', 'B'], []) == 'A,B\n'


class TestPdfExport:
    """Test PDF rendering"""

    def test_renders_multi_page_table(self, tmp_path):
        path = tmp_path / 'out.pdf'
        rows = [[f"row {i}", 'x' * 80, '<tag> & co'] for i in range(120)]

        result = render_pdf(['NO', 'LONG', 'TEXT'], rows, str(path), generated_at=datetime(2024, 6, 12, 9, 0))

        assert result == str(path)
        data = path.read_bytes()
        assert data.startswith(b'%PDF')
        assert data.count(b'/Type /Page') - data.count(b'/Type /Pages') >= 2

    def test_short_rows(self, tmp_path):
        path = tmp_path / 'short.pdf'
        render_pdf(['A', 'B', 'C'], [['only one']], str(path))
        assert path.stat().st_size > 0

    def test_default_timestamp_uses_home_timezone(self, tmp_path):
        stamp = datetime(2024, 6, 12, 16, 30, tzinfo=ZoneInfo('Asia/Jakarta'))
        with patch('rekapan.export.pdf.now_in', return_value=stamp) as mock_now_in:
            render_pdf(['A'], [['x']], str(tmp_path / 'stamped.pdf'))

        mock_now_in.assert_called_once_with('Asia/Jakarta')

    def test_cell_text_cut(self):
        assert _cell_text('z' * 60) == 'z' * 50
        assert _cell_text(None) == ''
