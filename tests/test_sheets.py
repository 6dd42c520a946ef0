"""
Tests for the Google Sheets manager
"""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest

from rekapan.exceptions import ConfigurationError
from rekapan.storage.sheets import GoogleSheetsManager, load_service_account_info

KEY_INFO = {'type': 'service_account', 'client_email': 'bot@example.iam.gserviceaccount.com'}


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def manager(service):
    return GoogleSheetsManager(spreadsheet_id='sheet-123', service=service)


class TestServiceAccountKey:
    """Test inline key decoding"""

    def test_raw_json(self):
        assert load_service_account_info(json.dumps(KEY_INFO)) == KEY_INFO

    def test_base64_json(self):
        encoded = base64.b64encode(json.dumps(KEY_INFO).encode('utf-8')).decode('ascii')
        assert load_service_account_info(encoded) == KEY_INFO

    def test_invalid_key(self):
        with pytest.raises(ConfigurationError):
            load_service_account_info('not a key')


class TestGoogleSheetsManager:
    """Test value operations against a mocked Sheets service"""

    def test_requires_spreadsheet_id(self, monkeypatch):
        monkeypatch.delenv('SHEET_ID', raising=False)
        with pytest.raises(ConfigurationError):
            GoogleSheetsManager(service=MagicMock())

    def test_get_values(self, manager, service):
        values = service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {'values': [['A', 'B']]}

        assert manager.get_values('MASTER') == [['A', 'B']]
        values.get.assert_called_once_with(spreadsheetId='sheet-123', range='MASTER')

    def test_get_values_empty_sheet(self, manager, service):
        values = service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {'range': 'MASTER!A1:Z1000'}

        assert manager.get_values('MASTER') == []

    def test_append_row(self, manager, service):
        values = service.spreadsheets.return_value.values.return_value
        values.append.return_value.execute.return_value = {'updates': {'updatedRows': 1}}

        manager.append_row('REKAPAN QUALITY', ('a', 'b'))

        values.append.assert_called_once_with(
            spreadsheetId='sheet-123',
            range='REKAPAN QUALITY',
            valueInputOption='USER_ENTERED',
            body={'values': [['a', 'b']]}
        )

    def test_update_values(self, manager, service):
        values = service.spreadsheets.return_value.values.return_value

        manager.update_values('REKAPAN QUALITY', 'A1:R1', [['TANGGAL']])

        values.update.assert_called_once_with(
            spreadsheetId='sheet-123',
            range='REKAPAN QUALITY!A1:R1',
            valueInputOption='USER_ENTERED',
            body={'values': [['TANGGAL']]}
        )

    @patch('rekapan.storage.sheets.build')
    @patch('rekapan.storage.sheets.service_account.Credentials.from_service_account_info')
    def test_builds_service_from_inline_key(self, mock_creds, mock_build):
        GoogleSheetsManager(spreadsheet_id='sheet-123', service_account_key=json.dumps(KEY_INFO))

        mock_creds.assert_called_once_with(KEY_INFO, scopes=GoogleSheetsManager.SCOPES)
        mock_build.assert_called_once_with('sheets', 'v4', credentials=mock_creds.return_value, cache_discovery=False)

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv('GOOGLE_SERVICE_ACCOUNT_KEY', raising=False)
        monkeypatch.delenv('GOOGLE_CREDENTIALS_PATH', raising=False)
        with pytest.raises(ConfigurationError):
            GoogleSheetsManager(spreadsheet_id='sheet-123')
