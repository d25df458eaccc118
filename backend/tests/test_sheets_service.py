"""
FitLog Backend - Sheets Service Unit Tests (Mocked)
=====================================================

What:  Tests for SheetsService with googleapiclient and google-auth patched out.

What we test:
    ✅ Append targets "<sheet>!A:Z" with USER_ENTERED and one row body
    ✅ Empty sheet name falls back to Logs
    ✅ Read returns the API's values, [] when the range is empty
    ✅ Service-account file vs Application Default Credentials
    ✅ Auth and API failures raised as SheetsServiceError with the cause chained
"""

from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import SheetsServiceError
from app.services.sheets_service import SheetsService, sheet_range


@pytest.fixture
def sheets_api():
    """Patched `build()` and credential loader; yields the values() resource mock."""
    with patch("app.services.sheets_service.build") as mock_build, \
         patch("app.services.sheets_service.service_account") as mock_sa:
        mock_sa.Credentials.from_service_account_file.return_value = MagicMock(name="creds")
        values = mock_build.return_value.spreadsheets.return_value.values.return_value
        values.mock_build = mock_build
        values.mock_sa = mock_sa
        yield values


class TestSheetRange:

    def test_named_sheet(self):
        assert sheet_range("Schedule") == "Schedule!A:Z"

    def test_empty_sheet_is_logs(self):
        assert sheet_range("") == "Logs!A:Z"


class TestAppendRow:

    def test_append_uses_user_entered(self, sheets_api):
        service = SheetsService("sheet-123", "/secrets/creds.json")

        service.append_row("Logs", ["Cardio", "2024-05-01 07:00:00", "AI Scan", "30:00"])

        sheets_api.append.assert_called_once_with(
            spreadsheetId="sheet-123",
            range="Logs!A:Z",
            valueInputOption="USER_ENTERED",
            body={"values": [["Cardio", "2024-05-01 07:00:00", "AI Scan", "30:00"]]},
        )
        sheets_api.append.return_value.execute.assert_called_once()

    def test_append_empty_sheet_defaults_to_logs(self, sheets_api):
        SheetsService("sheet-123", "/secrets/creds.json").append_row("", ["x"])

        assert sheets_api.append.call_args.kwargs["range"] == "Logs!A:Z"

    def test_append_builds_fresh_client_each_call(self, sheets_api):
        service = SheetsService("sheet-123", "/secrets/creds.json")

        service.append_row("Logs", ["a"])
        service.append_row("Logs", ["b"])

        assert sheets_api.mock_build.call_count == 2
        sheets_api.mock_sa.Credentials.from_service_account_file.assert_called_with(
            "/secrets/creds.json", scopes=SheetsService.SCOPES
        )

    def test_append_api_error_wrapped(self, sheets_api):
        sheets_api.append.return_value.execute.side_effect = RuntimeError("403 The caller does not have permission")

        with pytest.raises(SheetsServiceError) as exc_info:
            SheetsService("sheet-123", "/secrets/creds.json").append_row("Logs", ["a"])

        assert "does not have permission" in exc_info.value.detail
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_auth_error_wrapped(self, sheets_api):
        sheets_api.mock_sa.Credentials.from_service_account_file.side_effect = FileNotFoundError(
            "creds.json"
        )

        with pytest.raises(SheetsServiceError, match="authenticate") as exc_info:
            SheetsService("sheet-123", "/missing/creds.json").append_row("Logs", ["a"])

        assert exc_info.value.detail.startswith("auth error:")
        sheets_api.append.assert_not_called()


class TestReadRows:

    def test_read_returns_values(self, sheets_api):
        sheets_api.get.return_value.execute.return_value = {
            "range": "Logs!A1:C2",
            "values": [["Type", "Date", "Source"], ["Cardio", "2024-05-01"]],
        }

        rows = SheetsService("sheet-123", "/secrets/creds.json").read_rows("Logs")

        assert rows == [["Type", "Date", "Source"], ["Cardio", "2024-05-01"]]
        sheets_api.get.assert_called_once_with(spreadsheetId="sheet-123", range="Logs!A:Z")

    def test_read_empty_range(self, sheets_api):
        sheets_api.get.return_value.execute.return_value = {"range": "Schedule!A1:Z1000"}

        assert SheetsService("sheet-123", "/secrets/creds.json").read_rows("Schedule") == []

    def test_read_error_wrapped(self, sheets_api):
        sheets_api.get.return_value.execute.side_effect = RuntimeError("Unable to parse range: Nope!A:Z")

        with pytest.raises(SheetsServiceError, match="Failed to read range"):
            SheetsService("sheet-123", "/secrets/creds.json").read_rows("Nope")


class TestCredentials:

    def test_application_default_credentials_without_file(self):
        with patch("app.services.sheets_service.build") as mock_build, \
             patch("google.auth.default") as mock_default:
            adc_creds = MagicMock(name="adc")
            mock_default.return_value = (adc_creds, "project-id")

            SheetsService("sheet-123", "").read_rows("Logs")

        mock_default.assert_called_once_with(scopes=SheetsService.SCOPES)
        assert mock_build.call_args.kwargs["credentials"] is adc_creds
