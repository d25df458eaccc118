"""
FitLog Backend - Configuration Tests
======================================

What:  Environment parsing, listen address normalization and required-value checks.
"""

import pytest

from app.config import Settings, is_placeholder_key
from app.exceptions import ConfigurationError


def make_settings(**overrides) -> Settings:
    values = {"spreadsheet_id": "sheet", "gemini_api_key": "key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestPort:

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        settings = make_settings()
        assert settings.port == ":8080"
        assert settings.listen_address == ("0.0.0.0", 8080)

    def test_numeric_port_gets_colon(self):
        settings = make_settings(port="10000")
        assert settings.port == ":10000"
        assert settings.listen_port == 10000

    def test_colon_port_kept(self):
        assert make_settings(port=":9000").port == ":9000"

    def test_host_and_port(self):
        settings = make_settings(port="127.0.0.1:9000")
        assert settings.listen_host == "127.0.0.1"
        assert settings.listen_port == 9000

    def test_garbage_port_rejected(self):
        with pytest.raises(ConfigurationError):
            make_settings(port="http").listen_address

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "10000")
        assert Settings(_env_file=None).port == ":10000"


class TestEnvironmentNames:

    def test_legacy_names(self, monkeypatch):
        monkeypatch.delenv("SPREADSHEET_ID", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("SpreadSheetID", "legacy-sheet")
        monkeypatch.setenv("GeminiApiKey", "legacy-key")
        monkeypatch.setenv("CredsFile", "/etc/creds.json")

        settings = Settings(_env_file=None)

        assert settings.spreadsheet_id == "legacy-sheet"
        assert settings.gemini_api_key == "legacy-key"
        assert settings.creds_file == "/etc/creds.json"

    def test_snake_case_names(self, monkeypatch):
        monkeypatch.setenv("SPREADSHEET_ID", "new-sheet")
        monkeypatch.setenv("CREDS_FILE", "/run/creds.json")

        settings = Settings(_env_file=None)

        assert settings.spreadsheet_id == "new-sheet"
        assert settings.creds_file == "/run/creds.json"

    def test_settings_are_frozen(self):
        settings = make_settings()
        with pytest.raises(Exception):
            settings.spreadsheet_id = "other"


class TestValidation:

    def test_complete_configuration_passes(self):
        make_settings().validate_required()

    def test_missing_values_listed(self):
        settings = make_settings(spreadsheet_id="", gemini_api_key="")
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_required()
        assert exc_info.value.context["missing"] == ["SPREADSHEET_ID", "GEMINI_API_KEY"]

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            make_settings(log_level="chatty")

    def test_log_level_uppercased(self):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_cors_origins_list(self):
        settings = make_settings(cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestPlaceholderKey:

    @pytest.mark.parametrize("key", ["", "PASTE_YOUR_API_KEY", "your_gemini_api_key_here"])
    def test_placeholders(self, key):
        assert is_placeholder_key(key)

    def test_real_key(self):
        assert not is_placeholder_key("AIzaSyExample")
