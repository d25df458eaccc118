"""
FitLog Backend - Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file), validates
       types, and produces one frozen `Settings` object that is handed to the
       app factory and the services it builds.
Who:   Built once by `get_settings()` (server entry point, `app.main`).
When:  Loaded once at startup; read-only afterwards.

Environment names:
    Both the snake_case names and the CamelCase names used by earlier
    deployments are accepted:

        PORT                              listen address (":8080", "10000", "127.0.0.1:9000")
        SPREADSHEET_ID / SpreadSheetID    target spreadsheet (required)
        GEMINI_API_KEY / GeminiApiKey     Gemini API key (required)
        CREDS_FILE / CredsFile            service-account JSON path
"""

from functools import lru_cache
from typing import List, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from app.exceptions import ConfigurationError

# Values shipped in sample .env files that must never reach Gemini
PLACEHOLDER_KEY_MARKERS = ("PASTE_YOUR", "your_gemini_api_key_here")

DEFAULT_BIND_HOST = "0.0.0.0"


def is_placeholder_key(key: str) -> bool:
    """True when the API key is empty or still one of the sample placeholders."""
    if not key:
        return True
    return any(marker in key for marker in PLACEHOLDER_KEY_MARKERS)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern. The model is frozen: handlers and
    services receive it through the app factory and never mutate it.
    """

    # ── Server ────────────────────────────────────────────────────────────
    # Go-style listen address. A bare number ("10000") becomes ":10000".
    port: str = Field(default=":8080")

    # What: Controls verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # Comma-separated allowed origins for the mobile/web frontend
    cors_origins: str = Field(default="*")

    # ── Google Sheets ─────────────────────────────────────────────────────
    spreadsheet_id: str = Field(
        default="",
        validation_alias=AliasChoices("spreadsheet_id", "spreadsheetid"),
        description="ID of the spreadsheet holding the Logs/Schedule tabs",
    )
    creds_file: str = Field(
        default="",
        validation_alias=AliasChoices("creds_file", "credsfile"),
        description="Path to a service-account JSON key; empty uses Application Default Credentials",
    )
    default_sheet: str = Field(default="Logs")

    # Pause between rows when seeding the Schedule tab
    seed_delay_seconds: float = Field(default=0.2, ge=0)

    # ── Google Gemini ─────────────────────────────────────────────────────
    # How to obtain: https://aistudio.google.com/app/apikey
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "geminiapikey"),
        description="Google Gemini API key for cardio screen extraction",
    )
    gemini_model: str = Field(default="gemini-2.5-flash")

    # ── Uploads ───────────────────────────────────────────────────────────
    # 10 MiB = 10 << 20
    max_image_bytes: int = Field(default=10 * 1024 * 1024, ge=1)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("port")
    @classmethod
    def normalize_port(cls, v: str) -> str:
        """Empty → ":8080"; numeric-only → ":<n>"; anything else is kept."""
        v = v.strip()
        if not v:
            return ":8080"
        if not v.startswith(":") and ":" not in v:
            return f":{v}"
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def listen_address(self) -> Tuple[str, int]:
        """Split `port` into (host, port) for uvicorn."""
        host, _, port = self.port.rpartition(":")
        try:
            number = int(port)
        except ValueError:
            raise ConfigurationError(
                message=f"PORT '{self.port}' is not a valid listen address",
                context={"port": self.port},
            )
        return host.strip("[]") or DEFAULT_BIND_HOST, number

    @property
    def listen_host(self) -> str:
        return self.listen_address[0]

    @property
    def listen_port(self) -> int:
        return self.listen_address[1]

    def missing_required(self) -> List[str]:
        """Names of required settings that are not configured."""
        missing = []
        if not self.spreadsheet_id:
            missing.append("SPREADSHEET_ID")
        if not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")
        return missing

    def validate_required(self) -> None:
        """
        What:  Validates that the spreadsheet id and Gemini key are configured.
        When:  Called by the server entry point and the app lifespan, before
               any connection is accepted.
        Raises: ConfigurationError naming every missing variable.
        """
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                message=(
                    "Configuration validation failed: "
                    + ", ".join(missing)
                    + " missing from environment variables"
                ),
                context={"missing": missing},
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()
