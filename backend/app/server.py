"""
FitLog Backend - Server Entry Point
=====================================

What:  Validates configuration and serves the app with uvicorn.
Who:   `python -m app` or the `fitlog-server` console script.

Exits with status 1, before binding the port, when SPREADSHEET_ID or
GEMINI_API_KEY is missing.
"""

import logging
import sys

import uvicorn

from app.config import Settings, get_settings
from app.exceptions import ConfigurationError
from app.main import create_app, setup_logging

logger = logging.getLogger(__name__)


def load_checked_settings() -> Settings:
    """Settings from the environment; exits the process when incomplete."""
    settings = get_settings()
    setup_logging(settings.log_level)
    try:
        settings.validate_required()
        host, port = settings.listen_address
    except ConfigurationError as e:
        logger.critical("CRITICAL ERROR: %s", e.message)
        sys.exit(1)
    logger.debug("Listening on %s:%d", host, port)
    return settings


def main() -> None:
    settings = load_checked_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
