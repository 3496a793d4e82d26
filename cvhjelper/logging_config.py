"""Logging setup shared by the API and the CLI."""

import logging

from cvhjelper.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once."""
    root_logger = logging.getLogger()
    root_logger.setLevel((level or settings.log_level).upper())

    # Avoid duplicate handlers on reload
    if any(getattr(h, "_cvhjelper", False) for h in root_logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler._cvhjelper = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
