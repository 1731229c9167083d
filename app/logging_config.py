"""Logging setup and helpers."""
import logging
from typing import Any

from app.config import Settings

SENSITIVE_FIELDS = {"password", "token", "secret", "jwt", "authorization"}


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings (console plus optional file)."""
    handlers = [logging.StreamHandler()]  # Console output
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))  # File output

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Set specific log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def mask_sensitive_data(value: Any) -> Any:
    """Return a copy of `value` with sensitive keys redacted at any depth."""
    if isinstance(value, dict):
        return {
            key: "[REDACTED]"
            if isinstance(key, str) and key.lower() in SENSITIVE_FIELDS
            else mask_sensitive_data(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [mask_sensitive_data(item) for item in value]
    return value
