"""Application configuration via environment variables."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic_settings import BaseSettings

log = logging.getLogger("phonesim.config")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Simulator
    default_phone_count: int = 5
    export_dir: str = "."
    number_pattern: str = r"[5-8]\d{8}"
    max_conversation_seconds: int = 3600

    # HTTP shell
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {
        "env_prefix": "PHONESIM_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"PHONESIM_LOG_LEVEL={self.log_level!r} is not a logging level. "
                f"Use one of {', '.join(sorted(_LOG_LEVELS))}."
            )

        if self.max_conversation_seconds <= 0:
            raise ValueError("PHONESIM_MAX_CONVERSATION_SECONDS must be positive.")

        try:
            re.compile(self.number_pattern)
        except re.error as e:
            raise ValueError(f"PHONESIM_NUMBER_PATTERN is not a valid regex: {e}") from e

        if self.default_phone_count < 0:
            warnings.append("PHONESIM_DEFAULT_PHONE_COUNT is negative; no phones will be generated.")

        if not Path(self.export_dir).is_dir():
            warnings.append(
                f"PHONESIM_EXPORT_DIR {self.export_dir!r} does not exist; "
                "it will be created on first export."
            )

        return warnings


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the CLI and HTTP shells."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
    )


settings = Settings()
