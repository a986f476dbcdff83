"""Scanner configuration loaded from scanner.yaml."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ScannerConfig(BaseModel):
    report_url: str | None = Field(None, description="Collector endpoint; reporting is off when unset")
    auto_report: bool = Field(True, description="Send the box as soon as a scan is stopped")
    log_level: str = Field("INFO", description="Logging level for setup_logging()")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level

    @property
    def reporting_enabled(self) -> bool:
        return self.auto_report and bool(self.report_url)


def load_config(config_path: Path | None) -> ScannerConfig:
    """Load and validate scanner.yaml. ``None`` gives the defaults."""
    if config_path is None:
        return ScannerConfig()
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    try:
        cfg = ScannerConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {config_path}: {e}") from e
    logger.debug(f"Loaded config from {config_path}: {cfg.model_dump()}")
    return cfg
