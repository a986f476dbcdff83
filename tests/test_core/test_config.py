"""Tests for scanner config loading."""

from pathlib import Path

import pytest
import yaml

from boxscan.core.config import ScannerConfig, load_config
from boxscan.core.errors import ConfigurationError

CONFIGS = Path(__file__).resolve().parents[2] / "configs"


class TestConfig:
    def test_defaults(self):
        cfg = load_config(None)
        assert cfg.report_url is None
        assert cfg.auto_report is True
        assert not cfg.reporting_enabled

    def test_load_yaml(self, tmp_path: Path):
        path = tmp_path / "scanner.yaml"
        with open(path, "w") as f:
            yaml.dump({"report_url": "http://c.test/boxes", "log_level": "debug"}, f)
        cfg = load_config(path)
        assert cfg.report_url == "http://c.test/boxes"
        assert cfg.log_level == "DEBUG"
        assert cfg.reporting_enabled

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "scanner.yaml"
        path.write_text("")
        assert load_config(path) == ScannerConfig()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_level(self, tmp_path: Path):
        path = tmp_path / "scanner.yaml"
        path.write_text("log_level: LOUD\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_shipped_config(self):
        cfg = load_config(CONFIGS / "scanner.yaml")
        assert cfg.report_url is None

