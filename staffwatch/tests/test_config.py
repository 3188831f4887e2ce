from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from staffwatch.config import DEFAULT_WINDOW_MONTHS, load_env, runtime_config

ENV_VARS = ("STAFFWATCH_ARTIFACT_DIR", "STAFFWATCH_WINDOW_MONTHS", "STAFFWATCH_TIMEZONE", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch also undoes values load_dotenv writes.
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestRuntimeConfig:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        cfg = runtime_config()
        assert cfg.artifact_root == (tmp_path / "artifacts").resolve()
        assert cfg.window_months == DEFAULT_WINDOW_MONTHS
        assert cfg.timezone is None
        assert cfg.log_level == "INFO"

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STAFFWATCH_ARTIFACT_DIR", str(tmp_path / "store"))
        monkeypatch.setenv("STAFFWATCH_WINDOW_MONTHS", "6")
        monkeypatch.setenv("STAFFWATCH_TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        cfg = runtime_config()
        assert cfg.artifact_root == (tmp_path / "store").resolve()
        assert cfg.window_months == 6
        assert cfg.timezone == ZoneInfo("Europe/Berlin")
        assert cfg.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["three", "-1"])
    def test_bad_window_months(self, monkeypatch, raw):
        monkeypatch.setenv("STAFFWATCH_WINDOW_MONTHS", raw)
        with pytest.raises(ValueError, match="STAFFWATCH_WINDOW_MONTHS"):
            runtime_config()


class TestLoadEnv:
    def test_reads_dotenv_file(self, tmp_path: Path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("STAFFWATCH_WINDOW_MONTHS=2\n", encoding="utf-8")
        load_env(env_file)
        assert runtime_config().window_months == 2

    def test_existing_environment_wins(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("STAFFWATCH_WINDOW_MONTHS", "4")
        env_file = tmp_path / "custom.env"
        env_file.write_text("STAFFWATCH_WINDOW_MONTHS=2\n", encoding="utf-8")
        load_env(env_file)
        assert runtime_config().window_months == 4
