from pathlib import Path

import pytest

import recordkit.logging_utils as logging_utils
from recordkit.config import Settings, get_settings


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RECORDKIT_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("RECORDKIT_LOG_PROFILE", "console")

    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.log_profile == "console"


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RECORDKIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("RECORDKIT_LOG_PROFILE", raising=False)

    settings = Settings()

    assert settings.log_level == "WARNING"
    assert settings.log_profile == "default"


def test_get_settings_reads_env_file_and_configures_logging(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[tuple[str, str]] = []

    def _capture(*, profile: str, level: str) -> None:
        calls.append((profile, level))

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RECORDKIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("RECORDKIT_LOG_PROFILE", raising=False)
    monkeypatch.setattr("recordkit.config.configure_logging", _capture)
    env_file = tmp_path / "custom.env"
    env_file.write_text("RECORDKIT_LOG_LEVEL=INFO\n", encoding="utf-8")

    settings = get_settings(env_file)

    assert settings.log_level == "INFO"
    assert calls == [("default", "INFO")]


def test_configure_logging_installs_one_handler_per_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    added: list[dict[str, object]] = []

    monkeypatch.setattr(logging_utils, "_CONFIGURED", None)
    monkeypatch.setattr(logging_utils.logger, "remove", lambda *args: None)
    monkeypatch.setattr(logging_utils.logger, "add", lambda sink, **kwargs: added.append(kwargs))

    logging_utils.configure_logging(profile="default", level="debug")
    logging_utils.configure_logging(profile="default", level="debug")
    logging_utils.configure_logging(profile="console", level="info")

    assert [entry["level"] for entry in added] == ["DEBUG", "INFO"]
    assert added[1]["format"] == "{message}"


def test_configure_logging_falls_back_to_environment_level(monkeypatch: pytest.MonkeyPatch) -> None:
    added: list[dict[str, object]] = []

    monkeypatch.setattr(logging_utils, "_CONFIGURED", None)
    monkeypatch.setattr(logging_utils.logger, "remove", lambda *args: None)
    monkeypatch.setattr(logging_utils.logger, "add", lambda sink, **kwargs: added.append({"sink": sink, **kwargs}))
    monkeypatch.setenv("RECORDKIT_LOG_LEVEL", "error")

    logging_utils.configure_logging()

    assert added[0]["level"] == "ERROR"
    assert added[0]["sink"] is logging_utils.sys.stderr
