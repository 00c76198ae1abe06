from pathlib import Path

from perfmet.config import load_settings


def test_defaults_are_relative_to_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.logs_dir == tmp_path / "logs"
    assert settings.baselines_dir == tmp_path / "data" / "baselines"
    assert settings.database_url is None
    assert settings.log_level == "INFO"


def test_environment_variables(tmp_path, monkeypatch):
    monkeypatch.setenv("PERFMET_LOGS_DIR", str(tmp_path / "run-logs"))
    monkeypatch.setenv("PERFMET_BASELINES_DIR", str(tmp_path / "kept"))
    monkeypatch.setenv("PERFMET_DATABASE_URL", "sqlite:///baselines.db")
    monkeypatch.setenv("PERFMET_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.logs_dir == tmp_path / "run-logs"
    assert settings.baselines_dir == tmp_path / "kept"
    assert settings.database_url == "sqlite:///baselines.db"
    assert settings.log_level == "DEBUG"


def test_env_file_does_not_override_process_environment(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "PERFMET_LOGS_DIR=/from/env-file\nPERFMET_BASELINES_DIR=/from/env-file/baselines\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PERFMET_LOGS_DIR", "/from/process")

    settings = load_settings(env_file)

    assert settings.logs_dir == Path("/from/process")
    assert settings.baselines_dir == Path("/from/env-file/baselines")
