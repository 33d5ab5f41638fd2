import logging

import pytest
from pydantic import ValidationError

from config.settings import Settings, load_settings, read_env_file, resolve_settings


def test_defaults():
    settings = resolve_settings({}, {})

    assert settings == Settings()
    assert settings.groq_api_key is None
    assert settings.port == 8080
    assert settings.context_file == "context.txt"


def test_environment_wins_over_file():
    settings = resolve_settings(
        {"GROQ_API_KEY": "from-file", "PORT": "9000"},
        {"GROQ_API_KEY": "from-env"},
    )

    assert settings.groq_api_key == "from-env"
    assert settings.port == 9000


def test_empty_environment_value_falls_back_to_file():
    settings = resolve_settings({"GROQ_API_KEY": "from-file"}, {"GROQ_API_KEY": ""})

    assert settings.groq_api_key == "from-file"


def test_invalid_port_is_rejected():
    with pytest.raises(ValidationError):
        resolve_settings({}, {"PORT": "not-a-port"})
    with pytest.raises(ValidationError):
        resolve_settings({}, {"PORT": "70000"})


def test_settings_are_immutable():
    settings = Settings(groq_api_key="k")

    with pytest.raises(ValidationError):
        settings.groq_api_key = "other"


def test_missing_env_file_is_not_fatal(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="satbot"):
        values = read_env_file(tmp_path / "missing.env")

    assert values == {}
    assert "Could not open" in caplog.text


def test_env_file_parsing(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "GROQ_API_KEY=\"quoted-key\"\n"
        "PORT='9090'\n"
        "\n"
        "LOG_LEVEL = debug\n",
        encoding="utf-8",
    )

    values = read_env_file(env_file)

    assert values["GROQ_API_KEY"] == "quoted-key"
    assert values["PORT"] == "9090"
    assert values["LOG_LEVEL"] == "debug"


def test_load_settings_from_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("GROQ_API_KEY=file-key\nPORT=9191\n", encoding="utf-8")
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.setenv("PORT", "8181")

    settings = load_settings(env_file)

    assert settings.groq_api_key == "file-key"
    assert settings.port == 8181


def test_log_level_is_normalised():
    assert resolve_settings({"LOG_LEVEL": "debug"}, {}).log_level == "DEBUG"
    assert resolve_settings({}, {"LOG_LEVEL": "Warning"}).log_level == "WARNING"


def test_unknown_log_level_is_a_settings_error():
    with pytest.raises(ValidationError):
        resolve_settings({}, {"LOG_LEVEL": "verbose"})
