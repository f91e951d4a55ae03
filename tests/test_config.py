from __future__ import annotations

from pathlib import Path

import pytest

from expense_tracker.config import ConfigError, Settings, load_settings

SECRET = "s" * 32


def test_defaults_apply_when_only_secret_is_set():
    settings = load_settings(environ={"JWT_SECRET": SECRET})
    assert settings.jwt_expiration_hours == 24
    assert settings.pool_size == 5
    assert settings.server_port == 3000
    assert settings.cors_origins == ("*",)
    assert settings.server_address == "127.0.0.1:3000"


def test_missing_secret_is_an_error():
    with pytest.raises(ConfigError):
        load_settings(environ={})


def test_short_secret_is_an_error():
    with pytest.raises(ConfigError):
        load_settings(environ={"JWT_SECRET": "too-short"})


def test_environment_values_are_coerced():
    settings = load_settings(
        environ={
            "JWT_SECRET": SECRET,
            "JWT_EXPIRATION_HOURS": "2",
            "DB_POOL_SIZE": "10",
            "DB_POOL_TIMEOUT": "0.5",
            "CORS_ORIGINS": "http://a.test, http://b.test",
            "EXPENSE_JSON_LOGS": "yes",
        }
    )
    assert settings.jwt_expiration_hours == 2
    assert settings.pool_size == 10
    assert settings.pool_timeout == 0.5
    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.json_logs is True


def test_invalid_integer_is_reported():
    with pytest.raises(ConfigError, match="pool_size"):
        load_settings(environ={"JWT_SECRET": SECRET, "DB_POOL_SIZE": "many"})


def test_yaml_file_is_overridden_by_environment(tmp_path: Path):
    config = tmp_path / "settings.yaml"
    config.write_text(
        f"jwt_secret: {SECRET}\nserver_port: 8080\ncors_origins:\n  - http://app.test\n",
        encoding="utf-8",
    )
    settings = load_settings(environ={"EXPENSE_TRACKER_CONFIG": str(config), "SERVER_PORT": "9000"})
    assert settings.server_port == 9000
    assert settings.cors_origins == ("http://app.test",)
    assert settings.jwt_secret == SECRET


def test_yaml_rejects_unknown_keys(tmp_path: Path):
    config = tmp_path / "settings.yaml"
    config.write_text(f"jwt_secret: {SECRET}\ncolour: blue\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="colour"):
        load_settings(path=config, environ={})


def test_yaml_must_be_a_mapping(tmp_path: Path):
    config = tmp_path / "settings.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(path=config, environ={})


def test_settings_validate_pool_bounds():
    with pytest.raises(ConfigError):
        Settings(jwt_secret=SECRET, pool_size=0)
    with pytest.raises(ConfigError):
        Settings(jwt_secret=SECRET, max_overflow=-1)
