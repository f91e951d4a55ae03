"""Runtime configuration for the expense tracking backend.

Settings are resolved in three layers: built-in defaults, an optional flat
YAML file (``EXPENSE_TRACKER_CONFIG`` or an explicit path) and finally the
process environment, after a local ``.env`` file has been loaded.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Final, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

CONFIG_ENV_FLAG: Final[str] = "EXPENSE_TRACKER_CONFIG"
MIN_SECRET_BYTES: Final[int] = 32

ENV_VARS: Final[Mapping[str, str]] = {
    "database_url": "DATABASE_URL",
    "jwt_secret": "JWT_SECRET",
    "jwt_expiration_hours": "JWT_EXPIRATION_HOURS",
    "pool_size": "DB_POOL_SIZE",
    "max_overflow": "DB_MAX_OVERFLOW",
    "pool_timeout": "DB_POOL_TIMEOUT",
    "cors_origins": "CORS_ORIGINS",
    "server_host": "SERVER_HOST",
    "server_port": "SERVER_PORT",
    "log_level": "EXPENSE_LOG_LEVEL",
    "json_logs": "EXPENSE_JSON_LOGS",
}


class ConfigError(RuntimeError):
    """Raised when the configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    database_url: str = "sqlite:///./expenses.db"
    jwt_expiration_hours: int = 24
    pool_size: int = 5
    max_overflow: int = 0
    pool_timeout: float = 3.0
    cors_origins: Tuple[str, ...] = ("*",)
    server_host: str = "127.0.0.1"
    server_port: int = 3000
    log_level: str = "INFO"
    json_logs: bool = False

    def __post_init__(self) -> None:
        if len(self.jwt_secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigError(f"JWT_SECRET must be at least {MIN_SECRET_BYTES} bytes (256 bits)")
        if self.jwt_expiration_hours <= 0:
            raise ConfigError("JWT_EXPIRATION_HOURS must be positive")
        if self.pool_size < 1:
            raise ConfigError("DB_POOL_SIZE must be at least 1")
        if self.max_overflow < 0:
            raise ConfigError("DB_MAX_OVERFLOW cannot be negative")
        if self.pool_timeout <= 0:
            raise ConfigError("DB_POOL_TIMEOUT must be positive")

    @property
    def server_address(self) -> str:
        return f"{self.server_host}:{self.server_port}"


def _coerce(name: str, raw: Any, target: Any) -> Any:
    if target is bool or target == "bool":
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}
    if target is int or target == "int":
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if target is float or target == "float":
        try:
            return float(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if name == "cors_origins":
        if isinstance(raw, (list, tuple)):
            items = [str(item).strip() for item in raw]
        else:
            items = [item.strip() for item in str(raw).split(",")]
        return tuple(item for item in items if item)
    return str(raw)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file {path}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    unknown = set(payload) - set(ENV_VARS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
    return payload


def load_settings(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build :class:`Settings` from defaults, an optional YAML file and the environment."""

    if environ is None:
        load_dotenv()
        environ = os.environ

    raw: dict[str, Any] = {}
    config_path = path or environ.get(CONFIG_ENV_FLAG)
    if config_path:
        raw.update(_read_yaml(Path(config_path)))
    for name, env_name in ENV_VARS.items():
        value = environ.get(env_name)
        if value is not None and value != "":
            raw[name] = value

    if not raw.get("jwt_secret"):
        raise ConfigError("JWT_SECRET is not configured")

    types = {field.name: field.type for field in fields(Settings)}
    values = {name: _coerce(name, value, types[name]) for name, value in raw.items()}
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""

    return load_settings()
