from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Mapping

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    SecretConfig,
)

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "SecretConfig",
    "load_app_config",
    "load_secret_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    raw = config_path or os.getenv("APP_CONFIG_FILE") or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.exists():
        raise AppConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


def load_secret_config(
    *,
    backend: str = "anthropic",
    environ: Mapping[str, str] | None = None,
) -> SecretConfig:
    env = environ if environ is not None else os.environ

    api_key = env.get("ANTHROPIC_API_KEY", "").strip() or None
    if backend == "anthropic" and not api_key:
        raise AppConfigurationError(
            "ANTHROPIC_API_KEY must be set as an environment secret."
        )

    calendar_id = env.get("GOOGLE_CALENDAR_ID", "").strip()
    if not calendar_id:
        raise AppConfigurationError(
            "GOOGLE_CALENDAR_ID must be set as an environment secret."
        )

    service_account = env.get("GOOGLE_SERVICE_ACCOUNT_FILE", "").strip()
    if not service_account:
        raise AppConfigurationError(
            "GOOGLE_SERVICE_ACCOUNT_FILE must be set as an environment secret."
        )

    return SecretConfig(
        anthropic_api_key=api_key,
        google_calendar_id=calendar_id,
        google_service_account_file=service_account,
    )
