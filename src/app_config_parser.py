"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    CalendarSettings,
    LLMSettings,
    PolicySettings,
    RunSettings,
)

_ALLOWED_LLM_BACKENDS = {"anthropic", "llama"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    policy = _parse_policy_settings(_section(raw, "policy"), base_dir=base_dir)
    calendar = _parse_calendar_settings(_section(raw, "calendar"))
    llm = _parse_llm_settings(_section(raw, "llm"), base_dir=base_dir)
    run = _parse_run_settings(_section(raw, "run"))

    return AppConfig(
        policy=policy,
        calendar=calendar,
        llm=llm,
        run=run,
        source_file=source_file,
    )


def _parse_policy_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> PolicySettings:
    policy_file = _as_str(section.get("file", "strategy.yaml"), "policy.file")
    if not policy_file:
        raise AppConfigurationError("policy.file is required.")
    return PolicySettings(file=_resolve_path(base_dir, policy_file))


def _parse_calendar_settings(section: Mapping[str, Any]) -> CalendarSettings:
    _forbid_secret_fields(
        section,
        "calendar",
        ("calendar_id", "service_account_file"),
    )
    lookback_days = _as_int(section.get("lookback_days", 0), "calendar.lookback_days")
    lookahead_days = _as_int(
        section.get("lookahead_days", 7),
        "calendar.lookahead_days",
    )
    page_size = _as_int(section.get("page_size", 250), "calendar.page_size")
    if lookback_days < 0:
        raise AppConfigurationError("calendar.lookback_days must be >= 0.")
    if lookahead_days < 1:
        raise AppConfigurationError("calendar.lookahead_days must be >= 1.")
    if not 1 <= page_size <= 2500:
        raise AppConfigurationError("calendar.page_size must be in [1, 2500].")
    return CalendarSettings(
        lookback_days=lookback_days,
        lookahead_days=lookahead_days,
        page_size=page_size,
    )


def _parse_llm_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> LLMSettings:
    _forbid_secret_fields(section, "llm", ("api_key", "anthropic_api_key"))
    backend = _as_str(section.get("backend", "anthropic"), "llm.backend").lower()
    if backend not in _ALLOWED_LLM_BACKENDS:
        allowed = ", ".join(sorted(_ALLOWED_LLM_BACKENDS))
        raise AppConfigurationError(
            f"llm.backend must be one of: {allowed}. Got: {backend!r}"
        )
    model_path = _as_str(section.get("model_path", ""), "llm.model_path")
    return LLMSettings(
        backend=backend,
        model=_as_str(
            section.get("model", "claude-3-5-sonnet-latest"),
            "llm.model",
        ),
        max_tokens=_as_int(section.get("max_tokens", 4096), "llm.max_tokens"),
        temperature=_as_float(section.get("temperature", 0.2), "llm.temperature"),
        timeout_seconds=_as_float(
            section.get("timeout_seconds", 120.0),
            "llm.timeout_seconds",
        ),
        model_path=_resolve_path(base_dir, model_path) if model_path else "",
        n_threads=_as_int(section.get("n_threads", 4), "llm.n_threads"),
        n_ctx=_as_int(section.get("n_ctx", 8192), "llm.n_ctx"),
        n_batch=_as_int(section.get("n_batch", 256), "llm.n_batch"),
        top_p=_as_float(section.get("top_p", 0.9), "llm.top_p"),
        repeat_penalty=_as_float(
            section.get("repeat_penalty", 1.1),
            "llm.repeat_penalty",
        ),
        verbose=_as_bool(section.get("verbose", False), "llm.verbose"),
    )


def _parse_run_settings(section: Mapping[str, Any]) -> RunSettings:
    origin = _as_str(section.get("origin", "calendar-planner"), "run.origin")
    if not origin:
        raise AppConfigurationError("run.origin cannot be empty.")
    return RunSettings(
        dry_run=_as_bool(section.get("dry_run", False), "run.dry_run"),
        origin=origin,
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _forbid_secret_fields(
    section: Mapping[str, Any],
    section_name: str,
    fields: tuple[str, ...],
) -> None:
    present = [field for field in fields if field in section]
    if present:
        joined = ", ".join(f"{section_name}.{field}" for field in present)
        raise AppConfigurationError(
            f"Secret values must not be stored in config.toml: {joined}. "
            "Move them to environment variables."
        )
