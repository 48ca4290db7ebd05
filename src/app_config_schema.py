"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class PolicySettings:
    """Location of the scheduling policy document from `[policy]`."""
    file: str = "strategy.yaml"


@dataclass(frozen=True)
class CalendarSettings:
    """Calendar snapshot window and paging from `[calendar]`."""
    lookback_days: int = 0
    lookahead_days: int = 7
    page_size: int = 250


@dataclass(frozen=True)
class LLMSettings:
    """Suggestion oracle backend and sampling settings from `[llm]`."""
    backend: str = "anthropic"
    model: str = "claude-3-5-sonnet-latest"
    max_tokens: int = 4096
    temperature: float = 0.2
    timeout_seconds: float = 120.0
    model_path: str = ""
    n_threads: int = 4
    n_ctx: int = 8192
    n_batch: int = 256
    top_p: float = 0.9
    repeat_penalty: float = 1.1
    verbose: bool = False


@dataclass(frozen=True)
class RunSettings:
    """Reconciliation behavior from `[run]`."""
    dry_run: bool = False
    origin: str = "calendar-planner"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    policy: PolicySettings
    calendar: CalendarSettings
    llm: LLMSettings
    run: RunSettings
    source_file: str


@dataclass(frozen=True)
class SecretConfig:
    """Environment-provided secrets kept out of `config.toml`."""
    anthropic_api_key: Optional[str]
    google_calendar_id: str
    google_service_account_file: str
