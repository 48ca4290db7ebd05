from __future__ import annotations

from dataclasses import dataclass

from .errors import CalendarConfigurationError


@dataclass(frozen=True)
class CalendarConfig:
    calendar_id: str
    service_account_file: str
    lookback_days: int = 0
    lookahead_days: int = 7
    page_size: int = 250

    def __post_init__(self) -> None:
        if not self.calendar_id.strip():
            raise CalendarConfigurationError("calendar_id cannot be empty")
        if not self.service_account_file.strip():
            raise CalendarConfigurationError("service_account_file cannot be empty")
        if self.lookback_days < 0:
            raise CalendarConfigurationError(
                f"lookback_days must be >= 0, got: {self.lookback_days}"
            )
        if self.lookahead_days < 1:
            raise CalendarConfigurationError(
                f"lookahead_days must be >= 1, got: {self.lookahead_days}"
            )
        if not 1 <= self.page_size <= 2500:
            raise CalendarConfigurationError(
                f"page_size must be in [1, 2500], got: {self.page_size}"
            )

    @classmethod
    def from_settings(
        cls,
        settings,
        *,
        calendar_id: str,
        service_account_file: str,
    ) -> "CalendarConfig":
        return cls(
            calendar_id=(calendar_id or "").strip(),
            service_account_file=(service_account_file or "").strip(),
            lookback_days=int(settings.lookback_days),
            lookahead_days=int(settings.lookahead_days),
            page_size=int(settings.page_size),
        )
