"""Google Calendar client wrapper used by the scheduling pipeline."""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import (
    CalendarConfigurationError,
    CalendarDependencyError,
    CalendarReadError,
    CalendarWriteError,
)
from .snapshot import ExistingEvent

PROVENANCE_KEY_PREFIX = "planner_"
PROVENANCE_ORIGIN_KEY = PROVENANCE_KEY_PREFIX + "origin"


class GoogleCalendar:
    """Google Calendar wrapper returning normalized :class:`ExistingEvent` values."""

    READ_WRITE_SCOPE = "https://www.googleapis.com/auth/calendar"

    def __init__(
        self,
        calendar_id: str,
        service_account_file: str,
        *,
        page_size: int = 250,
        logger: Optional[logging.Logger] = None,
        api: Any = None,
    ):
        if not calendar_id.strip():
            raise CalendarConfigurationError("calendar_id cannot be empty")
        if page_size < 1:
            raise CalendarConfigurationError(f"page_size must be >= 1, got: {page_size}")

        self._logger = logger or logging.getLogger(__name__)
        self._calendar_id = calendar_id
        self._page_size = page_size
        if api is not None:
            self._api = api
            return

        if not service_account_file.strip():
            raise CalendarConfigurationError("service_account_file cannot be empty")
        account_path = Path(service_account_file)
        if not account_path.exists():
            raise CalendarConfigurationError(
                f"Service account file not found: {account_path}"
            )
        if not account_path.is_file():
            raise CalendarConfigurationError(
                f"Service account path is not a file: {account_path}"
            )
        self._api = self._build_api(str(account_path))

    def _build_api(self, service_account_file: str):
        try:
            from google.oauth2 import service_account
            from googleapiclient.discovery import build
        except ImportError as error:  # pragma: no cover - optional dependency
            raise CalendarDependencyError(
                "Google Calendar dependencies missing. Install google-auth and "
                "google-api-python-client."
            ) from error

        credentials = service_account.Credentials.from_service_account_file(
            service_account_file,
            scopes=[self.READ_WRITE_SCOPE],
        )
        return build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def list_events(
        self,
        *,
        time_min: dt.datetime,
        time_max: dt.datetime,
    ) -> List[ExistingEvent]:
        """Fetch every single-instance event in the window, following pages."""
        if time_min.tzinfo is None or time_max.tzinfo is None:
            raise ValueError("Window bounds must include timezone information.")
        if time_max <= time_min:
            raise ValueError("time_max must be after time_min.")

        items: List[Dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            request: Dict[str, Any] = {
                "calendarId": self._calendar_id,
                "timeMin": _to_rfc3339(time_min),
                "timeMax": _to_rfc3339(time_max),
                "maxResults": self._page_size,
                "singleEvents": True,
                "orderBy": "startTime",
            }
            if page_token:
                request["pageToken"] = page_token
            try:
                result = self._api.events().list(**request).execute()
            except Exception as error:  # pragma: no cover - network/API dependent
                raise CalendarReadError(
                    f"Failed to fetch Google Calendar events: {error}"
                ) from error

            items.extend(result.get("items", []) or [])
            page_token = result.get("nextPageToken")
            if not page_token:
                break

        events: List[ExistingEvent] = []
        for item in items:
            event = self._normalize_event(item, reference=time_min)
            if event is None:
                self._logger.debug("Skipping event without usable times: %s", item.get("id"))
                continue
            events.append(event)
        return events

    def create_event(
        self,
        *,
        title: str,
        start: dt.datetime,
        end: dt.datetime,
        description: Optional[str] = None,
        provenance: Optional[Mapping[str, str]] = None,
    ) -> str:
        if start.tzinfo is None or end.tzinfo is None:
            raise ValueError("Event start and end must include timezone information.")
        if end <= start:
            raise ValueError("Event end must be after start.")

        body: Dict[str, Any] = {
            "summary": title,
            "start": {"dateTime": start.isoformat()},
            "end": {"dateTime": end.isoformat()},
        }
        timezone_name = self._timezone_name(start)
        if timezone_name:
            body["start"]["timeZone"] = timezone_name
            body["end"]["timeZone"] = timezone_name
        if description:
            body["description"] = description
        if provenance:
            body["extendedProperties"] = {
                "private": {
                    PROVENANCE_KEY_PREFIX + key: str(value)
                    for key, value in provenance.items()
                }
            }

        try:
            created = (
                self._api.events()
                .insert(calendarId=self._calendar_id, body=body)
                .execute()
            )
        except Exception as error:  # pragma: no cover - network/API dependent
            raise CalendarWriteError(
                f"Failed to create Google Calendar event: {error}"
            ) from error

        event_id = created.get("id")
        if not event_id:
            raise CalendarWriteError("Google Calendar insert returned no event id.")
        self._logger.debug("Created event %s (%s)", event_id, title)
        return event_id

    @staticmethod
    def _normalize_event(
        event: Dict[str, Any],
        *,
        reference: dt.datetime,
    ) -> Optional[ExistingEvent]:
        start = _parse_event_time(event.get("start") or {}, reference=reference)
        end = _parse_event_time(event.get("end") or {}, reference=reference)
        if start is None or end is None:
            return None

        private = (event.get("extendedProperties") or {}).get("private") or {}
        return ExistingEvent(
            title=event.get("summary", "No Title"),
            start=start,
            end=end,
            event_id=event.get("id"),
            automated=PROVENANCE_ORIGIN_KEY in private,
        )

    @staticmethod
    def _timezone_name(value: dt.datetime) -> Optional[str]:
        tzinfo = value.tzinfo
        if tzinfo is None:
            return None

        zone_key = getattr(tzinfo, "key", None)
        if isinstance(zone_key, str) and zone_key:
            return zone_key

        zone_name = value.tzname()
        if isinstance(zone_name, str) and "/" in zone_name:
            return zone_name

        return None


def _to_rfc3339(value: dt.datetime) -> str:
    return value.astimezone(dt.timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_event_time(
    payload: Dict[str, Any],
    *,
    reference: dt.datetime,
) -> Optional[dt.datetime]:
    raw = payload.get("dateTime")
    if isinstance(raw, str) and raw.strip():
        text = raw.strip()
        normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
        try:
            parsed = dt.datetime.fromisoformat(normalized)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=reference.tzinfo)
        return parsed

    # All-day events carry a bare date; anchor them at local midnight.
    raw_date = payload.get("date")
    if isinstance(raw_date, str) and raw_date.strip():
        try:
            day = dt.date.fromisoformat(raw_date.strip())
        except ValueError:
            return None
        return dt.datetime(day.year, day.month, day.day, tzinfo=reference.tzinfo)
    return None
