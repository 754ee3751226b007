"""Google Calendar operations (read-only)."""

from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote

from mcp_gmail import normalize
from mcp_gmail.client import ApiClient, ClientProvider, ServiceKind

DEFAULT_WINDOW = timedelta(days=7)


def _rfc3339(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, including the "Z" suffix."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00").replace("z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def default_window(
    time_min: str | None, time_max: str | None, now: datetime | None = None
) -> tuple[str, str]:
    """Fill in missing bounds of an event query window.

    The lower bound defaults to now and the upper bound to seven days after
    the lower bound.

    Raises:
        ValueError: If time_min is given but is not an RFC 3339 timestamp
            and time_max needs to be derived from it.
    """
    if time_min is None:
        start = now or datetime.now(timezone.utc)
        time_min = _rfc3339(start)
    else:
        start = None

    if time_max is None:
        if start is None:
            start = _parse_rfc3339(time_min)
        time_max = _rfc3339(start + DEFAULT_WINDOW)

    return time_min, time_max


class CalendarOperations:
    """Calendar tool implementations."""

    def __init__(self, clients: ClientProvider) -> None:
        self.clients = clients

    async def _calendar(self) -> ApiClient:
        return await self.clients.get_client(ServiceKind.CALENDAR)

    async def list_calendars(self) -> list[dict[str, Any]]:
        api = await self._calendar()
        response = await api.get("/users/me/calendarList")
        return [normalize.calendar(item) for item in response.get("items", [])]

    async def list_events(
        self,
        calendar_id: str = "primary",
        time_min: str | None = None,
        time_max: str | None = None,
        max_results: int = 50,
    ) -> list[dict[str, Any]]:
        """List events in a window, recurring events expanded, ordered by start time."""
        time_min, time_max = default_window(time_min, time_max)

        api = await self._calendar()
        response = await api.get(
            f"/calendars/{quote(calendar_id, safe='')}/events",
            params={
                "timeMin": time_min,
                "timeMax": time_max,
                "maxResults": max_results,
                "singleEvents": "true",
                "orderBy": "startTime",
            },
        )
        return [normalize.event(item) for item in response.get("items", [])]

    async def get_event(self, event_id: str, calendar_id: str = "primary") -> dict[str, Any]:
        api = await self._calendar()
        response = await api.get(
            f"/calendars/{quote(calendar_id, safe='')}/events/{quote(event_id, safe='')}"
        )
        return normalize.event(response)
