# src/exec_assistant/calendar/google_calendar.py

"""
Google Calendar CalendarProvider (API v3).

Authenticates with an OAuth2 refresh token (client id + secret + refresh token from
settings); the access token is refreshed by google-auth on first use.
The API client is synchronous, so every request runs in a worker thread.

Created events get email (1 day) + popup (30 min) reminders, and attendees are notified
of inserts, patches and deletes (sendUpdates=all).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, date, datetime, time
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..errors import EventNotFoundError, ProviderError
from .models import CalendarEvent, EventDetails

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

_PATCHABLE = {"summary", "description", "location", "attendees", "start", "end"}

DEFAULT_REMINDERS = {
    "useDefault": False,
    "overrides": [
        {"method": "email", "minutes": 24 * 60},
        {"method": "popup", "minutes": 30},
    ],
}


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _http_status(exc: Exception) -> int | None:
    if not isinstance(exc, HttpError):
        return None
    status = getattr(exc.resp, "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def _when(dt: datetime) -> dict[str, str]:
    return {"dateTime": _aware(dt).isoformat(), "timeZone": "UTC"}


def _parse_when(raw: dict[str, Any] | None) -> datetime:
    """Google start/end object -> aware datetime. All-day events start at 00:00 UTC."""
    raw = raw or {}
    if raw.get("dateTime"):
        return _aware(datetime.fromisoformat(raw["dateTime"]))
    if raw.get("date"):
        return datetime.combine(date.fromisoformat(raw["date"]), time(0), tzinfo=UTC)
    raise ValueError(f"Event time has neither dateTime nor date: {raw!r}")


def event_from_api(item: dict[str, Any]) -> CalendarEvent:
    return CalendarEvent(
        id=str(item["id"]),
        summary=str(item.get("summary") or ""),
        start=_parse_when(item.get("start")),
        end=_parse_when(item.get("end")),
        description=item.get("description"),
        location=item.get("location"),
        attendees=[a["email"] for a in item.get("attendees") or [] if a.get("email")],
        html_link=item.get("htmlLink"),
    )


def _patch_body(patch: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for key, value in patch.items():
        if key in ("start", "end"):
            body[key] = _when(value)
        elif key == "attendees":
            body[key] = [{"email": a} for a in value or []]
        else:
            body[key] = value
    return body


class GoogleCalendarProvider:
    def __init__(
        self,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        calendar_id: str = "primary",
        service: Any = None,
    ) -> None:
        if service is None:
            if not (client_id and client_secret and refresh_token):
                raise ProviderError(
                    "calendar",
                    "Google Calendar credentials are incomplete. Set EXEC_GOOGLE_CLIENT_ID, "
                    "EXEC_GOOGLE_CLIENT_SECRET and EXEC_GOOGLE_REFRESH_TOKEN in your .env.",
                )
            creds = Credentials(
                token=None,
                refresh_token=refresh_token,
                client_id=client_id,
                client_secret=client_secret,
                token_uri=TOKEN_URI,
                scopes=SCOPES,
            )
            service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        self._service = service
        self._calendar_id = calendar_id or "primary"

    async def _call(self, what: str, request: Any, event_id: str | None = None) -> Any:
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            status = _http_status(e)
            if event_id is not None and status in (404, 410):
                raise EventNotFoundError(event_id) from e
            logger.error("Google Calendar %s failed (status=%s): %s", what, status, e)
            raise ProviderError("calendar", f"Failed to {what}") from e
        except Exception as e:
            logger.exception("Google Calendar %s failed", what)
            raise ProviderError("calendar", f"Failed to {what}") from e

    async def list_events(
        self,
        time_min: datetime | None = None,
        time_max: datetime | None = None,
    ) -> list[CalendarEvent]:
        lo = _aware(time_min) if time_min is not None else datetime.now(UTC)
        params: dict[str, Any] = {
            "calendarId": self._calendar_id,
            "timeMin": lo.isoformat(),
            "singleEvents": True,
            "orderBy": "startTime",
            "maxResults": 250,
        }
        if time_max is not None:
            params["timeMax"] = _aware(time_max).isoformat()

        events: list[CalendarEvent] = []
        page_token: str | None = None
        while True:
            if page_token:
                params["pageToken"] = page_token
            response = await self._call("fetch calendar events", self._service.events().list(**params))
            for item in response.get("items") or []:
                if item.get("status") == "cancelled":
                    continue
                events.append(event_from_api(item))
            page_token = response.get("nextPageToken")
            if not page_token:
                break

        events.sort(key=lambda e: (e.start, e.end))
        return events

    async def create_event(self, details: EventDetails) -> CalendarEvent:
        body: dict[str, Any] = {
            "summary": details.summary,
            "start": _when(details.start),
            "end": _when(details.end),
            "reminders": DEFAULT_REMINDERS,
        }
        if details.description:
            body["description"] = details.description
        if details.location:
            body["location"] = details.location
        if details.attendees:
            body["attendees"] = [{"email": a} for a in details.attendees]

        request = self._service.events().insert(calendarId=self._calendar_id, body=body, sendUpdates="all")
        created = await self._call("create calendar event", request)
        event = event_from_api(created)
        logger.info("Event created: %s", event.html_link or event.id)
        return event

    async def update_event(self, event_id: str, patch: dict[str, Any]) -> CalendarEvent:
        unknown = set(patch) - _PATCHABLE
        if unknown:
            raise ValueError(f"Unknown event fields: {', '.join(sorted(unknown))}")
        request = self._service.events().patch(
            calendarId=self._calendar_id, eventId=event_id, body=_patch_body(patch), sendUpdates="all"
        )
        updated = await self._call("update calendar event", request, event_id)
        logger.info("Event updated: %s", event_id)
        return event_from_api(updated)

    async def delete_event(self, event_id: str) -> None:
        request = self._service.events().delete(calendarId=self._calendar_id, eventId=event_id, sendUpdates="all")
        await self._call("delete calendar event", request, event_id)
        logger.info("Event deleted: %s", event_id)
