"""Projection of Google API responses into flat, stable records.

Every function here is pure: it takes the decoded JSON of a Gmail, Calendar
or Tasks response and returns a dict with a fixed key set. Fields missing
upstream are left out of the record rather than set to None.
"""

import base64
import binascii
from typing import Any

# Headers fetched for message listings and threads
SUMMARY_HEADERS = ["From", "To", "Subject", "Date"]

_BODY_MIME_TYPES = ("text/plain", "text/html")


def _compact(record: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in record.items() if value is not None}


def header_value(headers: list[dict[str, Any]] | None, name: str) -> str | None:
    """Return the first header value whose name matches exactly.

    Args:
        headers: Gmail payload header list of {"name", "value"} dicts.
        name: Header name, matched case-sensitively.

    Returns:
        The header value, or None when no header has that name.
    """
    for header in headers or []:
        if header.get("name") == name:
            return header.get("value")
    return None


def decode_base64url(data: str) -> str:
    """Decode Gmail's base64url body data to text, tolerating missing padding."""
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return ""
    return raw.decode("utf-8", errors="replace")


def extract_body(payload: dict[str, Any] | None, deep: bool = False) -> str:
    """Extract the message body from a Gmail payload.

    A top-level body wins. Otherwise the first part whose type is text/plain
    or text/html is used. Only first-level parts are inspected unless deep is
    set, in which case nested multipart/* parts are searched depth-first.

    Args:
        payload: Gmail message payload.
        deep: Descend into nested multipart parts.

    Returns:
        Decoded body text, or "" when nothing qualifies.
    """
    if not payload:
        return ""

    data = (payload.get("body") or {}).get("data")
    if data:
        return decode_base64url(data)

    for part in payload.get("parts") or []:
        mime_type = part.get("mimeType", "")
        if mime_type in _BODY_MIME_TYPES:
            part_data = (part.get("body") or {}).get("data")
            if part_data:
                return decode_base64url(part_data)
        elif deep and mime_type.startswith("multipart/"):
            nested = extract_body(part, deep=True)
            if nested:
                return nested

    return ""


# =============================================================================
# Gmail
# =============================================================================


def message_summary(ref: dict[str, Any], detail: dict[str, Any]) -> dict[str, Any]:
    """Listing record from a messages.list entry and its metadata fetch."""
    headers = (detail.get("payload") or {}).get("headers")
    return _compact(
        {
            "id": ref.get("id"),
            "threadId": ref.get("threadId"),
            "snippet": detail.get("snippet"),
            "from": header_value(headers, "From"),
            "to": header_value(headers, "To"),
            "subject": header_value(headers, "Subject"),
            "date": header_value(headers, "Date"),
            "labelIds": detail.get("labelIds"),
        }
    )


def message_detail(message: dict[str, Any], deep: bool = False) -> dict[str, Any]:
    """Full message record including the decoded body."""
    payload = message.get("payload") or {}
    headers = payload.get("headers")
    return _compact(
        {
            "id": message.get("id"),
            "threadId": message.get("threadId"),
            "from": header_value(headers, "From"),
            "to": header_value(headers, "To"),
            "subject": header_value(headers, "Subject"),
            "date": header_value(headers, "Date"),
            "body": extract_body(payload, deep=deep),
            "labelIds": message.get("labelIds"),
        }
    )


def thread(response: dict[str, Any]) -> dict[str, Any]:
    """Thread record with one header summary per message, in thread order."""
    messages = []
    for message in response.get("messages") or []:
        headers = (message.get("payload") or {}).get("headers")
        messages.append(
            _compact(
                {
                    "id": message.get("id"),
                    "snippet": message.get("snippet"),
                    "from": header_value(headers, "From"),
                    "to": header_value(headers, "To"),
                    "subject": header_value(headers, "Subject"),
                    "date": header_value(headers, "Date"),
                }
            )
        )
    return _compact({"id": response.get("id"), "messages": messages})


def sent_message(response: dict[str, Any]) -> dict[str, Any]:
    """Confirmation record for a sent message."""
    return _compact({"id": response.get("id"), "threadId": response.get("threadId")})


def label(item: dict[str, Any]) -> dict[str, Any]:
    return _compact({"id": item.get("id"), "name": item.get("name"), "type": item.get("type")})


def draft_summary(draft: dict[str, Any]) -> dict[str, Any]:
    """Listing record for a draft fetched in metadata format."""
    message = draft.get("message") or {}
    headers = (message.get("payload") or {}).get("headers")
    return _compact(
        {
            "id": draft.get("id"),
            "messageId": message.get("id"),
            "threadId": message.get("threadId"),
            "snippet": message.get("snippet"),
            "to": header_value(headers, "To"),
            "subject": header_value(headers, "Subject"),
            "date": header_value(headers, "Date"),
        }
    )


def draft_detail(draft: dict[str, Any], deep: bool = False) -> dict[str, Any]:
    """Full draft record including the decoded body."""
    message = draft.get("message") or {}
    payload = message.get("payload") or {}
    headers = payload.get("headers")
    return _compact(
        {
            "id": draft.get("id"),
            "messageId": message.get("id"),
            "threadId": message.get("threadId"),
            "from": header_value(headers, "From"),
            "to": header_value(headers, "To"),
            "subject": header_value(headers, "Subject"),
            "date": header_value(headers, "Date"),
            "body": extract_body(payload, deep=deep),
            "labelIds": message.get("labelIds"),
        }
    )


def draft_ref(draft: dict[str, Any]) -> dict[str, Any]:
    """Confirmation record for a created or updated draft."""
    message = draft.get("message") or {}
    return _compact(
        {
            "id": draft.get("id"),
            "messageId": message.get("id"),
            "threadId": message.get("threadId"),
        }
    )


# =============================================================================
# Calendar
# =============================================================================


def calendar(item: dict[str, Any]) -> dict[str, Any]:
    return _compact(
        {
            "id": item.get("id"),
            "summary": item.get("summary"),
            "description": item.get("description"),
            "timeZone": item.get("timeZone"),
            "accessRole": item.get("accessRole"),
            "primary": item.get("primary"),
        }
    )


def attendee(item: dict[str, Any]) -> dict[str, Any]:
    return _compact(
        {
            "email": item.get("email"),
            "displayName": item.get("displayName"),
            "responseStatus": item.get("responseStatus"),
            "optional": item.get("optional"),
            "organizer": item.get("organizer"),
        }
    )


def _event_time(value: dict[str, Any] | None) -> str | None:
    # All-day events carry "date" instead of "dateTime"
    if not value:
        return None
    return value.get("dateTime") or value.get("date")


def event(item: dict[str, Any]) -> dict[str, Any]:
    """Event record with start/end flattened to their RFC 3339 or date string."""
    organizer = item.get("organizer") or {}
    attendees = item.get("attendees")
    return _compact(
        {
            "id": item.get("id"),
            "summary": item.get("summary"),
            "description": item.get("description"),
            "location": item.get("location"),
            "status": item.get("status"),
            "start": _event_time(item.get("start")),
            "end": _event_time(item.get("end")),
            "htmlLink": item.get("htmlLink"),
            "hangoutLink": item.get("hangoutLink"),
            "organizer": organizer.get("email"),
            "recurringEventId": item.get("recurringEventId"),
            "attendees": [attendee(a) for a in attendees] if attendees is not None else None,
        }
    )


# =============================================================================
# Tasks
# =============================================================================


def tasklist(item: dict[str, Any]) -> dict[str, Any]:
    return _compact(
        {"id": item.get("id"), "title": item.get("title"), "updated": item.get("updated")}
    )


def task(item: dict[str, Any]) -> dict[str, Any]:
    return _compact(
        {
            "id": item.get("id"),
            "title": item.get("title"),
            "notes": item.get("notes"),
            "status": item.get("status"),
            "due": item.get("due"),
            "completed": item.get("completed"),
            "parent": item.get("parent"),
            "position": item.get("position"),
            "updated": item.get("updated"),
        }
    )
