"""Gmail operations: listing, reading, sending, labels and drafts."""

import logging
from typing import Any
from urllib.parse import quote

from mcp_gmail import normalize
from mcp_gmail.client import ApiClient, ClientProvider, ServiceKind
from mcp_gmail.compose import ThreadingHeaders, build_message, encode_message
from mcp_gmail.identity import SenderIdentityCache

logger = logging.getLogger(__name__)

# Folder name -> Gmail search filter
FOLDER_QUERIES: dict[str, str] = {
    "inbox": "in:inbox",
    "sent": "in:sent",
    "unread": "in:inbox is:unread",
    "starred": "is:starred",
    "important": "is:important",
    "trash": "in:trash",
    "spam": "in:spam",
    "all": "",
}


def folder_query(folder: str, query: str | None = None) -> str:
    """Resolve a folder name plus optional extra query to a Gmail search string.

    Unknown folders fall back to the inbox filter.
    """
    base = FOLDER_QUERIES.get(folder, FOLDER_QUERIES["inbox"])
    if query:
        return f"{base} {query}".strip()
    return base


class MailOperations:
    """Gmail tool implementations.

    Args:
        clients: Provider of authenticated API clients.
        identity: Sender identity cache; one is created if not supplied.
        deep_body_search: Search nested multipart parts for message bodies.
    """

    def __init__(
        self,
        clients: ClientProvider,
        identity: SenderIdentityCache | None = None,
        deep_body_search: bool = False,
    ) -> None:
        self.clients = clients
        self.identity = identity or SenderIdentityCache(self.list_send_as)
        self.deep_body_search = deep_body_search

    async def _gmail(self) -> ApiClient:
        return await self.clients.get_client(ServiceKind.MAIL)

    async def list_send_as(self) -> list[dict[str, Any]]:
        """Raw send-as entries from Gmail settings."""
        gmail = await self._gmail()
        response = await gmail.get("/users/me/settings/sendAs")
        send_as: list[dict[str, Any]] = response.get("sendAs", [])
        return send_as

    # =========================================================================
    # Reading
    # =========================================================================

    async def list_emails(
        self, max_results: int = 10, folder: str = "inbox", query: str | None = None
    ) -> list[dict[str, Any]]:
        """List messages in a folder, newest first, with header summaries.

        Each listed message costs one extra metadata request, issued in order.
        """
        gmail = await self._gmail()

        params: dict[str, Any] = {"maxResults": max_results}
        q = folder_query(folder, query)
        if q:
            params["q"] = q

        response = await gmail.get("/users/me/messages", params=params)

        emails = []
        for ref in response.get("messages", []):
            detail = await gmail.get(
                f"/users/me/messages/{quote(ref['id'], safe='')}",
                params={"format": "metadata", "metadataHeaders": normalize.SUMMARY_HEADERS},
            )
            emails.append(normalize.message_summary(ref, detail))

        return emails

    async def search_emails(self, query: str, max_results: int = 20) -> list[dict[str, Any]]:
        """Search all mail with Gmail query syntax."""
        return await self.list_emails(max_results=max_results, folder="all", query=query)

    async def get_email(self, message_id: str) -> dict[str, Any]:
        gmail = await self._gmail()
        response = await gmail.get(
            f"/users/me/messages/{quote(message_id, safe='')}", params={"format": "full"}
        )
        return normalize.message_detail(response, deep=self.deep_body_search)

    async def get_thread(self, thread_id: str) -> dict[str, Any]:
        gmail = await self._gmail()
        response = await gmail.get(
            f"/users/me/threads/{quote(thread_id, safe='')}",
            params={"format": "metadata", "metadataHeaders": normalize.SUMMARY_HEADERS},
        )
        return normalize.thread(response)

    # =========================================================================
    # Labels
    # =========================================================================

    async def modify_labels(
        self,
        message_id: str,
        add_labels: list[str] | None = None,
        remove_labels: list[str] | None = None,
    ) -> dict[str, Any]:
        """Add and remove labels in one call; conflicts are left to Gmail."""
        gmail = await self._gmail()
        response = await gmail.post(
            f"/users/me/messages/{quote(message_id, safe='')}/modify",
            json_data={
                "addLabelIds": add_labels or [],
                "removeLabelIds": remove_labels or [],
            },
        )
        return {"id": response.get("id"), "labelIds": response.get("labelIds", [])}

    async def list_labels(self) -> list[dict[str, Any]]:
        gmail = await self._gmail()
        response = await gmail.get("/users/me/labels")
        return [normalize.label(item) for item in response.get("labels", [])]

    # =========================================================================
    # Sending
    # =========================================================================

    async def _threading_headers(
        self, thread_id: str | None, original_message_id: str | None
    ) -> ThreadingHeaders | None:
        """Look up the original message's Message-ID/References for a reply.

        Only done when both the thread and the original message are given.
        """
        if not (thread_id and original_message_id):
            return None

        gmail = await self._gmail()
        response = await gmail.get(
            f"/users/me/messages/{quote(original_message_id, safe='')}",
            params={"format": "metadata", "metadataHeaders": ["Message-ID", "References"]},
        )
        headers = (response.get("payload") or {}).get("headers")
        # Gmail preserves the sender's header spelling
        message_id = normalize.header_value(headers, "Message-ID") or normalize.header_value(
            headers, "Message-Id"
        )
        references = normalize.header_value(headers, "References")

        threading = ThreadingHeaders.for_reply(message_id, references)
        if threading is None:
            logger.warning(f"Message {original_message_id} has no Message-ID; sending unthreaded")
        return threading

    async def _compose_raw(
        self,
        to: str,
        subject: str,
        body: str,
        thread_id: str | None,
        original_message_id: str | None,
    ) -> dict[str, Any]:
        """Build the Gmail message resource ({"raw", "threadId"}) for send and drafts."""
        sender = await self.identity.get()
        threading = await self._threading_headers(thread_id, original_message_id)
        message = build_message(to, subject, body, sender, threading)

        resource: dict[str, Any] = {"raw": encode_message(message)}
        if thread_id:
            resource["threadId"] = thread_id
        return resource

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        thread_id: str | None = None,
        original_message_id: str | None = None,
    ) -> dict[str, Any]:
        """Send an HTML email with the account signature, threading replies when asked."""
        resource = await self._compose_raw(to, subject, body, thread_id, original_message_id)
        gmail = await self._gmail()
        response = await gmail.post("/users/me/messages/send", json_data=resource)
        return normalize.sent_message(response)

    async def refresh_sender_identity(self) -> dict[str, Any]:
        """Forget the cached sender identity and fetch it again."""
        self.identity.invalidate()
        sender = await self.identity.get()
        return {
            "displayName": sender.display_name,
            "email": sender.email,
            "hasSignature": bool(sender.signature_html),
        }

    # =========================================================================
    # Drafts
    # =========================================================================

    async def list_drafts(self, max_results: int = 10) -> list[dict[str, Any]]:
        gmail = await self._gmail()
        response = await gmail.get("/users/me/drafts", params={"maxResults": max_results})

        drafts = []
        for ref in response.get("drafts", []):
            detail = await gmail.get(
                f"/users/me/drafts/{quote(ref['id'], safe='')}", params={"format": "metadata"}
            )
            drafts.append(normalize.draft_summary(detail))
        return drafts

    async def get_draft(self, draft_id: str) -> dict[str, Any]:
        gmail = await self._gmail()
        response = await gmail.get(
            f"/users/me/drafts/{quote(draft_id, safe='')}", params={"format": "full"}
        )
        return normalize.draft_detail(response, deep=self.deep_body_search)

    async def create_draft(
        self,
        to: str,
        subject: str,
        body: str,
        thread_id: str | None = None,
        original_message_id: str | None = None,
    ) -> dict[str, Any]:
        resource = await self._compose_raw(to, subject, body, thread_id, original_message_id)
        gmail = await self._gmail()
        response = await gmail.post("/users/me/drafts", json_data={"message": resource})
        return normalize.draft_ref(response)

    async def update_draft(
        self,
        draft_id: str,
        to: str,
        subject: str,
        body: str,
        thread_id: str | None = None,
        original_message_id: str | None = None,
    ) -> dict[str, Any]:
        """Replace a draft's content."""
        resource = await self._compose_raw(to, subject, body, thread_id, original_message_id)
        gmail = await self._gmail()
        response = await gmail.put(
            f"/users/me/drafts/{quote(draft_id, safe='')}",
            json_data={"id": draft_id, "message": resource},
        )
        return normalize.draft_ref(response)

    async def delete_draft(self, draft_id: str) -> dict[str, Any]:
        gmail = await self._gmail()
        await gmail.delete(f"/users/me/drafts/{quote(draft_id, safe='')}")
        return {"status": "deleted", "id": draft_id}

    async def send_draft(self, draft_id: str) -> dict[str, Any]:
        gmail = await self._gmail()
        response = await gmail.post("/users/me/drafts/send", json_data={"id": draft_id})
        return normalize.sent_message(response)
