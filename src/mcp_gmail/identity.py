"""Sender identity used when composing outgoing mail.

The identity (display name, address and HTML signature) comes from Gmail's
send-as settings. It is fetched on the first send or draft and reused until
invalidate() is called.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class SenderIdentity(BaseModel):
    """Display name, address and raw HTML signature of the sending account."""

    display_name: str = ""
    email: str = ""
    signature_html: str = ""

    @classmethod
    def from_send_as(cls, send_as: list[dict[str, Any]]) -> "SenderIdentity":
        """Pick the default send-as entry (or the first one) from settings.sendAs.list."""
        primary = next((entry for entry in send_as if entry.get("isDefault")), None)
        if primary is None and send_as:
            primary = send_as[0]
        if primary is None:
            return cls()
        return cls(
            display_name=primary.get("displayName") or "",
            email=primary.get("sendAsEmail") or "",
            signature_html=primary.get("signature") or "",
        )


class SenderIdentityCache:
    """Memoizes the sender identity for the lifetime of the server.

    Args:
        fetch: Coroutine returning the raw sendAs list from Gmail.
    """

    def __init__(self, fetch: Callable[[], Awaitable[list[dict[str, Any]]]]) -> None:
        self._fetch = fetch
        self._identity: SenderIdentity | None = None

    @property
    def cached(self) -> SenderIdentity | None:
        return self._identity

    async def get(self) -> SenderIdentity:
        """Return the cached identity, fetching it on first use."""
        if self._identity is None:
            identity = SenderIdentity.from_send_as(await self._fetch())
            logger.debug(
                f"Sender identity loaded: email={identity.email!r} "
                f"display_name={identity.display_name!r} "
                f"has_signature={bool(identity.signature_html)}"
            )
            self._identity = identity
        return self._identity

    def invalidate(self) -> None:
        """Drop the cached identity so the next get() refetches it."""
        self._identity = None
