"""Outgoing message construction.

Plain-text bodies from the agent are turned into HTML (so the sender's HTML
signature renders), wrapped in an RFC 5322 message with optional threading
headers, and encoded for the Gmail API's "raw" field.
"""

import base64
import html
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.utils import formataddr

from mcp_gmail.identity import SenderIdentity

SIGNATURE_DIVIDER = "<br><div>--</div><br>"


@dataclass(frozen=True)
class ThreadingHeaders:
    """In-Reply-To / References values for a reply."""

    in_reply_to: str
    references: str

    @classmethod
    def for_reply(cls, message_id: str | None, references: str | None) -> "ThreadingHeaders | None":
        """Chain a reply onto the original message's headers.

        Args:
            message_id: Message-ID of the message being replied to.
            references: That message's References header, if any.

        Returns:
            Headers for the reply, or None when the original has no Message-ID.
        """
        if not message_id:
            return None
        chain = f"{references} {message_id}" if references else message_id
        return cls(in_reply_to=message_id, references=chain)


def text_to_html(text: str) -> str:
    """Escape plain text for HTML and turn newlines into line breaks."""
    return html.escape(text, quote=True).replace("\n", "<br>\n")


def build_html_body(text: str, signature_html: str = "") -> str:
    """Build the HTML body, appending the signature after a divider if present."""
    body = f"<div>{text_to_html(text)}</div>"
    if signature_html:
        return f"{body}{SIGNATURE_DIVIDER}{signature_html}"
    return body


def from_header(sender: SenderIdentity) -> str | None:
    """Format the From header for the cached sender, or None if unknown."""
    if not sender.email:
        return None
    if sender.display_name:
        return formataddr((sender.display_name, sender.email))
    return sender.email


def build_message(
    to: str,
    subject: str,
    body: str,
    sender: SenderIdentity,
    threading: ThreadingHeaders | None = None,
) -> MIMEText:
    """Build the outgoing HTML message.

    Args:
        to: Recipient address(es).
        subject: Subject line.
        body: Plain-text body from the caller.
        sender: Cached sender identity (From header and signature).
        threading: Reply headers, when replying within a thread.

    Returns:
        MIME message ready for encoding.
    """
    message = MIMEText(build_html_body(body, sender.signature_html), "html", "utf-8")

    sender_address = from_header(sender)
    if sender_address:
        message["From"] = sender_address
    message["To"] = to
    message["Subject"] = subject

    if threading is not None:
        message["In-Reply-To"] = threading.in_reply_to
        message["References"] = threading.references

    return message


def encode_raw(data: bytes) -> str:
    """Encode bytes as base64url without padding, as Gmail's raw field expects."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def decode_raw(data: str) -> bytes:
    """Inverse of encode_raw."""
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def encode_message(message: MIMEText) -> str:
    return encode_raw(message.as_bytes())
