"""JSON file storage for the OAuth token.

One token file holds the token for one Google account. The location comes
from Settings.token_path (default: ~/.mcp-gmail/token.json), so pointing
GMAIL_CONFIG_DIR or GMAIL_TOKEN_PATH elsewhere connects the server to a
different account.

Tokens are stored without encryption; the file is created with 0600
permissions inside a 0700 directory.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from mcp_gmail.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)

logger = logging.getLogger(__name__)


class TokenStorage:
    """Persist and inspect the stored OAuth token.

    Attributes:
        token_path: Path to the token JSON file.

    Example:
        ```python
        storage = TokenStorage(Path("~/.mcp-gmail/token.json").expanduser())
        storage.store(token, TokenMetadata(service_name="mcp-gmail"))
        stored = storage.retrieve()
        ```
    """

    def __init__(self, token_path: Path) -> None:
        self.token_path = token_path

    def _ensure_parent_dir(self) -> None:
        """Create the token directory with owner-only permissions if needed."""
        parent = self.token_path.parent
        if not parent.exists():
            parent.mkdir(parents=True, mode=0o700)

    def _load_raw(self) -> dict | None:
        """Load raw JSON from the token file.

        Returns:
            Parsed JSON object, or None if the file is missing or unreadable.
        """
        if not self.token_path.exists():
            return None

        try:
            with open(self.token_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read token file {self.token_path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def store(self, token: OAuthToken, metadata: TokenMetadata) -> None:
        """Write the token, replacing any previous one.

        Args:
            token: OAuth token data to store.
            metadata: Token metadata including provider info.
        """
        stored_token = StoredToken(version=1, metadata=metadata, token=token)

        self._ensure_parent_dir()
        with open(self.token_path, "w") as f:
            f.write(stored_token.model_dump_json(indent=2))

        # Owner read/write only (600)
        self.token_path.chmod(0o600)

    def retrieve(self) -> StoredToken | None:
        """Read the stored token.

        Returns:
            StoredToken if present and valid, None otherwise.
        """
        data = self._load_raw()
        if data is None:
            return None

        try:
            return StoredToken.model_validate(data)
        except ValidationError:
            return None

    def delete(self) -> bool:
        """Remove the token file.

        Returns:
            True if a file was deleted, False if none existed.
        """
        if not self.token_path.exists():
            return False
        self.token_path.unlink()
        return True

    def get_status(self) -> TokenStatus:
        """Classify the stored token.

        Returns:
            MISSING when there is no file, INVALID when it cannot be parsed,
            EXPIRED when the access token needs a refresh, VALID otherwise.
        """
        if not self.token_path.exists():
            return TokenStatus.MISSING

        stored = self.retrieve()
        if stored is None:
            return TokenStatus.INVALID

        if stored.token.is_expired():
            return TokenStatus.EXPIRED

        return TokenStatus.VALID
