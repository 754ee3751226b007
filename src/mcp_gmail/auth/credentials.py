"""Loading of the OAuth client credentials file.

The file is the JSON downloaded from Google Cloud Console
(APIs & Services > Credentials > OAuth 2.0 Client ID). Both "installed"
(desktop app) and "web" client types are accepted.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from mcp_gmail.auth.models import ClientSecrets
from mcp_gmail.errors import CredentialsMissingError

logger = logging.getLogger(__name__)


def load_client_secrets(path: Path) -> ClientSecrets:
    """Read client id/secret from a Google OAuth client file.

    Args:
        path: Location of credentials.json.

    Returns:
        Parsed client secrets.

    Raises:
        CredentialsMissingError: If the file is absent or not a valid client file.
    """
    if not path.exists():
        raise CredentialsMissingError(path)

    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CredentialsMissingError(path, f"unreadable: {e}") from e

    for client_type in ("installed", "web"):
        section = data.get(client_type) if isinstance(data, dict) else None
        if section:
            try:
                return ClientSecrets.model_validate({**section, "client_type": client_type})
            except ValidationError as e:
                raise CredentialsMissingError(path, "missing client_id or client_secret") from e

    raise CredentialsMissingError(path, "no 'installed' or 'web' section")
