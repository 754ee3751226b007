"""Command-line interface for mcp-gmail."""

import asyncio
import sys

import click

from mcp_gmail.__version__ import __version__
from mcp_gmail.config import Settings


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Gmail MCP Server - Connect AI agents to Gmail, Calendar and Tasks.

    This tool provides 24 tools across:
    - Gmail (read, search, send, labels, drafts)
    - Calendar (calendars, events)
    - Tasks (lists, tasks)
    """
    pass


@main.command()
@click.option("--client-id", envvar="GOOGLE_OAUTH_CLIENT_ID", help="Google OAuth client ID")
@click.option(
    "--client-secret", envvar="GOOGLE_OAUTH_CLIENT_SECRET", help="Google OAuth client secret"
)
def setup(client_id: str | None, client_secret: str | None) -> None:
    """Set up Google OAuth authentication.

    This will:
    1. Open browser for OAuth2 consent flow
    2. Store the token at ~/.mcp-gmail/token.json (or $GMAIL_TOKEN_PATH)

    The OAuth client is read from ~/.mcp-gmail/credentials.json
    (or $GMAIL_CREDENTIALS_PATH) unless --client-id and --client-secret are given.
    """
    from mcp_gmail.auth import ClientSecrets, OAuthManager, TokenStorage, load_client_secrets
    from mcp_gmail.errors import CredentialsMissingError

    settings = Settings.from_env()

    if client_id and client_secret:
        client_secrets = ClientSecrets(client_id=client_id, client_secret=client_secret)
    else:
        try:
            client_secrets = load_client_secrets(settings.credentials_path)
        except CredentialsMissingError as e:
            click.echo("❌ Error: OAuth client credentials required")
            click.echo("")
            click.echo(str(e))
            click.echo("")
            click.echo("Steps:")
            click.echo("  1. Go to console.cloud.google.com")
            click.echo("  2. APIs & Services → Credentials")
            click.echo("  3. Download OAuth 2.0 Client ID JSON")
            click.echo(f"  4. Save it as {settings.credentials_path}")
            click.echo("")
            click.echo("Or pass as options:")
            click.echo("  mcp-gmail setup --client-id=... --client-secret=...")
            sys.exit(1)

    manager = OAuthManager(storage=TokenStorage(settings.token_path), client_secrets=client_secrets)

    if manager.has_valid_tokens():
        click.echo("✓ Already authenticated!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")

        if not click.confirm("Re-authenticate?"):
            return

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        asyncio.run(manager.authenticate(redirect_uri=settings.redirect_uri))
        click.echo("✓ Authentication successful!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")
        click.echo("Run 'mcp-gmail doctor' to verify setup.")
    except Exception as e:
        click.echo(f"❌ Authentication failed: {e}")
        sys.exit(1)


@main.command()
def mcp() -> None:
    """Start the MCP server over stdio.

    Authentication is required before starting the server.
    Run 'mcp-gmail setup' if not already authenticated.

    This command is typically invoked by the MCP host, not by hand.
    """
    from mcp_gmail.auth import OAuthManager, TokenStatus, TokenStorage
    from mcp_gmail.server import main as server_main

    settings = Settings.from_env()
    manager = OAuthManager(storage=TokenStorage(settings.token_path))
    status, _ = manager.get_status()

    if status == TokenStatus.MISSING:
        click.echo("❌ Not authenticated. Run 'mcp-gmail setup' first.", err=True)
        sys.exit(1)

    if status == TokenStatus.INVALID:
        click.echo("❌ Token file corrupted. Run 'mcp-gmail setup' to re-authenticate.", err=True)
        sys.exit(1)

    try:
        click.echo("Starting Gmail MCP server...", err=True)
        server_main()
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
def doctor() -> None:
    """Check installation and authentication status.

    Verifies:
    1. Python dependencies installed
    2. OAuth client credentials file present
    3. Token validity
    """
    from mcp_gmail.auth import OAuthManager, TokenStatus, TokenStorage, load_client_secrets
    from mcp_gmail.errors import CredentialsMissingError

    settings = Settings.from_env()

    click.echo("Gmail MCP Status:")
    click.echo("")

    click.echo("Dependencies:")
    try:
        import google.auth  # noqa: F401
        import google_auth_oauthlib  # noqa: F401
        import mcp  # noqa: F401

        click.echo("  ✓ google-auth installed")
        click.echo("  ✓ google-auth-oauthlib installed")
        click.echo("  ✓ mcp installed")
    except ImportError as e:
        click.echo(f"  ❌ Missing dependency: {e}")
        sys.exit(1)

    click.echo("")

    click.echo("Credentials:")
    click.echo(f"  Credentials file: {settings.credentials_path}")
    try:
        load_client_secrets(settings.credentials_path)
        click.echo("  ✓ OAuth client configured")
        credentials_ok = True
    except CredentialsMissingError as e:
        click.echo(f"  ❌ {e}")
        credentials_ok = False

    click.echo("")

    manager = OAuthManager(storage=TokenStorage(settings.token_path))
    status, stored = manager.get_status()

    click.echo("Authentication:")
    click.echo(f"  Token file: {manager.token_path}")

    if status == TokenStatus.MISSING:
        click.echo("  ❌ Not authenticated")
        click.echo("")
        click.echo("Run 'mcp-gmail setup' to authenticate.")
        sys.exit(1)
    elif status == TokenStatus.INVALID:
        click.echo("  ❌ Token file corrupted")
        click.echo("")
        click.echo("Run 'mcp-gmail setup' to re-authenticate.")
        sys.exit(1)
    elif status == TokenStatus.EXPIRED:
        click.echo("  ⚠️  Token expired (can be refreshed)")
    elif status == TokenStatus.VALID:
        click.echo("  ✓ Authenticated")
        if stored:
            click.echo(
                f"  Token expires: {stored.token.expires_at.strftime('%Y-%m-%d %H:%M:%S UTC')}"
            )
            click.echo(f"  Scopes: {len(stored.token.scopes)} configured")

    click.echo("")

    if credentials_ok:
        click.echo("✓ Ready to use!")
    else:
        click.echo("❌ Credentials file required to refresh tokens.")
        sys.exit(1)


if __name__ == "__main__":
    main()
