"""Unit tests for TokenStorage class.

Tests cover token persistence, retrieval, deletion, status and permissions.
"""

import json
from pathlib import Path

import pytest

from mcp_gmail.auth.models import OAuthToken, TokenMetadata, TokenStatus
from mcp_gmail.auth.token_storage import TokenStorage


@pytest.mark.unit
class TestTokenStorageStore:
    """Tests for TokenStorage.store() method."""

    def test_should_store_token(
        self,
        token_storage: TokenStorage,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify token is saved to file."""
        token_storage.store(valid_token, token_metadata)

        assert token_storage.token_path.exists()
        with open(token_storage.token_path) as f:
            data = json.load(f)
        assert data["version"] == 1
        assert data["token"]["access_token"] == valid_token.access_token
        assert data["metadata"]["service_name"] == "mcp-gmail"

    def test_should_set_owner_only_permissions(
        self,
        token_storage: TokenStorage,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify the token file is created with 0600 permissions."""
        token_storage.store(valid_token, token_metadata)

        assert token_storage.token_path.stat().st_mode & 0o777 == 0o600

    def test_should_create_missing_parent_directory(
        self, tmp_path: Path, valid_token: OAuthToken, token_metadata: TokenMetadata
    ) -> None:
        """Verify storing creates the token directory with 0700 permissions."""
        storage = TokenStorage(token_path=tmp_path / "new_dir" / "token.json")

        storage.store(valid_token, token_metadata)

        assert storage.token_path.exists()
        assert storage.token_path.parent.stat().st_mode & 0o777 == 0o700

    def test_should_overwrite_existing_token(
        self,
        token_storage: TokenStorage,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify a second store replaces the first token."""
        token_storage.store(valid_token, token_metadata)
        replacement = valid_token.model_copy(update={"access_token": "replacement"})

        token_storage.store(replacement, token_metadata)

        stored = token_storage.retrieve()
        assert stored is not None
        assert stored.token.access_token == "replacement"


@pytest.mark.unit
class TestTokenStorageRetrieve:
    """Tests for TokenStorage.retrieve() method."""

    def test_should_retrieve_stored_token(
        self,
        token_storage: TokenStorage,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify stored token can be retrieved."""
        token_storage.store(valid_token, token_metadata)

        stored = token_storage.retrieve()

        assert stored is not None
        assert stored.token.access_token == valid_token.access_token
        assert stored.token.refresh_token == valid_token.refresh_token

    def test_should_return_none_when_missing(self, token_storage: TokenStorage) -> None:
        """Verify None returned when no token file exists."""
        assert token_storage.retrieve() is None

    def test_should_return_none_for_corrupted_file(self, token_storage: TokenStorage) -> None:
        """Verify None returned for unparsable JSON."""
        token_storage.token_path.write_text("{ not json")

        assert token_storage.retrieve() is None

    def test_should_return_none_for_wrong_shape(self, token_storage: TokenStorage) -> None:
        """Verify None returned when JSON lacks the token layout."""
        token_storage.token_path.write_text(json.dumps({"access_token": "only"}))

        assert token_storage.retrieve() is None


@pytest.mark.unit
class TestTokenStorageDelete:
    """Tests for TokenStorage.delete() method."""

    def test_should_delete_token(
        self,
        token_storage: TokenStorage,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify token file is removed."""
        token_storage.store(valid_token, token_metadata)

        assert token_storage.delete() is True
        assert not token_storage.token_path.exists()

    def test_should_return_false_when_nothing_to_delete(
        self, token_storage: TokenStorage
    ) -> None:
        """Verify delete on missing file returns False."""
        assert token_storage.delete() is False


@pytest.mark.unit
class TestTokenStorageStatus:
    """Tests for TokenStorage.get_status() method."""

    def test_should_report_missing(self, token_storage: TokenStorage) -> None:
        """Verify MISSING when no file exists."""
        assert token_storage.get_status() == TokenStatus.MISSING

    def test_should_report_invalid(self, token_storage: TokenStorage) -> None:
        """Verify INVALID for a corrupted file."""
        token_storage.token_path.write_text("garbage")

        assert token_storage.get_status() == TokenStatus.INVALID

    def test_should_report_expired(
        self,
        token_storage: TokenStorage,
        expired_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify EXPIRED for a stale access token."""
        token_storage.store(expired_token, token_metadata)

        assert token_storage.get_status() == TokenStatus.EXPIRED

    def test_should_report_valid(
        self,
        token_storage: TokenStorage,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify VALID for a fresh token."""
        token_storage.store(valid_token, token_metadata)

        assert token_storage.get_status() == TokenStatus.VALID
