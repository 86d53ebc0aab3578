"""
Microsoft Graph API authentication using MSAL (Device Code Flow).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import keyring
import msal
from keyring.errors import KeyringError, PasswordDeleteError
from rich.console import Console

from ..domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

console = Console()


KEYRING_SERVICE_NAME = "gapfinder"
DEFAULT_CACHE_FILE = Path.home() / ".gapfinder_token_cache.json"


class TokenCacheStore:
    """
    Persists the serialized MSAL token cache.

    The OS keyring is preferred; once it fails the store falls back to a
    plaintext file readable by the owner only, for the rest of the run.
    """

    def __init__(self, key: str, cache_file: Path):
        self.key = key
        self.cache_file = cache_file
        self.backend = "keyring"

    @classmethod
    def for_account(cls, client_id: str, tenant_id: str, cache_file: Path | None = None) -> "TokenCacheStore":
        """Build the store holding the tokens of one Azure AD application and tenant."""
        return cls(key=f"{client_id}:{tenant_id}", cache_file=cache_file or DEFAULT_CACHE_FILE)

    def load(self) -> Optional[str]:
        if self.backend == "keyring":
            try:
                serialized = keyring.get_password(KEYRING_SERVICE_NAME, self.key)
            except KeyringError as exc:
                self._fall_back(f"reading credentials failed: {exc}")
            else:
                if serialized is not None:
                    return serialized

        if not self.cache_file.exists():
            return None

        try:
            return self.cache_file.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not load token cache file %s: %s", self.cache_file, exc)
            return None

    def save(self, serialized: str) -> None:
        if self.backend == "keyring":
            try:
                keyring.set_password(KEYRING_SERVICE_NAME, self.key, serialized)
                return
            except KeyringError as exc:
                self._fall_back(f"writing credentials failed: {exc}")

        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_text(serialized, encoding="utf-8")
            self.cache_file.chmod(0o600)
        except OSError as exc:
            logger.warning("Could not save token cache to %s: %s", self.cache_file, exc)

    def clear(self) -> None:
        if self.cache_file.exists():
            self.cache_file.unlink()
        try:
            keyring.delete_password(KEYRING_SERVICE_NAME, self.key)
        except PasswordDeleteError:
            logger.debug("No credentials stored in keyring for %s", self.key)
        except KeyringError as exc:
            logger.warning("Could not remove credentials from keyring: %s", exc)

    def _fall_back(self, reason: str) -> None:
        logger.warning(
            "Secure credential storage unavailable (%s). Falling back to plaintext cache at %s.",
            reason,
            self.cache_file,
        )
        self.backend = "file"


class GraphAuthenticator:
    """
    Handles authentication with Microsoft Graph API using Device Code Flow.

    The user opens the verification URL in a browser, enters the displayed
    code and grants read access to their calendar. Tokens are cached so later
    runs authenticate silently.
    """

    # Required scopes for calendar access
    SCOPES = ["Calendars.Read"]

    def __init__(
        self,
        client_id: str,
        tenant_id: str,
        authority_url: str | None = None,
        cache_file: Path | None = None
    ):
        """
        Initialize the authenticator.

        Args:
            client_id: Azure AD application (client) ID
            tenant_id: Azure AD tenant ID
            authority_url: Optional custom authority URL
            cache_file: Optional path to the plaintext fallback cache file
        """
        if not client_id:
            raise AuthenticationError(
                "No client_id configured. Register an Azure AD application and "
                "add its client_id to config.yaml, or run with --mock."
            )

        self.client_id = client_id
        self.tenant_id = tenant_id
        self.authority = authority_url or f"https://login.microsoftonline.com/{tenant_id}"

        self.store = TokenCacheStore.for_account(client_id, tenant_id, cache_file)
        self.cache = self._load_cache()

        self.app = msal.PublicClientApplication(
            client_id=self.client_id,
            authority=self.authority,
            token_cache=self.cache
        )

    def _load_cache(self) -> msal.SerializableTokenCache:
        cache = msal.SerializableTokenCache()
        serialized = self.store.load()

        if serialized:
            try:
                cache.deserialize(serialized)
            except ValueError as exc:
                logger.warning("Could not deserialize token cache: %s", exc)

        return cache

    def _save_cache(self) -> None:
        if self.cache.has_state_changed:
            self.store.save(self.cache.serialize())

    def get_access_token(self, force_refresh: bool = False) -> str:
        """
        Get a valid access token, using cache or requesting new one.

        Args:
            force_refresh: Force authentication even if cached token exists

        Returns:
            Access token string

        Raises:
            AuthenticationError: If authentication fails
        """
        if not force_refresh:
            accounts = self.app.get_accounts()
            if accounts:
                result = self.app.acquire_token_silent(scopes=self.SCOPES, account=accounts[0])
                if result and "access_token" in result:
                    logger.debug("Using cached token for %s", accounts[0].get("username"))
                    self._save_cache()
                    return result["access_token"]

        return self._authenticate_device_code_flow()

    def _authenticate_device_code_flow(self) -> str:
        console.print("\n[bold cyan]🔐 Microsoft Authentication Required[/bold cyan]")
        console.print("You need to sign in to read your calendar.\n")

        flow = self.app.initiate_device_flow(scopes=self.SCOPES)

        if "user_code" not in flow:
            raise AuthenticationError(
                f"Failed to initiate device flow: {flow.get('error_description', 'Unknown error')}"
            )

        console.print("[bold]Please follow these steps:[/bold]")
        console.print(f"1. Open a browser and go to: [bold cyan]{flow['verification_uri']}[/bold cyan]")
        console.print(f"2. Enter this code: [bold yellow]{flow['user_code']}[/bold yellow]")
        console.print("3. Sign in with your Microsoft account\n")
        console.print("[dim]Waiting for authentication...[/dim]\n")

        result = self.app.acquire_token_by_device_flow(flow)

        if "access_token" not in result:
            error = result.get("error_description", "Unknown error")
            raise AuthenticationError(f"Authentication failed: {error}")

        console.print("[bold green]✓ Authentication successful![/bold green]\n")
        self._save_cache()

        return result["access_token"]
