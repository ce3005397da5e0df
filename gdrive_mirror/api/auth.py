"""
Handles authentication with the Google Drive API: the OAuth client secrets file,
the cached user token and the interactive authorization exchange.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gdrive_mirror.exceptions import CredentialError
from gdrive_mirror.models.config import DRIVE_READONLY_SCOPE

log = logging.getLogger(__name__)

AUTH_PROMPT = "Go to the following link in your browser:\n{url}\n"


class DriveAuthenticator:
    """
    Produces valid OAuth credentials for the Drive API client.
    """

    def __init__(
        self,
        credentials_file: Path,
        token_file: Path,
        scopes: Sequence[str] = (DRIVE_READONLY_SCOPE,),
    ):
        """
        Initializes the authenticator.

        Args:
            credentials_file: OAuth client secrets JSON downloaded from the console.
            token_file: Where the authorized user token is cached between runs.
            scopes: OAuth scopes requested during the authorization exchange.
        """
        self.credentials_file = Path(credentials_file).expanduser()
        self.token_file = Path(token_file).expanduser()
        self.scopes = list(scopes)
        self._credentials: Optional[Credentials] = None
        self._lock = asyncio.Lock()

    def get_credentials(self) -> Credentials:
        """
        Returns usable credentials, trying the cached token first, then a refresh,
        then the interactive authorization flow.

        Raises:
            CredentialError: If none of the above yields valid credentials.
        """
        if self._credentials is not None:
            return self._credentials

        creds = self._load_cached_token()
        if creds and creds.valid:
            log.debug(f"Loaded cached token from '{self.token_file}'.")
        elif creds and creds.expired and creds.refresh_token:
            self._refresh(creds)
            self.save_token(creds)
        else:
            creds = self._run_authorization_flow()
            self.save_token(creds)

        self._credentials = creds
        return creds

    async def access_token(self) -> str:
        """Returns a bearer token, refreshing the credentials when they expire."""
        async with self._lock:
            creds = self._credentials
            if creds is None:
                creds = await asyncio.to_thread(self.get_credentials)
            if not creds.valid:
                await asyncio.to_thread(self._refresh, creds)
            return creds.token

    def save_token(self, creds: Credentials) -> None:
        """Writes the token to the cache file, readable by the owner only."""
        log.info(f"Saving credential file to: {self.token_file}")
        try:
            fd = os.open(self.token_file, os.O_RDWR | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as e:
            raise CredentialError(f"Unable to cache oauth token: {e}") from e

    def _load_cached_token(self) -> Optional[Credentials]:
        if not self.token_file.is_file():
            return None
        try:
            return Credentials.from_authorized_user_file(
                str(self.token_file), self.scopes
            )
        except (ValueError, OSError) as e:
            log.debug(f"Ignoring unreadable token file '{self.token_file}': {e}")
            return None

    def _refresh(self, creds: Credentials) -> None:
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            raise CredentialError(f"Unable to refresh oauth token: {e}") from e

    def _run_authorization_flow(self) -> Credentials:
        if not self.credentials_file.is_file():
            raise CredentialError(
                f"Unable to read client secret file: '{self.credentials_file}'"
            )
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self.credentials_file), self.scopes
            )
        except (ValueError, OSError) as e:
            raise CredentialError(
                f"Unable to parse client secret file to config: {e}"
            ) from e

        try:
            return flow.run_local_server(
                port=0,
                open_browser=False,
                authorization_prompt_message=AUTH_PROMPT,
            )
        except Exception as e:
            raise CredentialError(f"Unable to retrieve token from web: {e}") from e
