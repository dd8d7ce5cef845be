import logging
import os
from typing import Optional, Sequence

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from config import GoogleCredentials
from errors import AuthError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.file",
]
REVOKE_URL = "https://oauth2.googleapis.com/revoke"


class GoogleAuthService:
    """OAuth session for an installed app, cached in a token file between runs."""
    def __init__(self, creds: GoogleCredentials, scopes: Sequence[str] = SCOPES):
        self._client_secrets_file = creds.client_secrets_file
        self._token_file = creds.token_file
        self._scopes = list(scopes)
        self._credentials: Optional[Credentials] = None

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    def initialize(self) -> None:
        """Restore a cached session, refreshing it when the access token has expired."""
        if not os.path.exists(self._token_file):
            logger.debug("No cached token at %s", self._token_file)
            return
        try:
            creds = Credentials.from_authorized_user_file(self._token_file, self._scopes)
        except (OSError, ValueError) as err:
            raise AuthError(f"Cached token {self._token_file} is unreadable: {err}") from err

        if not creds.valid and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except GoogleAuthError as err:
                raise AuthError(f"Failed to refresh the Google session: {err}") from err
            self._save(creds)
        self._credentials = creds

    def sign_in(self) -> None:
        if not os.path.exists(self._client_secrets_file):
            raise AuthError(f"OAuth client secrets file not found: {self._client_secrets_file}")
        try:
            flow = InstalledAppFlow.from_client_secrets_file(self._client_secrets_file, self._scopes)
            creds = flow.run_local_server(port=0)
        except (GoogleAuthError, ValueError) as err:
            raise AuthError(f"Sign-in failed: {err}") from err
        self._save(creds)
        self._credentials = creds
        logger.info("Signed in to Google")

    def sign_out(self) -> None:
        creds = self._credentials
        if creds is not None and creds.token:
            # Revocation is best-effort; the local token is removed regardless.
            try:
                requests.post(REVOKE_URL, params={"token": creds.token}, timeout=10)
            except requests.exceptions.RequestException as err:
                logger.warning("Token revocation failed (%s); removing local session anyway", err)
        try:
            if os.path.exists(self._token_file):
                os.remove(self._token_file)
        except OSError as err:
            raise AuthError(f"Failed to remove cached token {self._token_file}: {err}") from err
        self._credentials = None
        logger.info("Signed out of Google")

    def is_signed_in(self) -> bool:
        return self._credentials is not None and bool(self._credentials.valid)

    def access_token(self) -> str:
        creds = self._credentials
        if creds is None:
            raise AuthError("Not signed in")
        if not creds.valid:
            try:
                creds.refresh(Request())
            except GoogleAuthError as err:
                raise AuthError(f"Failed to refresh the Google session: {err}") from err
        return creds.token

    def _save(self, creds: Credentials) -> None:
        try:
            with open(self._token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as err:
            raise AuthError(f"Failed to cache token at {self._token_file}: {err}") from err


class DemoAuthService:
    """Offline session used with the demo gateway; nothing leaves the process."""
    def __init__(self) -> None:
        self._signed_in = False

    @property
    def credentials(self) -> None:
        return None

    def initialize(self) -> None:
        logger.debug("Demo auth initialised")

    def sign_in(self) -> None:
        self._signed_in = True

    def sign_out(self) -> None:
        self._signed_in = False

    def is_signed_in(self) -> bool:
        return self._signed_in

    def access_token(self) -> str:
        if not self._signed_in:
            raise AuthError("Not signed in")
        return "demo-token"
