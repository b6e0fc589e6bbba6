"""
commercetools OAuth Client - Token acquisition for the HTTP API.
Uses OAuth 2.0 client_credentials grant.

    POST {auth_url}/oauth/token
    Authorization: Basic base64(client_id:client_secret)
    Body (form): grant_type=client_credentials&scope=manage_project:{project_key}
"""

import time
import requests
from typing import Optional

from .errors import AuthenticationError


def scope_for_project(project_key: str) -> str:
    """Scope granting complete read and write access to a project."""
    return f"manage_project:{project_key}"


class ClientCredentialsAuth:
    """Acquires commercetools access tokens for API calls."""

    DEFAULT_EXPIRES_IN = 172800

    def __init__(
        self,
        auth_url: str,
        client_id: str,
        client_secret: str,
        scope: str,
        timeout: float = 30,
        debug: bool = False,
    ):
        self.auth_url = auth_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self.timeout = timeout
        self.debug = debug
        self._token = None
        self._expires_at = 0

    @property
    def token_url(self) -> str:
        return f"{self.auth_url}/oauth/token"

    def get_token(self) -> str:
        """Acquire or return cached access token."""
        if self._token and time.time() < self._expires_at - 60:
            return self._token

        if self.debug:
            print(f"  Acquiring access token (scope: {self.scope})")

        payload = {
            "grant_type": "client_credentials",
            "scope": self.scope,
        }

        try:
            response = requests.post(
                self.token_url,
                data=payload,
                auth=(self.client_id, self.client_secret),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Token request to {self.token_url} failed: {e}") from e

        if not response.ok:
            raise AuthenticationError(
                f"Token endpoint rejected credentials (HTTP {response.status_code}): "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )

        data = response.json()
        if not data.get("access_token"):
            raise AuthenticationError("Token response did not contain an access_token")

        expires_in = data.get("expires_in", self.DEFAULT_EXPIRES_IN)
        self._token = data["access_token"]
        self._expires_at = time.time() + expires_in

        if self.debug:
            print(f"  Access token acquired, expires in {expires_in}s")

        return self._token

    @property
    def token(self) -> Optional[str]:
        return self._token
