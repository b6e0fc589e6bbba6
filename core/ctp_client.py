"""
commercetools API Client - Handles all HTTP API interactions.

Every request carries the session-level Authorization (Bearer) and User-Agent
headers. Mutation endpoints take the resource's current version in the body
and return the full updated resource.

Endpoint reference:
- GET  /{projectKey}
- POST /{projectKey}/product-types
- POST /{projectKey}/tax-categories
- POST /{projectKey}/products
- POST /{projectKey}/carts
- GET  /{projectKey}/carts/{id}
- POST /{projectKey}/carts/{id}     (update actions)
"""

import requests
from typing import Dict, Any, Optional

from .auth import ClientCredentialsAuth
from .errors import ApiError, ConcurrentModificationError


def _as_body(draft) -> Dict[str, Any]:
    """Accept a typed draft (anything with to_dict()) or a plain dict."""
    if hasattr(draft, "to_dict"):
        return draft.to_dict()
    return draft


class CommercetoolsClient:
    """Client for the commercetools HTTP API using client-credentials OAuth."""

    def __init__(
        self,
        api_url: str,
        project_key: str,
        auth_client: ClientCredentialsAuth,
        user_agent: str = "",
        timeout: float = 30,
        debug: bool = False,
    ):
        self.api_url = api_url.rstrip("/")
        self.project_key = project_key
        self._auth = auth_client
        self.timeout = timeout
        self.debug = debug
        self._token = None
        self._session = requests.Session()
        if user_agent:
            self._session.headers.update({"User-Agent": user_agent})

    @property
    def project_url(self) -> str:
        return f"{self.api_url}/{self.project_key}"

    def authenticate(self) -> str:
        """Acquire an access token and set the Bearer header on the session."""
        self._token = self._auth.get_token()
        self._session.headers.update({"Authorization": f"Bearer {self._token}"})

        if self.debug:
            print(f"  API session authenticated for project {self.project_key}")

        return self._token

    def get_project(self) -> Dict[str, Any]:
        """Get the project settings.

        GET /{projectKey}
        Used as a connectivity check right after authentication.
        """
        return self._request("GET", self.project_url)

    def create_product_type(self, draft) -> Dict[str, Any]:
        """POST /{projectKey}/product-types"""
        return self._request("POST", f"{self.project_url}/product-types", _as_body(draft))

    def create_tax_category(self, draft) -> Dict[str, Any]:
        """POST /{projectKey}/tax-categories"""
        return self._request("POST", f"{self.project_url}/tax-categories", _as_body(draft))

    def create_product(self, draft) -> Dict[str, Any]:
        """POST /{projectKey}/products"""
        return self._request("POST", f"{self.project_url}/products", _as_body(draft))

    def create_cart(self, draft) -> Dict[str, Any]:
        """Create a cart.

        POST /{projectKey}/carts
        Returns the cart with id, version (1) and lineItems, each with a generated id.
        """
        return self._request("POST", f"{self.project_url}/carts", _as_body(draft))

    def get_cart(self, cart_id: str) -> Dict[str, Any]:
        """GET /{projectKey}/carts/{id}"""
        return self._request("GET", f"{self.project_url}/carts/{cart_id}")

    def update_cart(self, cart_id: str, update) -> Dict[str, Any]:
        """Apply update actions to a cart.

        POST /{projectKey}/carts/{id}
        Body: {"version": <current version>, "actions": [...]}

        Raises:
            ConcurrentModificationError: If the version in the body is stale (HTTP 409).
            ApiError: For any other non-success response.
        """
        return self._request("POST", f"{self.project_url}/carts/{cart_id}", _as_body(update))

    def _request(self, method: str, url: str, body: Optional[Dict] = None) -> Dict[str, Any]:
        """Send one request and return the parsed JSON body.

        Raises ApiError (or ConcurrentModificationError for 409) on any
        non-2xx status or transport failure. There is no retry.
        """
        self._ensure_auth()

        if self.debug:
            print(f"  {method} {url}")

        try:
            response = self._session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(None, method, url, message=str(e)) from e

        if not response.ok:
            try:
                error_body = response.json()
            except ValueError:
                error_body = response.text
            error_cls = ConcurrentModificationError if response.status_code == 409 else ApiError
            raise error_cls(response.status_code, method, url, error_body)

        if self.debug:
            print(f"  -> HTTP {response.status_code}")

        return response.json()

    def _ensure_auth(self):
        """Ensure we have a token, acquiring one if needed."""
        if not self._token:
            self.authenticate()

    @property
    def token(self) -> Optional[str]:
        return self._token
