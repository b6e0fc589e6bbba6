"""Tests for core.auth.ClientCredentialsAuth.

All tests mock requests.post so no real HTTP calls are made.
Covers token acquisition, caching, expiry-driven refresh, error handling and
the client_credentials request structure.
"""

import time
from unittest.mock import patch, MagicMock

import pytest
import requests

from core.auth import ClientCredentialsAuth, scope_for_project
from core.errors import AuthenticationError


def _mock_token_response(access_token="test-token", expires_in=172800, status_code=200):
    mock_resp = MagicMock()
    mock_resp.ok = status_code < 400
    mock_resp.status_code = status_code
    mock_resp.text = '{"error": "invalid_client"}'
    mock_resp.json.return_value = {
        "access_token": access_token,
        "expires_in": expires_in,
        "scope": "manage_project:demo",
        "token_type": "Bearer",
    }
    return mock_resp


def _make_client(**kwargs):
    params = dict(
        auth_url="https://auth.test/",
        client_id="test-id",
        client_secret="test-secret",
        scope=scope_for_project("demo"),
    )
    params.update(kwargs)
    return ClientCredentialsAuth(**params)


# ---------------------------------------------------------------------------
# Token acquisition
# ---------------------------------------------------------------------------

def test_scope_for_project():
    assert scope_for_project("demo") == "manage_project:demo"


def test_get_token_calls_token_endpoint():
    client = _make_client()
    with patch("core.auth.requests.post", return_value=_mock_token_response()) as mock_post:
        token = client.get_token()
        assert token == "test-token"
        mock_post.assert_called_once()
        assert mock_post.call_args[0][0] == "https://auth.test/oauth/token"


def test_client_credentials_request():
    client = _make_client(timeout=12)
    with patch("core.auth.requests.post", return_value=_mock_token_response()) as mock_post:
        client.get_token()
        kwargs = mock_post.call_args[1]
        assert kwargs["data"] == {"grant_type": "client_credentials", "scope": "manage_project:demo"}
        assert kwargs["auth"] == ("test-id", "test-secret")
        assert kwargs["timeout"] == 12


# ---------------------------------------------------------------------------
# Caching behaviour
# ---------------------------------------------------------------------------

def test_get_token_caches():
    client = _make_client()
    with patch("core.auth.requests.post", return_value=_mock_token_response()) as mock_post:
        token1 = client.get_token()
        token2 = client.get_token()
        assert token1 == token2
        assert mock_post.call_count == 1


def test_get_token_refreshes_on_expiry():
    client = _make_client()
    with patch("core.auth.requests.post", return_value=_mock_token_response()):
        client.get_token()
    client._expires_at = time.time() - 1
    with patch("core.auth.requests.post", return_value=_mock_token_response("new-token")):
        assert client.get_token() == "new-token"


def test_token_property():
    client = _make_client()
    assert client.token is None
    with patch("core.auth.requests.post", return_value=_mock_token_response()):
        client.get_token()
    assert client.token == "test-token"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

def test_rejected_credentials_raise():
    client = _make_client()
    with patch("core.auth.requests.post", return_value=_mock_token_response(status_code=401)):
        with pytest.raises(AuthenticationError) as exc_info:
            client.get_token()
    assert exc_info.value.status_code == 401
    assert client.token is None


def test_missing_access_token_raises():
    client = _make_client()
    resp = _mock_token_response()
    resp.json.return_value = {"token_type": "Bearer"}
    with patch("core.auth.requests.post", return_value=resp):
        with pytest.raises(AuthenticationError):
            client.get_token()


def test_network_error_raises_authentication_error():
    client = _make_client()
    with patch("core.auth.requests.post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(AuthenticationError):
            client.get_token()
