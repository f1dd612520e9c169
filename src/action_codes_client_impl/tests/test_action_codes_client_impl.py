"""Tests for the Action Codes HTTP client aligned with action_codes_api contracts."""

from __future__ import annotations

import importlib
from http import HTTPStatus
from unittest.mock import Mock

import pytest
import requests
from action_codes_client_impl import client_impl
from action_codes_client_impl.client_impl import ActionCodesHttpClient, get_client_impl, register
from action_codes_client_impl.models_impl import HttpActionCode, HttpStatusSnapshot, snapshot_from_payload

import action_codes_api
from action_codes_api import ActionCodeStatus, CodeNotFoundError


def _response(status: int = HTTPStatus.OK, payload: dict[str, object] | None = None, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status
    response.text = text
    response.json.return_value = payload or {}
    if status >= HTTPStatus.BAD_REQUEST:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    else:
        response.raise_for_status = Mock()
    return response


@pytest.fixture
def http_client(monkeypatch: pytest.MonkeyPatch) -> ActionCodesHttpClient:
    """Client pointed at a fixed base URL with a key."""
    monkeypatch.delenv("ACTION_CODES_TIMEOUT_SECONDS", raising=False)
    return ActionCodesHttpClient(base_url="https://codes.example.com/", api_key="secret")


def test_resolve_returns_account(http_client: ActionCodesHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """Resolve reads the pubkey from the response body."""
    # ARRANGE
    mock_get = Mock(return_value=_response(payload={"pubkey": "6tBUD"}))
    monkeypatch.setattr(client_impl.requests, "get", mock_get)

    # ACT
    resolved = http_client.resolve("12345678")

    # ASSERT
    assert isinstance(resolved, HttpActionCode)
    assert isinstance(resolved, action_codes_api.ActionCode)
    assert resolved.code == "12345678"
    assert resolved.account == "6tBUD"
    mock_get.assert_called_once_with(
        "https://codes.example.com/codes/12345678",
        headers={"Content-Type": "application/json", "Authorization": "Bearer secret"},
        timeout=10.0,
    )


@pytest.mark.parametrize("status", [HTTPStatus.NOT_FOUND, HTTPStatus.GONE])
def test_resolve_unknown_code_raises(
    http_client: ActionCodesHttpClient,
    monkeypatch: pytest.MonkeyPatch,
    status: HTTPStatus,
) -> None:
    """Unknown or expired codes map to CodeNotFoundError."""
    monkeypatch.setattr(client_impl.requests, "get", Mock(return_value=_response(status, text="expired")))

    with pytest.raises(CodeNotFoundError, match="expired"):
        http_client.resolve("12345678")


def test_resolve_without_pubkey_raises(http_client: ActionCodesHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """A code not yet bound to an account cannot be resolved."""
    monkeypatch.setattr(client_impl.requests, "get", Mock(return_value=_response(payload={})))

    with pytest.raises(CodeNotFoundError):
        http_client.resolve("12345678")


def test_resolve_server_error_raises_http_error(
    http_client: ActionCodesHttpClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Other failures surface as requests errors."""
    monkeypatch.setattr(client_impl.requests, "get", Mock(return_value=_response(HTTPStatus.BAD_GATEWAY)))

    with pytest.raises(requests.HTTPError):
        http_client.resolve("12345678")


def test_attach_transaction_posts_payload(http_client: ActionCodesHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """Transactions are posted to the code's transaction endpoint."""
    mock_post = Mock(return_value=_response())
    monkeypatch.setattr(client_impl.requests, "post", mock_post)

    http_client.attach_transaction("12345678", "base64tx")

    args, kwargs = mock_post.call_args
    assert args[0] == "https://codes.example.com/codes/12345678/transaction"
    assert kwargs["json"] == {"transaction": "base64tx"}


def test_attach_message_posts_text(http_client: ActionCodesHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """Messages are posted verbatim."""
    mock_post = Mock(return_value=_response())
    monkeypatch.setattr(client_impl.requests, "post", mock_post)

    http_client.attach_message("12345678", "  hello  ")

    args, kwargs = mock_post.call_args
    assert args[0] == "https://codes.example.com/codes/12345678/message"
    assert kwargs["json"] == {"message": "  hello  "}


def test_get_status_parses_snapshot(http_client: ActionCodesHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """Status payloads become snapshots."""
    payload = {"status": "finalized", "finalizedSignature": "5sig"}
    monkeypatch.setattr(client_impl.requests, "get", Mock(return_value=_response(payload=payload)))

    snapshot = http_client.get_status("12345678")

    assert snapshot.status is ActionCodeStatus.FINALIZED
    assert snapshot.finalized_signature == "5sig"
    assert snapshot.signed_message is None


def test_snapshot_rejects_unknown_status() -> None:
    """Unknown status strings are not silently accepted."""
    with pytest.raises(ValueError, match="unknown"):
        snapshot_from_payload({"status": "unknown"})


def test_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Base URL and timeout fall back to environment values."""
    monkeypatch.setenv("ACTION_CODES_API_URL", "https://env.example.com")
    monkeypatch.setenv("ACTION_CODES_TIMEOUT_SECONDS", "3.5")
    monkeypatch.delenv("ACTION_CODES_API_KEY", raising=False)
    mock_get = Mock(return_value=_response(payload={"status": "pending"}))
    monkeypatch.setattr(client_impl.requests, "get", mock_get)

    get_client_impl().get_status("87654321")

    mock_get.assert_called_once_with(
        "https://env.example.com/codes/87654321/status",
        headers={"Content-Type": "application/json"},
        timeout=3.5,
    )


def test_register_binds_factories(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register should replace the abstract factories with HTTP implementations."""
    # ARRANGE
    client_protocol = importlib.import_module("action_codes_api.client")
    monkeypatch.setattr(action_codes_api, "get_client", client_protocol.get_client, raising=False)

    # ACT
    register()

    # ASSERT
    assert action_codes_api.get_client is get_client_impl
    assert isinstance(action_codes_api.status_snapshot("pending"), HttpStatusSnapshot)
