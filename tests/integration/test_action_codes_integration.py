"""Integration tests for action_codes_api + HTTP client wiring."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from action_codes_client_impl import client_impl
from action_codes_client_impl.client_impl import ActionCodesHttpClient
from action_codes_client_impl.models_impl import HttpActionCode, HttpStatusSnapshot

import action_codes_api

pytestmark = pytest.mark.integration


@pytest.mark.circleci
def test_action_codes_factory_returns_http_client() -> None:
    """action_codes_api.get_client returns ActionCodesHttpClient after implementation import."""
    client = action_codes_api.get_client()
    assert isinstance(client, ActionCodesHttpClient)


@pytest.mark.circleci
def test_snapshot_factory_returns_http_snapshot() -> None:
    """action_codes_api.status_snapshot builds implementation snapshots."""
    snapshot = action_codes_api.status_snapshot("finalized", signed_message="signed")
    assert isinstance(snapshot, HttpStatusSnapshot)
    assert snapshot.status is action_codes_api.ActionCodeStatus.FINALIZED


@pytest.mark.circleci
def test_get_status_routes_through_requests(monkeypatch: pytest.MonkeyPatch) -> None:
    """The factory client fetches status over HTTP."""
    monkeypatch.setenv("ACTION_CODES_API_URL", "https://codes.example.com")
    response = Mock(status_code=200)
    response.raise_for_status = Mock()
    response.json.return_value = {"status": "expired"}
    mock_get = Mock(return_value=response)
    monkeypatch.setattr(client_impl.requests, "get", mock_get)

    snapshot = action_codes_api.get_client().get_status("12345678")

    assert snapshot.status is action_codes_api.ActionCodeStatus.EXPIRED
    assert mock_get.call_args[0][0] == "https://codes.example.com/codes/12345678/status"


@pytest.mark.circleci
def test_action_code_factory_returns_http_action_code() -> None:
    """action_codes_api.action_code builds implementation action codes."""
    resolved = action_codes_api.action_code("12345678", "owner-account")
    assert isinstance(resolved, HttpActionCode)
    assert resolved.account == "owner-account"
