"""Action Codes HTTP Client Implementation.

Concrete action_codes_api.Client backed by the Action Codes relayer REST API. Resolves the
base URL and API key from environment variables and converts JSON responses into the
abstract action_codes_api models used across the workspace.
"""

from __future__ import annotations

import logging
import os
from http import HTTPStatus
from typing import Any

import requests

import action_codes_api
from action_codes_api import Client, CodeNotFoundError
from action_codes_client_impl.models_impl import HttpActionCode, HttpStatusSnapshot, action_code_impl, snapshot_from_payload

logger = logging.getLogger("action_codes_client_impl")

DEFAULT_BASE_URL = "https://api.actioncode.app"
DEFAULT_TIMEOUT_SECONDS = 10.0
_UNRESOLVABLE = (HTTPStatus.NOT_FOUND, HTTPStatus.GONE)

# ---------------------------------------------------------------------------
# Client implementation
# ---------------------------------------------------------------------------


class ActionCodesHttpClient(Client):
    """Concrete action_codes_api.Client that talks to the Action Codes REST API.

    Configuration:
        - ACTION_CODES_API_URL (optional, defaults to https://api.actioncode.app)
        - ACTION_CODES_API_KEY (optional bearer token)
        - ACTION_CODES_TIMEOUT_SECONDS (optional, defaults to 10)

    Attributes:
        _base_url: API root without a trailing slash.
        _headers: Headers sent with every request.
        _timeout: Per-request timeout in seconds.

    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize the client, resolving URL/key/timeout defaults from the environment."""
        url = base_url or os.environ.get("ACTION_CODES_API_URL", DEFAULT_BASE_URL)
        self._base_url = url.rstrip("/")
        key = api_key or os.environ.get("ACTION_CODES_API_KEY")
        self._headers = {"Content-Type": "application/json"}
        if key:
            self._headers["Authorization"] = f"Bearer {key}"
        if timeout_seconds is None:
            timeout_seconds = float(os.environ.get("ACTION_CODES_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self._timeout = timeout_seconds

    def resolve(self, code: str) -> HttpActionCode:
        """Resolve a code to the account that generated it.

        Raises:
            CodeNotFoundError: If the service reports the code unknown or expired.
            requests.HTTPError: For any other non-2xx response.

        """
        response = requests.get(self._url(code), headers=self._headers, timeout=self._timeout)
        if response.status_code in _UNRESOLVABLE:
            raise CodeNotFoundError(code, response.text or None)
        response.raise_for_status()
        payload = response.json()
        account = payload.get("pubkey")
        if not account:
            raise CodeNotFoundError(code, "no account bound to code")
        return action_code_impl(code, account)

    def attach_message(self, code: str, text: str) -> None:
        """Attach a message to sign to the code."""
        self._post(code, "message", {"message": text})

    def attach_transaction(self, code: str, payload: str) -> None:
        """Attach a serialized transaction to sign to the code."""
        self._post(code, "transaction", {"transaction": payload})

    def get_status(self, code: str) -> HttpStatusSnapshot:
        """Fetch the current code status."""
        response = requests.get(self._url(code, "status"), headers=self._headers, timeout=self._timeout)
        response.raise_for_status()
        return snapshot_from_payload(response.json())

    def _url(self, code: str, action: str | None = None) -> str:
        url = f"{self._base_url}/codes/{code}"
        return f"{url}/{action}" if action else url

    def _post(self, code: str, action: str, body: dict[str, Any]) -> None:
        response = requests.post(self._url(code, action), json=body, headers=self._headers, timeout=self._timeout)
        if response.status_code in _UNRESOLVABLE:
            raise CodeNotFoundError(code, response.text or None)
        response.raise_for_status()
        logger.info("Attached %s to action code %s", action, code)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def get_client_impl() -> ActionCodesHttpClient:
    """Return a new ActionCodesHttpClient using env defaults."""
    return ActionCodesHttpClient()


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def register() -> None:
    """Bind the HTTP client factory into action_codes_api.get_client."""
    action_codes_api.get_client = get_client_impl
