"""Transfer transaction construction service.

The builder service turns ``(token, destination, amount, account)`` into a serialized,
unsigned transaction that the account owner can sign on the action code site.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from decimal import Decimal
from http import HTTPStatus

import requests

logger = logging.getLogger("signing_flow.construction")

DEFAULT_TRANSFER_API_URL = "https://solana-sbl.dial.to"
DEFAULT_TIMEOUT_SECONDS = 15.0


class TransferServiceError(Exception):
    """Failed transfer construction request."""

    def __init__(self, status_code: int | None, detail: str) -> None:
        """Record the HTTP status (None when no response was received) and body."""
        label = f"HTTP {status_code}" if status_code is not None else "request failed"
        super().__init__(f"{label}: {detail}")
        self.status_code = status_code
        self.detail = detail

    @property
    def is_service_fault(self) -> bool:
        """Return True for 5xx responses, the only failures worth a fallback attempt."""
        return self.status_code is not None and self.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR


class TransferService(ABC):
    """The contract for transfer construction services."""

    @abstractmethod
    def build_transfer(self, token: str, destination: str, amount: Decimal, account: str) -> str:
        """Build an unsigned transfer transaction.

        Args:
            token: Token symbol to transfer (e.g. ``USDC``).
            destination: Recipient address.
            amount: Amount in whole token units.
            account: Sender account that will sign the transaction.

        Returns:
            Serialized (base64) transaction.

        Raises:
            TransferServiceError: If the service rejects the request or cannot be reached.

        """
        raise NotImplementedError


class DialectTransferService(TransferService):
    """TransferService backed by the Dialect blinks transfer endpoint.

    Configuration:
        - TRANSFER_API_URL (optional, defaults to https://solana-sbl.dial.to)
        - TRANSFER_API_TIMEOUT_SECONDS (optional, defaults to 15)

    """

    def __init__(self, base_url: str | None = None, timeout_seconds: float | None = None) -> None:
        """Initialize the service, resolving URL/timeout defaults from the environment."""
        url = base_url or os.environ.get("TRANSFER_API_URL", DEFAULT_TRANSFER_API_URL)
        self._base_url = url.rstrip("/")
        if timeout_seconds is None:
            timeout_seconds = float(os.environ.get("TRANSFER_API_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self._timeout = timeout_seconds

    def build_transfer(self, token: str, destination: str, amount: Decimal, account: str) -> str:
        """Request a transfer transaction for ``account``."""
        url = f"{self._base_url}/api/v0/transfer/{token}"
        params = {"to": destination, "amount": format_amount(amount)}
        body = {"type": "transaction", "account": account}
        logger.info("Transfer API request: url=%s params=%s body=%s", url, params, body)
        try:
            response = requests.post(url, params=params, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransferServiceError(None, str(exc)) from exc

        logger.info("Transfer API response status: %s %s", response.status_code, response.reason)
        if not response.ok:
            logger.info("Transfer API error response: %s", response.text)
            raise TransferServiceError(response.status_code, response.text or str(response.reason))

        data = response.json()
        transaction = data.get("transaction") if isinstance(data, dict) else None
        if not transaction:
            raise TransferServiceError(response.status_code, "No transaction received from transfer API")
        return transaction


def format_amount(amount: Decimal) -> str:
    """Render an amount in plain notation (``100``, ``0.1``), never exponent form."""
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
