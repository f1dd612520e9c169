"""Action code models implementation colocated with the HTTP client."""

from __future__ import annotations

from typing import Any

import action_codes_api
from action_codes_api import models
from action_codes_api.models import ActionCodeStatus

# ---------------------------------------------------------------------------
# Concrete models
# ---------------------------------------------------------------------------


class HttpActionCode(models.ActionCode):
    """Resolved action code returned by the HTTP service."""

    def __init__(self, code: str, account: str) -> None:
        """Create a resolved action code."""
        self._code = code
        self._account = account

    @property
    def code(self) -> str:
        """Get the one-time code."""
        return self._code

    @property
    def account(self) -> str:
        """Get the owning account public key."""
        return self._account

    def __repr__(self) -> str:
        return f"HttpActionCode(code={self._code!r}, account={self._account!r})"


class HttpStatusSnapshot(models.StatusSnapshot):
    """Status snapshot parsed from the HTTP service."""

    def __init__(
        self,
        status: ActionCodeStatus | str,
        *,
        finalized_signature: str | None = None,
        signed_message: str | None = None,
    ) -> None:
        """Create a status snapshot; unknown status strings raise ValueError."""
        self._status = ActionCodeStatus(status)
        self._finalized_signature = finalized_signature
        self._signed_message = signed_message

    @property
    def status(self) -> ActionCodeStatus:
        """Get the status value."""
        return self._status

    @property
    def finalized_signature(self) -> str | None:
        """Get the transaction signature for finalized transfers."""
        return self._finalized_signature

    @property
    def signed_message(self) -> str | None:
        """Get the signed message for finalized message signing."""
        return self._signed_message

    def __repr__(self) -> str:
        return (
            f"HttpStatusSnapshot(status={self._status.value!r}, "
            f"finalized_signature={self._finalized_signature!r}, signed_message={self._signed_message!r})"
        )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def action_code_impl(code: str, account: str) -> HttpActionCode:
    """Build an HttpActionCode."""
    return HttpActionCode(code=code, account=account)


def status_snapshot_impl(
    status: ActionCodeStatus | str,
    *,
    finalized_signature: str | None = None,
    signed_message: str | None = None,
) -> HttpStatusSnapshot:
    """Build an HttpStatusSnapshot."""
    return HttpStatusSnapshot(status, finalized_signature=finalized_signature, signed_message=signed_message)


def snapshot_from_payload(payload: dict[str, Any]) -> HttpStatusSnapshot:
    """Convert a status response body into a snapshot."""
    return status_snapshot_impl(
        payload.get("status", ActionCodeStatus.PENDING.value),
        finalized_signature=payload.get("finalizedSignature"),
        signed_message=payload.get("signedMessage"),
    )


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def register() -> None:
    """Register the model factories with the abstract API."""
    action_codes_api.action_code = action_code_impl
    action_codes_api.status_snapshot = status_snapshot_impl
    models.action_code = action_code_impl
    models.status_snapshot = status_snapshot_impl
