"""Abstract schemas for action codes and their status."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

__all__ = [
    "ActionCode",
    "ActionCodeStatus",
    "StatusSnapshot",
    "action_code",
    "status_snapshot",
]


class ActionCodeStatus(str, Enum):
    """Lifecycle states reported by the action code service."""

    PENDING = "pending"
    FINALIZED = "finalized"
    EXPIRED = "expired"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        """Return True when no further observation is meaningful."""
        return self is not ActionCodeStatus.PENDING


class ActionCode(ABC):
    """Abstract resolved action code."""

    @property
    @abstractmethod
    def code(self) -> str:
        """Return the one-time code."""
        raise NotImplementedError

    @property
    @abstractmethod
    def account(self) -> str:
        """Return the account (public key) that owns the code."""
        raise NotImplementedError


class StatusSnapshot(ABC):
    """Abstract point-in-time status of an action code."""

    @property
    @abstractmethod
    def status(self) -> ActionCodeStatus:
        """Return the status value."""
        raise NotImplementedError

    @property
    @abstractmethod
    def finalized_signature(self) -> str | None:
        """Return the transaction signature once a transfer is finalized."""
        raise NotImplementedError

    @property
    @abstractmethod
    def signed_message(self) -> str | None:
        """Return the signed message once a message is finalized."""
        raise NotImplementedError


def action_code(code: str, account: str) -> ActionCode:
    """Construct a concrete ActionCode instance.

    Args:
        code: The one-time code.
        account: Account the code resolves to.

    Returns:
        Concrete ActionCode instance bound by the active implementation.

    """
    raise NotImplementedError


def status_snapshot(
    status: ActionCodeStatus | str,
    *,
    finalized_signature: str | None = None,
    signed_message: str | None = None,
) -> StatusSnapshot:
    """Construct a concrete StatusSnapshot instance.

    Args:
        status: Status value or its string form.
        finalized_signature: Transaction signature, for finalized transfers.
        signed_message: Signed message, for finalized message signing.

    Returns:
        Concrete StatusSnapshot instance bound by the active implementation.

    """
    raise NotImplementedError
