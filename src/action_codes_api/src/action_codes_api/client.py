"""Abstract interfaces for the action code service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from action_codes_api.models import ActionCode, StatusSnapshot

__all__ = ["Client", "CodeNotFoundError", "get_client"]


class CodeNotFoundError(LookupError):
    """Raised when a one-time action code is unknown or already expired."""

    def __init__(self, code: str, detail: str | None = None) -> None:
        """Store the rejected code and the service detail, if any."""
        message = f"Action code {code} could not be resolved"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.code = code
        self.detail = detail


class Client(ABC):
    """The contract for action code services."""

    @abstractmethod
    def resolve(self, code: str) -> ActionCode:
        """Resolve a one-time code to the account that requested it.

        Args:
            code: The 8-digit one-time action code.

        Returns:
            ActionCode bound to the externally authenticated account.

        Raises:
            CodeNotFoundError: If the code is unknown or expired.

        """
        raise NotImplementedError

    @abstractmethod
    def attach_message(self, code: str, text: str) -> None:
        """Attach a message to sign to the code.

        Args:
            code: The 8-digit one-time action code.
            text: Message text, stored verbatim.

        """
        raise NotImplementedError

    @abstractmethod
    def attach_transaction(self, code: str, payload: str) -> None:
        """Attach a serialized transaction to sign to the code.

        Args:
            code: The 8-digit one-time action code.
            payload: Serialized (base64) transaction returned by a builder.

        """
        raise NotImplementedError

    @abstractmethod
    def get_status(self, code: str) -> StatusSnapshot:
        """Fetch the current status of the code.

        Args:
            code: The 8-digit one-time action code.

        Returns:
            Snapshot of the code status at the time of the call.

        """
        raise NotImplementedError


def get_client() -> Client:
    """Return the default action code client implementation.

    Returns:
        Client implementation.

    """
    raise NotImplementedError
