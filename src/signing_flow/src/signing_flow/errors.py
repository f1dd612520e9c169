"""Error taxonomy for the signing flow.

Input errors (``FormatError``, ``InvalidAmountError``, ``InvalidCodeFormatError``) are
recovered in place: the session keeps its step and the user retries. Every other error is
raised once processing has begun and ends the session.
"""

from __future__ import annotations


class FlowError(Exception):
    """Base class for signing flow failures."""


class FormatError(FlowError):
    """Transfer parameters are not exactly ``<token> <to_address> <amount>``."""


class InvalidAmountError(FlowError):
    """Transfer amount is not a positive finite number."""


class InvalidCodeFormatError(FlowError):
    """Action code is not exactly 8 digits."""


class ResolutionError(FlowError):
    """Action code could not be resolved to an account."""


class ConstructionError(FlowError):
    """Transfer transaction could not be built."""

    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        """Keep the last observed service status and response detail."""
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ObservationTimeout(FlowError):
    """Status never reached a terminal value within the timeout."""


class ExpiredCode(FlowError):
    """Action code expired before the action was completed."""


class RemoteStatusError(FlowError):
    """Action code service reported an error status."""
