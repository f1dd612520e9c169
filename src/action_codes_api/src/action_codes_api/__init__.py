"""Public export surface for ``action_codes_api``."""

from action_codes_api.client import Client, CodeNotFoundError, get_client
from action_codes_api.models import (
    ActionCode,
    ActionCodeStatus,
    StatusSnapshot,
    action_code,
    status_snapshot,
)

__all__ = [
    "ActionCode",
    "ActionCodeStatus",
    "Client",
    "CodeNotFoundError",
    "StatusSnapshot",
    "action_code",
    "get_client",
    "status_snapshot",
]
