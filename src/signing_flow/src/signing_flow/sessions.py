"""Per-user conversation sessions.

Each session variant carries only the data valid for its step, so a session collecting a
message never exposes transfer parameters and a code exists only once bound.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar


class Step(str, Enum):
    """Conversation steps, in the only order a session may take them."""

    COLLECTING_INTENT = "collecting_intent"
    AWAITING_CODE = "awaiting_code"
    PROCESSING = "processing"

    @property
    def order(self) -> int:
        return list(Step).index(self)


class IntentKind(str, Enum):
    """Kind of artifact the user asked for."""

    MESSAGE = "message"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class MessageIntent:
    """Free-form text to sign, stored verbatim."""

    text: str
    kind: ClassVar[IntentKind] = IntentKind.MESSAGE


@dataclass(frozen=True)
class TransferIntent:
    """Token transfer to build."""

    token: str
    destination: str
    amount: Decimal
    kind: ClassVar[IntentKind] = IntentKind.TRANSFER


Intent = MessageIntent | TransferIntent


@dataclass(frozen=True)
class CollectingIntent:
    kind: IntentKind
    step: ClassVar[Step] = Step.COLLECTING_INTENT


@dataclass(frozen=True)
class AwaitingCode:
    intent: Intent
    step: ClassVar[Step] = Step.AWAITING_CODE


@dataclass(frozen=True)
class Processing:
    intent: Intent
    code: str
    step: ClassVar[Step] = Step.PROCESSING


Session = CollectingIntent | AwaitingCode | Processing


class SessionStore:
    """In-memory table of at most one session per user.

    Nothing is persisted; a process restart drops in-flight conversations.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def create(self, user_id: str, session: Session) -> Session:
        """Start a session for the user, replacing any existing one."""
        self._sessions[user_id] = session
        return session

    def get(self, user_id: str) -> Session | None:
        return self._sessions.get(user_id)

    def update(self, user_id: str, mutator: Callable[[Session], Session]) -> Session | None:
        """Apply ``mutator`` to the user's session; no-op when there is none.

        Raises:
            ValueError: If the mutation would move the session to an earlier step.

        """
        current = self._sessions.get(user_id)
        if current is None:
            return None
        updated = mutator(current)
        if updated.step.order < current.step.order:
            msg = f"Session for {user_id} cannot move from {current.step.value} back to {updated.step.value}"
            raise ValueError(msg)
        self._sessions[user_id] = updated
        return updated

    def destroy(self, user_id: str, *, expected: Session | None = None) -> None:
        """Remove the user's session if present.

        With ``expected``, only that exact session object is removed; a session created
        since then stays in place.
        """
        if expected is not None and self._sessions.get(user_id) is not expected:
            return
        self._sessions.pop(user_id, None)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions
