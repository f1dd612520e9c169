"""Conversation flow from user intent to a signed artifact.

A session moves ``collecting_intent -> awaiting_code -> processing`` and is then deleted,
whatever the outcome. Input mistakes keep the session where it is so the user can retry;
anything that goes wrong once processing starts is reported once and ends the session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import aclosing
from typing import TYPE_CHECKING

from action_codes_api import ActionCodeStatus, StatusSnapshot
from signing_flow import messages
from signing_flow.builder import ArtifactBuilder
from signing_flow.construction import format_amount
from signing_flow.errors import (
    ConstructionError,
    ExpiredCode,
    FormatError,
    InvalidAmountError,
    InvalidCodeFormatError,
    ObservationTimeout,
    RemoteStatusError,
    ResolutionError,
)
from signing_flow.intents import bind_code, collect_message, collect_transfer
from signing_flow.observer import StatusObserver
from signing_flow.sessions import (
    AwaitingCode,
    CollectingIntent,
    IntentKind,
    MessageIntent,
    Processing,
    SessionStore,
    TransferIntent,
)

if TYPE_CHECKING:
    from action_codes_api import Client
    from signing_flow.construction import TransferService

logger = logging.getLogger("signing_flow.flow")

Notify = Callable[[str], Awaitable[None]]


class FlowOrchestrator:
    """Drives each user's session through intent, code, construction and observation.

    Collaborators are injected so the transport, the action code service and the
    transfer builder can be swapped independently.
    """

    def __init__(
        self,
        action_codes: Client,
        transfers: TransferService,
        store: SessionStore | None = None,
        *,
        observer: StatusObserver | None = None,
        poll_interval: float | None = None,
        poll_timeout: float | None = None,
    ) -> None:
        self._action_codes = action_codes
        self._store = store if store is not None else SessionStore()
        self._builder = ArtifactBuilder(action_codes, transfers)
        if observer is None:
            timing: dict[str, float] = {}
            if poll_interval is not None:
                timing["interval"] = poll_interval
            if poll_timeout is not None:
                timing["timeout"] = poll_timeout
            observer = StatusObserver(self._fetch_status, **timing)
        self._observer = observer
        self._commands: dict[str, Callable[[str, Notify], Awaitable[None]]] = {
            "/start": self.start,
            "/message": self.start_message_flow,
            "/transfer": self.start_transfer_flow,
        }

    @property
    def store(self) -> SessionStore:
        return self._store

    # -----------------------------------------------------------------------
    # Entry points
    # -----------------------------------------------------------------------

    async def handle(self, user_id: str, content: str, notify: Notify) -> None:
        """Dispatch a chat message: a known command starts a flow, anything else is text."""
        handler = self._commands.get(_command_name(content))
        if handler is not None:
            await handler(user_id, notify)
            return
        await self.handle_text(user_id, content, notify)

    async def start(self, user_id: str, notify: Notify) -> None:  # noqa: ARG002
        await notify(messages.WELCOME)

    async def start_message_flow(self, user_id: str, notify: Notify) -> None:
        """Begin a message signing flow, replacing any session in progress."""
        self._store.create(user_id, CollectingIntent(kind=IntentKind.MESSAGE))
        await notify(messages.ASK_MESSAGE)

    async def start_transfer_flow(self, user_id: str, notify: Notify) -> None:
        """Begin a transfer signing flow, replacing any session in progress."""
        self._store.create(user_id, CollectingIntent(kind=IntentKind.TRANSFER))
        await notify(messages.ASK_TRANSFER_PARAMS)

    async def handle_text(self, user_id: str, text: str, notify: Notify) -> None:
        """Advance the user's session with free text; ignored without a session."""
        session = self._store.get(user_id)
        if isinstance(session, CollectingIntent):
            await self._collect_intent(user_id, session, text, notify)
        elif isinstance(session, AwaitingCode):
            await self._bind_code(user_id, session, text, notify)
        elif isinstance(session, Processing):
            logger.info("Ignoring text from %s while code %s is processing", user_id, session.code)

    # -----------------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------------

    async def _collect_intent(self, user_id: str, session: CollectingIntent, text: str, notify: Notify) -> None:
        collect = collect_transfer if session.kind is IntentKind.TRANSFER else collect_message
        try:
            staged = collect(session, text)
        except FormatError:
            await notify(messages.INVALID_FORMAT)
            return
        except InvalidAmountError:
            await notify(messages.INVALID_AMOUNT)
            return

        self._store.update(user_id, lambda _current: staged)
        intent = staged.intent
        if isinstance(intent, TransferIntent):
            await notify(messages.transfer_params(intent.token, intent.destination, format_amount(intent.amount)))
        else:
            await notify(messages.ASK_CODE)

    async def _bind_code(self, user_id: str, session: AwaitingCode, text: str, notify: Notify) -> None:
        try:
            processing = bind_code(session, text)
        except InvalidCodeFormatError:
            await notify(messages.INVALID_CODE)
            return

        self._store.update(user_id, lambda _current: processing)
        try:
            reply = await self._outcome(processing, notify)
            await notify(reply)
        finally:
            # The user may have started another flow while this code was in flight.
            self._store.destroy(user_id, expected=processing)

    async def _outcome(self, session: Processing, notify: Notify) -> str:
        """Build, attach and observe the artifact; return the text describing how it ended."""
        intent = session.intent
        timeout_text = messages.TRANSFER_TIMEOUT if isinstance(intent, TransferIntent) else messages.MESSAGE_TIMEOUT
        try:
            await notify(messages.PROCESSING)
            if isinstance(intent, TransferIntent):
                return await self._process_transfer(session.code, intent, notify)
            return await self._process_message(session.code, intent, notify)
        except (ResolutionError, ConstructionError) as exc:
            logger.warning("Transfer for code %s failed: %s", session.code, exc)
            return messages.transfer_failed(str(exc))
        except ExpiredCode:
            return messages.EXPIRED
        except RemoteStatusError:
            return messages.REMOTE_ERROR
        except ObservationTimeout:
            return timeout_text
        except Exception:
            logger.exception("Error processing action code %s", session.code)
            return messages.REMOTE_ERROR

    async def _process_message(self, code: str, intent: MessageIntent, notify: Notify) -> str:
        await self._builder.attach_message(code, intent)
        await notify(messages.PENDING_MESSAGE)
        snapshot = await self._await_finalized(code, IntentKind.MESSAGE)
        return messages.message_signed(snapshot.signed_message or "")

    async def _process_transfer(self, code: str, intent: TransferIntent, notify: Notify) -> str:
        artifact = await self._builder.build_transfer(code, intent)
        note = artifact.substitution_note
        await notify(messages.pending_transfer(note))
        snapshot = await self._await_finalized(code, IntentKind.TRANSFER)
        return messages.transfer_signed(snapshot.finalized_signature or "", note)

    async def _await_finalized(self, code: str, kind: IntentKind) -> StatusSnapshot:
        """Consume observations until one is terminal for ``kind``.

        Raises:
            ExpiredCode: If the code expired first.
            RemoteStatusError: If the service reported an error.
            ObservationTimeout: If no terminal status arrived in time.

        """
        async with aclosing(self._observer.observe(code)) as observations:
            async for observation in observations:
                snapshot = observation.snapshot
                if snapshot is None:
                    break
                status = snapshot.status
                if not status.is_terminal:
                    continue
                if status is ActionCodeStatus.EXPIRED:
                    raise ExpiredCode(code)
                if status is ActionCodeStatus.ERROR:
                    raise RemoteStatusError(code)
                if _has_payload(snapshot, kind):
                    return snapshot
                logger.info("Code %s finalized without a %s payload, still polling", code, kind.value)
        msg = f"No terminal status for {code} within {self._observer.timeout}s"
        raise ObservationTimeout(msg)

    async def _fetch_status(self, code: str) -> StatusSnapshot:
        return await asyncio.to_thread(self._action_codes.get_status, code)


def _has_payload(snapshot: StatusSnapshot, kind: IntentKind) -> bool:
    if kind is IntentKind.TRANSFER:
        return bool(snapshot.finalized_signature)
    return bool(snapshot.signed_message)


def _command_name(content: str) -> str:
    """Return ``/name`` for command text such as ``/transfer@my_bot``, else an empty string."""
    parts = content.strip().split(maxsplit=1)
    if not parts or not parts[0].startswith("/"):
        return ""
    return parts[0].split("@", 1)[0].lower()
