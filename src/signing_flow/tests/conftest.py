"""Shared fakes for signing flow tests."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from action_codes_api import ActionCode, ActionCodeStatus, Client, CodeNotFoundError, StatusSnapshot
from signing_flow.construction import TransferService, TransferServiceError
from signing_flow.observer import StatusObserver


class _Snapshot(StatusSnapshot):
    def __init__(
        self,
        status: ActionCodeStatus,
        finalized_signature: str | None = None,
        signed_message: str | None = None,
    ) -> None:
        self._status = status
        self._finalized_signature = finalized_signature
        self._signed_message = signed_message

    @property
    def status(self) -> ActionCodeStatus:
        return self._status

    @property
    def finalized_signature(self) -> str | None:
        return self._finalized_signature

    @property
    def signed_message(self) -> str | None:
        return self._signed_message


class _ResolvedCode(ActionCode):
    def __init__(self, code: str, account: str) -> None:
        self._code = code
        self._account = account

    @property
    def code(self) -> str:
        return self._code

    @property
    def account(self) -> str:
        return self._account


class FakeActionCodes(Client):
    """Scripted action code service that records every call."""

    def __init__(self, account: str = "acct-1") -> None:
        self.account = account
        self.unknown_codes: set[str] = set()
        self.statuses: list[StatusSnapshot] = []
        self.calls: list[tuple[Any, ...]] = []

    def resolve(self, code: str) -> ActionCode:
        self.calls.append(("resolve", code))
        if code in self.unknown_codes:
            raise CodeNotFoundError(code, "unknown code")
        return _ResolvedCode(code, self.account)

    def attach_message(self, code: str, text: str) -> None:
        self.calls.append(("attach_message", code, text))

    def attach_transaction(self, code: str, payload: str) -> None:
        self.calls.append(("attach_transaction", code, payload))

    def get_status(self, code: str) -> StatusSnapshot:
        self.calls.append(("get_status", code))
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0] if self.statuses else _Snapshot(ActionCodeStatus.PENDING)


class FakeTransfers(TransferService):
    """Scripted transfer builder; each queued outcome is a payload or an error."""

    def __init__(self, *outcomes: str | TransferServiceError) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, str, Decimal, str]] = []

    def build_transfer(self, token: str, destination: str, amount: Decimal, account: str) -> str:
        self.calls.append((token, destination, amount, account))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, TransferServiceError):
            raise outcome
        return outcome


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def snapshot() -> Callable[..., StatusSnapshot]:
    """Factory for status snapshots."""

    def _make(
        status: str,
        *,
        finalized_signature: str | None = None,
        signed_message: str | None = None,
    ) -> StatusSnapshot:
        return _Snapshot(ActionCodeStatus(status), finalized_signature, signed_message)

    return _make


@pytest.fixture
def action_codes() -> FakeActionCodes:
    """Fake action code service."""
    return FakeActionCodes()


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock whose sleeps return immediately."""
    return FakeClock()


@pytest.fixture
def make_observer(clock: FakeClock) -> Callable[..., StatusObserver]:
    """Build observers that poll a client without real waits."""

    def _make(client: Client, *, interval: float = 2.0, timeout: float = 10.0) -> StatusObserver:
        async def fetch(code: str) -> StatusSnapshot:
            return client.get_status(code)

        return StatusObserver(fetch, interval=interval, timeout=timeout, sleep=clock.sleep, clock=clock)

    return _make


@pytest.fixture
def make_transfers() -> Callable[..., FakeTransfers]:
    """Factory for scripted transfer builders."""
    return FakeTransfers


@pytest.fixture
def service_fault() -> Callable[[str], TransferServiceError]:
    """Factory for 500 responses from the transfer builder."""

    def _make(detail: str = "Internal Server Error") -> TransferServiceError:
        return TransferServiceError(500, detail)

    return _make
