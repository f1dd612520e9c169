"""Artifact construction for bound action codes.

Messages are attached as-is. Transfers are built by an external service that is
occasionally overloaded or limited per asset, so a service fault on the requested
parameters is retried with an ordered list of substitutes:

1. the requested token and amount;
2. the alternate token (``USDC`` and ``SOL`` swap, anything else becomes ``USDC``);
3. the requested token with ``max(0.1, amount / 10)``, only when ``amount > 0.1``.

Only the token symbol or the amount is ever substituted, never the account or the
destination, and the substitution is returned so the user can be told about it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from action_codes_api import CodeNotFoundError
from signing_flow.construction import TransferServiceError, format_amount
from signing_flow.errors import ConstructionError, ResolutionError

if TYPE_CHECKING:
    from action_codes_api import Client
    from signing_flow.construction import TransferService
    from signing_flow.sessions import MessageIntent, TransferIntent

logger = logging.getLogger("signing_flow.builder")

MIN_REDUCED_AMOUNT = Decimal("0.1")
AMOUNT_REDUCTION_FACTOR = 10
PRIMARY_TOKEN = "USDC"
SECONDARY_TOKEN = "SOL"


class Substitution(str, Enum):
    """What a fallback variant changed relative to the requested transfer."""

    TOKEN = "token"
    AMOUNT = "amount"


@dataclass(frozen=True)
class ConstructionVariant:
    """One set of parameters to try against the construction service."""

    token: str
    amount: Decimal
    substitution: Substitution | None = None


@dataclass(frozen=True)
class TransferArtifact:
    """Transaction attached to a code, with the parameters that produced it."""

    code: str
    account: str
    variant: ConstructionVariant
    transaction: str

    @property
    def substitution_note(self) -> str | None:
        """Describe the substitution for the user, or None for the requested parameters."""
        if self.variant.substitution is Substitution.TOKEN:
            return f"Token was changed to {self.variant.token} due to API limitations."
        if self.variant.substitution is Substitution.AMOUNT:
            return f"Amount was adjusted to {format_amount(self.variant.amount)} {self.variant.token} due to API limitations."
        return None


def alternate_token(token: str) -> str:
    """Return the one-for-one token substitute."""
    return SECONDARY_TOKEN if token == PRIMARY_TOKEN else PRIMARY_TOKEN


def construction_variants(intent: TransferIntent) -> list[ConstructionVariant]:
    """Return the ordered attempts for a transfer, requested parameters first."""
    variants = [
        ConstructionVariant(token=intent.token, amount=intent.amount),
        ConstructionVariant(token=alternate_token(intent.token), amount=intent.amount, substitution=Substitution.TOKEN),
    ]
    if intent.amount > MIN_REDUCED_AMOUNT:
        reduced = max(MIN_REDUCED_AMOUNT, intent.amount / AMOUNT_REDUCTION_FACTOR)
        variants.append(ConstructionVariant(token=intent.token, amount=reduced, substitution=Substitution.AMOUNT))
    return variants


class ArtifactBuilder:
    """Builds and attaches the signable artifact for a bound code."""

    def __init__(self, action_codes: Client, transfers: TransferService) -> None:
        self._action_codes = action_codes
        self._transfers = transfers

    async def attach_message(self, code: str, intent: MessageIntent) -> None:
        """Attach the staged message to the code; failures propagate unchanged."""
        await asyncio.to_thread(self._action_codes.attach_message, code, intent.text)

    async def build_transfer(self, code: str, intent: TransferIntent) -> TransferArtifact:
        """Resolve the code, build a transaction and attach it to the code.

        Raises:
            ResolutionError: If the code does not resolve to an account.
            ConstructionError: If every variant failed, or a failure was not a service fault.

        """
        try:
            resolved = await asyncio.to_thread(self._action_codes.resolve, code)
        except CodeNotFoundError as exc:
            raise ResolutionError(str(exc)) from exc
        account = resolved.account
        logger.info("Resolved action code %s to account %s", code, account)

        last_error: TransferServiceError | None = None
        for variant in construction_variants(intent):
            if variant.substitution is not None:
                logger.info(
                    "Retrying transfer construction with %s substitution: token=%s amount=%s",
                    variant.substitution.value,
                    variant.token,
                    variant.amount,
                )
            try:
                transaction = await asyncio.to_thread(
                    self._transfers.build_transfer,
                    variant.token,
                    intent.destination,
                    variant.amount,
                    account,
                )
            except TransferServiceError as exc:
                last_error = exc
                if not exc.is_service_fault:
                    raise ConstructionError(
                        f"Transfer API error: {exc}",
                        status_code=exc.status_code,
                        detail=exc.detail,
                    ) from exc
                logger.warning("Transfer API service fault for token=%s amount=%s: %s", variant.token, variant.amount, exc)
                continue

            await asyncio.to_thread(self._action_codes.attach_transaction, code, transaction)
            return TransferArtifact(code=code, account=account, variant=variant, transaction=transaction)

        if last_error is None:
            msg = f"No construction variants for code {code}"
            raise ConstructionError(msg)
        raise ConstructionError(
            f"Transfer API error: {last_error}",
            status_code=last_error.status_code,
            detail=last_error.detail,
        ) from last_error
