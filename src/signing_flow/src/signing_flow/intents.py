"""Intent collection and action code binding."""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation

from signing_flow.errors import FormatError, InvalidAmountError, InvalidCodeFormatError
from signing_flow.sessions import (
    AwaitingCode,
    CollectingIntent,
    IntentKind,
    MessageIntent,
    Processing,
    TransferIntent,
)

logger = logging.getLogger("signing_flow.intents")

CODE_PATTERN = re.compile(r"[0-9]{8}")
TRANSFER_PARAM_COUNT = 3


# ---------------------------------------------------------------------------
# Intent collection
# ---------------------------------------------------------------------------


def collect_message(session: CollectingIntent, text: str) -> AwaitingCode:
    """Stage a message to sign and move on to the code step."""
    _require_kind(session, IntentKind.MESSAGE)
    return AwaitingCode(intent=MessageIntent(text=text))


def parse_transfer_params(text: str) -> TransferIntent:
    """Parse ``<token> <to_address> <amount>`` into a transfer intent.

    Raises:
        FormatError: If the text does not hold exactly three whitespace-separated parts.
        InvalidAmountError: If the amount is not a positive finite number.

    """
    parts = text.split()
    if len(parts) != TRANSFER_PARAM_COUNT:
        msg = f"Expected <token> <to_address> <amount>, got {len(parts)} part(s)"
        raise FormatError(msg)

    token, destination, raw_amount = parts
    if not raw_amount.isascii() or "_" in raw_amount:
        msg = f"Amount must be plain ASCII decimal notation: {raw_amount}"
        raise InvalidAmountError(msg)
    try:
        amount = Decimal(raw_amount)
    except InvalidOperation as exc:
        msg = f"Amount is not a number: {raw_amount}"
        raise InvalidAmountError(msg) from exc
    if not amount.is_finite() or amount <= 0:
        msg = f"Amount must be a positive number: {raw_amount}"
        raise InvalidAmountError(msg)

    logger.info("Parsed transfer parameters: token=%s to=%s amount=%s", token, destination, amount)
    return TransferIntent(token=token, destination=destination, amount=amount)


def collect_transfer(session: CollectingIntent, text: str) -> AwaitingCode:
    """Stage transfer parameters and move on to the code step."""
    _require_kind(session, IntentKind.TRANSFER)
    return AwaitingCode(intent=parse_transfer_params(text))


# ---------------------------------------------------------------------------
# Code binding
# ---------------------------------------------------------------------------


def bind_code(session: AwaitingCode, text: str) -> Processing:
    """Bind an 8-digit action code to the staged intent.

    Raises:
        InvalidCodeFormatError: If the text is not exactly 8 digits.

    """
    code = text.strip()
    if not CODE_PATTERN.fullmatch(code):
        msg = "Action code must be exactly 8 digits"
        raise InvalidCodeFormatError(msg)
    return Processing(intent=session.intent, code=code)


def _require_kind(session: CollectingIntent, kind: IntentKind) -> None:
    if session.kind is not kind:
        msg = f"Session is collecting a {session.kind.value} intent, not a {kind.value} intent"
        raise ValueError(msg)
