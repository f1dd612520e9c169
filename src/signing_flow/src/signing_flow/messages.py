"""User-facing chat texts."""

from __future__ import annotations

ACTION_CODE_SITE = "actioncode.app"
TRANSFER_EXAMPLE = "USDC 6tBUD4bQzNehG3hQVtVFaGxre2P8rQoH99pubRtgSbSb 100"

WELCOME = (
    "Welcome! This bot is an example of how to use Action Codes with chat.\n\n"
    "/message - sign a message\n/transfer - sign a token transfer"
)
ASK_MESSAGE = "Please enter a message to sign with Action Codes:"
ASK_TRANSFER_PARAMS = (
    "Please enter transfer parameters in this format:\n\n"
    f"<token> <to_address> <amount>\n\nExample: {TRANSFER_EXAMPLE}"
)
ASK_CODE = (
    "Please enter the 8-digit one-time action code:\n\n"
    f"Visit {ACTION_CODE_SITE} to get a one-time code and submit it here."
)
INVALID_FORMAT = f"❌ Invalid format. Please use: <token> <to_address> <amount>\n\nExample: {TRANSFER_EXAMPLE}"
INVALID_AMOUNT = "❌ Invalid amount. Please enter a valid positive number."
INVALID_CODE = "Please enter a valid 8-digit action code."

PROCESSING = f"⏳ Processing... Please confirm the action on {ACTION_CODE_SITE}"
PENDING_MESSAGE = f"⏳ Pending/Waiting for action completion...\n\nPlease complete the action on {ACTION_CODE_SITE}"

EXPIRED = "❌ Action code has expired. Please try again with a new code."
REMOTE_ERROR = "❌ Error processing the action code. Please make sure the code is valid and try again."
MESSAGE_TIMEOUT = "❌ Failed to get signed message. Please try again."
TRANSFER_TIMEOUT = "❌ Failed to get transaction signature. Please try again."


def transfer_params(token: str, destination: str, amount: str) -> str:
    return f"Transfer Parameters:\nToken: {token}\nTo: {destination}\nAmount: {amount}\n\n{ASK_CODE}"


def pending_transfer(note: str | None) -> str:
    text = "⏳ Pending/Waiting for transaction signature...\n\n"
    if note:
        text += f"{note}\n\n"
    return text + f"Please complete the action on {ACTION_CODE_SITE}"


def message_signed(signed_message: str) -> str:
    return f"✅ Message signed successfully!\n\nSigned Message: {signed_message}"


def transfer_signed(signature: str, note: str | None) -> str:
    text = f"✅ Transfer transaction signed successfully!\n\nTransaction Signature: {signature}"
    if note:
        text += f"\n\nNote: {note}"
    return text


def transfer_failed(detail: str) -> str:
    return f"❌ Error processing transfer: {detail}"
