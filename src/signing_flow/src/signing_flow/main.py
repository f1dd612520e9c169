"""FastAPI service for the action code signing flow.

Routes incoming listener events to the flow orchestrator, collects every reply the flow
produces for the message, and exposes a health endpoint.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI

import action_codes_api
import action_codes_client_impl  # noqa: F401  # registers the HTTP action codes client
from signing_flow.construction import DialectTransferService
from signing_flow.flow import FlowOrchestrator
from signing_flow.models import FlowReply, IncomingMessage

load_dotenv()

app = FastAPI(title="Signing Flow Service", version="0.1.0")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("signing_flow")

STATUS_POLL_INTERVAL_SECONDS = float(os.environ.get("STATUS_POLL_INTERVAL_SECONDS", "2"))
STATUS_TIMEOUT_SECONDS = float(os.environ.get("STATUS_TIMEOUT_SECONDS", "120"))

_ORCHESTRATOR: FlowOrchestrator | None = None


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_orchestrator() -> FlowOrchestrator:
    """Return the process-wide orchestrator, building it on first use."""
    global _ORCHESTRATOR  # noqa: PLW0603
    if _ORCHESTRATOR is None:
        _ORCHESTRATOR = FlowOrchestrator(
            action_codes_api.get_client(),
            DialectTransferService(),
            poll_interval=STATUS_POLL_INTERVAL_SECONDS,
            poll_timeout=STATUS_TIMEOUT_SECONDS,
        )
    return _ORCHESTRATOR


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict[str, str]:
    """Return a basic health payload."""
    return {"status": "ok"}


@app.post("/events/message", response_model=FlowReply)
async def handle_message(
    incoming_message: IncomingMessage,
    orchestrator: FlowOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> FlowReply:
    """Handle an inbound chat message from a listener."""
    logger.info("User message from %s: %s", incoming_message.user_id, incoming_message.content)
    reply = FlowReply()

    async def notify(text: str) -> None:
        logger.info("Reply to %s: %s", incoming_message.user_id, text)
        reply.replies.append(text)

    await orchestrator.handle(incoming_message.user_id, incoming_message.content, notify)
    return reply
