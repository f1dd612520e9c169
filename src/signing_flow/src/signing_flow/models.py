"""Pydantic schemas for listener↔signing flow communication."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IncomingMessage(BaseModel):
    """Normalized incoming chat message."""

    provider: str
    channel_id: str
    user_id: str
    content: str
    message_id: str | None = None
    timestamp: str | None = None


class FlowReply(BaseModel):
    """Replies produced while handling one incoming message, in order."""

    replies: list[str] = Field(default_factory=list)
