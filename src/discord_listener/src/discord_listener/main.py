"""Discord front end for the signing flow service.

Slash commands and direct messages are relayed to ``POST /events/message``; every reply the
service returns is posted back, split to fit Discord's message limit.
"""

import asyncio
import logging
import os

import discord
import requests
from discord import app_commands
from dotenv import load_dotenv
from signing_flow.models import FlowReply, IncomingMessage

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("discord_listener")


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise RuntimeError(f"{name} is required.")  # noqa: TRY003, EM102
    return value


DISCORD_BOT_TOKEN = _require_env("DISCORD_BOT_TOKEN")
PUBLIC_BASE_URL = _require_env("PUBLIC_BASE_URL")
EVENTS_URL = f"{PUBLIC_BASE_URL.rstrip('/')}/events/message"
# Must exceed STATUS_TIMEOUT_SECONDS: a code submission blocks for the whole status observation.
SERVICE_TIMEOUT_SECONDS = float(os.environ.get("ORCHESTRATOR_TIMEOUT_SECONDS", "180"))
MESSAGE_LIMIT = 2000
SERVICE_UNAVAILABLE_REPLY = "❌ The signing service is unavailable right now. Please try again later."

intents = discord.Intents.default()
intents.message_content = True
client = discord.Client(intents=intents)
tree = app_commands.CommandTree(client)


# ---------------------------------------------------------------------------
# Service calls
# ---------------------------------------------------------------------------


def _split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split ``text`` into Discord-sized pieces, cutting at the last line break or space."""
    pieces: list[str] = []
    rest = text
    while len(rest) > limit:
        cut = max(rest.rfind("\n", 0, limit), rest.rfind(" ", 0, limit))
        if cut <= 0:
            cut = limit
        pieces.append(rest[:cut].rstrip())
        rest = rest[cut:].lstrip()
    if rest:
        pieces.append(rest)
    return pieces


def _post_event(url: str, event: IncomingMessage, *, timeout_seconds: float = SERVICE_TIMEOUT_SECONDS) -> FlowReply:
    response = requests.post(url, json=event.model_dump(), timeout=timeout_seconds)
    response.raise_for_status()
    return FlowReply.model_validate(response.json())


async def _relay(event: IncomingMessage) -> list[str]:
    """Send one chat event to the service off the event loop and return its replies."""
    try:
        reply = await asyncio.to_thread(_post_event, EVENTS_URL, event)
    except Exception:
        logger.exception("Signing flow service call failed for user %s", event.user_id)
        return [SERVICE_UNAVAILABLE_REPLY]
    return reply.replies


async def _answer_command(interaction: discord.Interaction, command: str) -> None:
    event = IncomingMessage(
        provider="discord",
        channel_id=str(interaction.channel_id),
        user_id=str(interaction.user.id),
        content=command,
    )
    pieces = _split_message("\n\n".join(await _relay(event)))
    if not pieces:
        return
    first, *rest = pieces
    await interaction.response.send_message(first)
    for piece in rest:
        await interaction.followup.send(piece)


# ---------------------------------------------------------------------------
# Slash Commands
# ---------------------------------------------------------------------------


@tree.command(name="start", description="Show what this bot can do.")
async def start_command(interaction: discord.Interaction) -> None:
    await _answer_command(interaction, "/start")


@tree.command(name="message", description="Sign a message with an action code.")
async def message_command(interaction: discord.Interaction) -> None:
    """Begin signing a message; the next DM is taken as the text."""
    await _answer_command(interaction, "/message")


@tree.command(name="transfer", description="Sign a token transfer with an action code.")
async def transfer_command(interaction: discord.Interaction) -> None:
    """Begin a transfer; the next DM is taken as ``<token> <to_address> <amount>``."""
    await _answer_command(interaction, "/transfer")


# ---------------------------------------------------------------------------
# Event Handlers
# ---------------------------------------------------------------------------


@client.event
async def on_ready() -> None:
    logger.info("Signing bot connected as %s", client.user)
    try:
        await tree.sync()
    except Exception:
        logger.exception("Slash command sync failed")


@client.event
async def on_message(message: discord.Message) -> None:
    """Relay a user's direct message and post each reply in order."""
    if message.author.bot or not isinstance(message.channel, discord.DMChannel):
        return
    content = (message.content or "").strip()
    if not content:
        return

    event = IncomingMessage(
        provider="discord",
        channel_id=str(message.channel.id),
        user_id=str(message.author.id),
        content=content,
        message_id=str(message.id),
    )
    for reply in await _relay(event):
        for piece in _split_message(reply):
            await message.channel.send(piece)


def main() -> None:
    client.run(DISCORD_BOT_TOKEN)


if __name__ == "__main__":
    main()
