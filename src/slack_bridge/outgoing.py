"""
Per-type delivery handlers. Each reports the pipeline outcome through
``proceed`` and returns (or raises) the delivery outcome.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from slack_bridge.connection import SlackConnection
from slack_bridge.models.message import OutgoingMessage

logger = logging.getLogger("slack_bridge.outgoing")


def _report(proceed: Callable[..., None], error: Optional[BaseException] = None) -> None:
    # A failing continuation must not change the delivery outcome.
    try:
        proceed(error)
    except Exception:
        logger.exception("Outgoing pipeline continuation failed")


async def _deliver(proceed: Callable[..., None], call: Awaitable[Any]) -> Any:
    try:
        result = await call
    except Exception as e:
        _report(proceed, e)
        raise
    _report(proceed)
    return result


async def handle_text(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(proceed, slack.send_text(raw["channel_id"], raw["text"], raw.get("options")))


async def handle_attachments(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(proceed, slack.send_attachments(raw["channel_id"], raw["attachments"], raw.get("options")))


async def handle_update_text(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(proceed, slack.update_text(raw["channel_id"], raw["ts"], raw["text"], raw.get("options")))


async def handle_update_attachments(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(
        proceed, slack.update_attachments(raw["channel_id"], raw["ts"], raw["attachments"], raw.get("options")),
    )


async def handle_delete_text(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(proceed, slack.delete_text(raw["channel_id"], raw["ts"], raw.get("options")))


async def handle_reaction_add(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(proceed, slack.add_reaction(raw["name"], raw["channel_id"], raw["ts"]))


async def handle_reaction_remove(message: OutgoingMessage, proceed: Callable[..., None], slack: SlackConnection) -> Any:
    raw = message.raw
    return await _deliver(proceed, slack.remove_reaction(raw["name"], raw["channel_id"], raw["ts"]))
