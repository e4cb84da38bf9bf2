"""
Message builders — turn call arguments into an unstamped outgoing message.
"""

from typing import Any, Optional

from slack_bridge.models.message import PLATFORM, OutgoingMessage


def _require_text(value: Any, name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")


def _require_list(value: Any, name: str) -> None:
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")


def create_text(channel_id: str, text: str, options: Optional[dict[str, Any]] = None) -> OutgoingMessage:
    _require_text(channel_id, "channel_id")
    _require_text(text, "text")
    return OutgoingMessage(
        platform=PLATFORM,
        type="text",
        text=text,
        raw={"channel_id": channel_id, "text": text, "options": options or {}},
    )


def create_attachments(
    channel_id: str, attachments: list[dict[str, Any]], options: Optional[dict[str, Any]] = None,
) -> OutgoingMessage:
    _require_text(channel_id, "channel_id")
    _require_list(attachments, "attachments")
    return OutgoingMessage(
        platform=PLATFORM,
        type="attachments",
        text="App sent an attachment",
        raw={"channel_id": channel_id, "attachments": attachments, "options": options or {}},
    )


def create_update_text(
    channel_id: str, ts: str, text: str, options: Optional[dict[str, Any]] = None,
) -> OutgoingMessage:
    _require_text(channel_id, "channel_id")
    _require_text(ts, "ts")
    _require_text(text, "text")
    return OutgoingMessage(
        platform=PLATFORM,
        type="update_text",
        text=text,
        raw={"channel_id": channel_id, "ts": ts, "text": text, "options": options or {}},
    )


def create_update_attachments(
    channel_id: str, ts: str, attachments: list[dict[str, Any]], options: Optional[dict[str, Any]] = None,
) -> OutgoingMessage:
    _require_text(channel_id, "channel_id")
    _require_text(ts, "ts")
    _require_list(attachments, "attachments")
    return OutgoingMessage(
        platform=PLATFORM,
        type="update_attachments",
        text="App updated an attachment",
        raw={"channel_id": channel_id, "ts": ts, "attachments": attachments, "options": options or {}},
    )


def create_delete_text(channel_id: str, ts: str, options: Optional[dict[str, Any]] = None) -> OutgoingMessage:
    _require_text(channel_id, "channel_id")
    _require_text(ts, "ts")
    return OutgoingMessage(
        platform=PLATFORM,
        type="delete_text",
        text="App deleted a text",
        raw={"channel_id": channel_id, "ts": ts, "options": options or {}},
    )


def create_reaction_add(name: str, channel_id: str, ts: str) -> OutgoingMessage:
    _require_text(name, "name")
    _require_text(channel_id, "channel_id")
    _require_text(ts, "ts")
    return OutgoingMessage(
        platform=PLATFORM,
        type="reaction_add",
        text=f"App added a reaction :{name}:",
        raw={"name": name, "channel_id": channel_id, "ts": ts},
    )


def create_reaction_remove(name: str, channel_id: str, ts: str) -> OutgoingMessage:
    _require_text(name, "name")
    _require_text(channel_id, "channel_id")
    _require_text(ts, "ts")
    return OutgoingMessage(
        platform=PLATFORM,
        type="reaction_remove",
        text=f"App removed a reaction :{name}:",
        raw={"name": name, "channel_id": channel_id, "ts": ts},
    )
