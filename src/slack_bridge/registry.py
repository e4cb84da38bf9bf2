"""
Static table of supported outgoing message kinds: type tag -> builder + handler.
"""

from typing import Any, Callable, NamedTuple

from slack_bridge import actions, outgoing
from slack_bridge.models.message import OutgoingMessage


class MessageKind(NamedTuple):
    type: str
    builder: Callable[..., OutgoingMessage]
    handler: Callable[..., Any]


MESSAGE_KINDS: dict[str, MessageKind] = {
    kind.type: kind
    for kind in (
        MessageKind("text", actions.create_text, outgoing.handle_text),
        MessageKind("attachments", actions.create_attachments, outgoing.handle_attachments),
        MessageKind("update_text", actions.create_update_text, outgoing.handle_update_text),
        MessageKind("update_attachments", actions.create_update_attachments, outgoing.handle_update_attachments),
        MessageKind("delete_text", actions.create_delete_text, outgoing.handle_delete_text),
        MessageKind("reaction_add", actions.create_reaction_add, outgoing.handle_reaction_add),
        MessageKind("reaction_remove", actions.create_reaction_remove, outgoing.handle_reaction_remove),
    )
}


def handler_table() -> dict[str, Callable[..., Any]]:
    return {name: kind.handler for name, kind in MESSAGE_KINDS.items()}
