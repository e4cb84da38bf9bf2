"""
Outgoing message model and the correlation outcome types.
"""

import uuid
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from slack_bridge.errors import SlackBridgeError

PLATFORM = "slack"


def new_message_id() -> str:
    return uuid.uuid4().hex


class OutgoingMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    platform: str = PLATFORM
    identifier: Optional[str] = Field(default=None, frozen=True)
    text: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)


def stamp(message: OutgoingMessage) -> OutgoingMessage:
    """Return a copy of ``message`` carrying a fresh identifier.

    A message is stamped once, before it enters the outgoing pipeline.
    """
    if message.identifier is not None:
        raise SlackBridgeError("already_stamped", f"Message already has identifier {message.identifier}")
    return message.model_copy(update={"identifier": new_message_id()})


class Outcome:
    __slots__ = ("ok", "value", "error")

    def __init__(self, ok: bool, value: Any = None, error: Optional[BaseException] = None):
        self.ok = ok
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(True, value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome":
        return cls(False, error=error)

    def __repr__(self) -> str:
        if self.ok:
            return f"Outcome.success({self.value!r})"
        return f"Outcome.failure({self.error!r})"


class PendingEntry:
    __slots__ = ("resolve", "reject", "message")

    def __init__(
        self,
        resolve: Callable[[Any], None],
        reject: Callable[[BaseException], None],
        message: Optional[OutgoingMessage] = None,
    ):
        self.resolve = resolve
        self.reject = reject
        self.message = message
