"""
Outgoing dispatch stage — one stage of the host's outgoing middleware chain.

Two independent outcome channels per message:
- pipeline: the ``proceed(error?)`` continuation handed in by the host
- correlation: ``CorrelationTable.settle`` for the message identifier
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from pydantic import ValidationError

from slack_bridge.correlation import CorrelationTable
from slack_bridge.errors import SlackBridgeError, UnsupportedMessageTypeError
from slack_bridge.models.message import OutgoingMessage, Outcome

logger = logging.getLogger("slack_bridge.pipeline")

Proceed = Callable[..., None]
Handler = Callable[[OutgoingMessage, Proceed, Any], Awaitable[Any]]


def _platform_of(event: Any) -> Optional[str]:
    if isinstance(event, dict):
        return event.get("platform")
    return getattr(event, "platform", None)


class OutgoingDispatcher:
    def __init__(
        self,
        platform: str,
        handlers: Mapping[str, Handler],
        correlations: CorrelationTable,
        connection_provider: Callable[[], Any],
    ):
        self._platform = platform
        self._handlers = dict(handlers)
        self._correlations = correlations
        self._connection_provider = connection_provider
        self._tasks: set["asyncio.Task[Any]"] = set()

    @property
    def platform(self) -> str:
        return self._platform

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def supports(self, type: str) -> bool:
        return type in self._handlers

    def process(self, event: Any, proceed: Proceed) -> None:
        """Middleware entry point: ``handler(event, next)``.

        ``event`` is any host event; only those tagged for this platform are
        read as an ``OutgoingMessage``.
        """
        if _platform_of(event) != self._platform:
            proceed()
            return

        try:
            message = event if isinstance(event, OutgoingMessage) else OutgoingMessage.model_validate(event)
        except ValidationError as e:
            proceed(SlackBridgeError("invalid_message", f"Malformed {self._platform} event: {e}"))
            return

        handler = self._handlers.get(message.type)
        if handler is None:
            error = UnsupportedMessageTypeError(message.type)
            logger.warning("Dropping %s message %s: %s", self._platform, message.identifier, error)
            # The caller is released before the host hears about the failure.
            self._correlations.settle(message.identifier, Outcome.failure(error))
            proceed(error)
            return

        # Connection is resolved per invocation; replacing it only affects later sends.
        connection = self._connection_provider()
        task = asyncio.ensure_future(handler(message, self._stage_proceed(message, proceed), connection))
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_handler_done(message, t))

    def _stage_proceed(self, message: OutgoingMessage, proceed: Proceed) -> Proceed:
        # Terminal stage: success ends the chain here, failures are reported upstream.
        called = False

        def stage_proceed(error: Optional[BaseException] = None) -> None:
            nonlocal called
            if called:
                logger.warning("proceed() called more than once for message %s", message.identifier)
                return
            called = True
            if error is not None:
                proceed(error)
            else:
                logger.debug("Sent %s message %s", message.type, message.identifier)

        return stage_proceed

    def _on_handler_done(self, message: OutgoingMessage, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            outcome = Outcome.failure(SlackBridgeError("cancelled", f"Delivery of {message.identifier} was cancelled"))
        elif task.exception() is not None:
            error = task.exception()
            logger.error("Failed to send %s message %s: %s", message.type, message.identifier, error)
            outcome = Outcome.failure(error)  # type: ignore[arg-type]
        else:
            outcome = Outcome.success(task.result())
        self._correlations.settle(message.identifier, outcome)

    async def drain(self) -> None:
        """Wait for every in-flight handler to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
