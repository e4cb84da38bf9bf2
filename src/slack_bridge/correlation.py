"""
Pending-correlation table — links a stamped outgoing message to the caller
awaiting its delivery.

Entries live on a single event loop. Every operation runs to completion
without awaiting, so register/settle for one identifier cannot interleave.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from slack_bridge.errors import DuplicateIdentifierError, SlackBridgeError
from slack_bridge.models.message import OutgoingMessage, Outcome, PendingEntry

logger = logging.getLogger("slack_bridge.correlation")


class CorrelationTable:
    def __init__(self) -> None:
        self._pending: dict[str, PendingEntry] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._pending

    def has(self, identifier: str) -> bool:
        return identifier in self._pending

    def pending_ids(self) -> list[str]:
        return list(self._pending)

    def register(
        self,
        identifier: str,
        resolve: Callable[[Any], None],
        reject: Callable[[BaseException], None],
        message: Optional[OutgoingMessage] = None,
    ) -> None:
        if identifier in self._pending:
            raise DuplicateIdentifierError(identifier)
        self._pending[identifier] = PendingEntry(resolve, reject, message)
        logger.debug("Registered pending send %s", identifier)

    def settle(self, identifier: Optional[str], outcome: Outcome) -> bool:
        """Resolve or reject the entry for ``identifier`` and drop it.

        Returns False (and does nothing) when no entry is pending, including
        when the identifier was already settled.
        """
        if identifier is None:
            return False
        entry = self._pending.pop(identifier, None)
        if entry is None:
            return False
        logger.debug("Settling %s with %r", identifier, outcome)
        if outcome.ok:
            entry.resolve(outcome.value)
        else:
            entry.reject(outcome.error)  # type: ignore[arg-type]
        return True

    def track(self, message: OutgoingMessage) -> "asyncio.Future[Any]":
        """Register a future-backed entry for a stamped message."""
        if message.identifier is None:
            raise SlackBridgeError("not_stamped", f"Cannot track unstamped {message.type} message")
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

        def resolve(value: Any) -> None:
            if not future.done():
                future.set_result(value)

        def reject(error: BaseException) -> None:
            if not future.done():
                future.set_exception(error)

        self.register(message.identifier, resolve, reject, message)
        return future
