"""
Host middleware registry — the ordered incoming/outgoing chains a bot host
runs every event through.

A stage is ``handler(event, next)``. ``next()`` hands the event to the
following stage, ``next(error)`` aborts the chain; a stage that never calls
``next`` swallows the event.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel

logger = logging.getLogger("slack_bridge.middleware")

ErrorListener = Callable[["Middleware", Any, BaseException], None]


class Middleware(BaseModel):
    name: str
    type: Literal["incoming", "outgoing"]
    order: int = 0
    handler: Callable[..., Any]
    module: Optional[str] = None
    description: Optional[str] = None


class MiddlewareRegistry:
    def __init__(self) -> None:
        self._middlewares: list[Middleware] = []
        self._error_listeners: list[ErrorListener] = []

    def register(self, middleware: Middleware) -> None:
        if any(m.name == middleware.name for m in self._middlewares):
            raise ValueError(f"Middleware already registered: {middleware.name}")
        self._middlewares.append(middleware)
        self._middlewares.sort(key=lambda m: m.order)
        logger.debug("Registered %s middleware %s (order %d)", middleware.type, middleware.name, middleware.order)

    def list(self, type: Optional[str] = None) -> list[Middleware]:
        return [m for m in self._middlewares if type is None or m.type == type]

    def add_error_listener(self, listener: ErrorListener) -> Callable[[], None]:
        """Add a chain-failure listener. Returns a cleanup function."""
        self._error_listeners.append(listener)
        def remove() -> None:
            try:
                self._error_listeners.remove(listener)
            except ValueError:
                pass
        return remove

    def send_incoming(self, event: Any) -> None:
        self._schedule(self.list("incoming"), event)

    def send_outgoing(self, event: Any) -> None:
        """Push an event into the outgoing chain. Runs on the next loop iteration."""
        self._schedule(self.list("outgoing"), event)

    def _schedule(self, stages: list[Middleware], event: Any) -> None:
        asyncio.get_running_loop().call_soon(self._run, stages, 0, event)

    def _run(self, stages: list[Middleware], index: int, event: Any) -> None:
        if index >= len(stages):
            logger.debug("Event reached the end of the chain unhandled: %r", event)
            return
        stage = stages[index]
        called = False

        def next_(error: Optional[BaseException] = None) -> None:
            nonlocal called
            if called:
                logger.warning("Middleware %s called next() more than once", stage.name)
                return
            called = True
            if error is not None:
                self._fail(stage, event, error)
                return
            self._run(stages, index + 1, event)

        try:
            stage.handler(event, next_)
        except Exception as e:
            if called:
                logger.exception("Chain failed after middleware %s", stage.name)
            else:
                next_(e)

    def _fail(self, stage: Middleware, event: Any, error: BaseException) -> None:
        logger.error("Middleware %s failed: %s", stage.name, error)
        for listener in list(self._error_listeners):
            try:
                listener(stage, event, error)
            except Exception:
                logger.exception("Error listener failed for middleware %s", stage.name)


class BotHost:
    """The slice of a bot host the integration plugs into."""

    def __init__(self, middlewares: Optional[MiddlewareRegistry] = None):
        self.middlewares = middlewares or MiddlewareRegistry()
