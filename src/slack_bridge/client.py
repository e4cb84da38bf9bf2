"""
SlackIntegration — plugs into a bot host's outgoing pipeline and exposes
awaitable send operations whose result is the Slack API delivery outcome.
"""

import logging
from typing import Any, Optional

from slack_bridge import actions
from slack_bridge.config import SlackConfig
from slack_bridge.connection import SlackConnection
from slack_bridge.correlation import CorrelationTable
from slack_bridge.errors import SlackBridgeError, UnsupportedMessageTypeError
from slack_bridge.middleware import Middleware
from slack_bridge.models.message import PLATFORM, stamp
from slack_bridge.pipeline import OutgoingDispatcher
from slack_bridge.registry import MESSAGE_KINDS, handler_table

logger = logging.getLogger("slack_bridge.client")

MIDDLEWARE_NAME = "slack.sendMessages"
MIDDLEWARE_ORDER = 100


class SlackIntegration:
    """Slack integration for a bot host (primary)."""

    create_text = staticmethod(actions.create_text)
    create_attachments = staticmethod(actions.create_attachments)
    create_update_text = staticmethod(actions.create_update_text)
    create_update_attachments = staticmethod(actions.create_update_attachments)
    create_delete_text = staticmethod(actions.create_delete_text)
    create_reaction_add = staticmethod(actions.create_reaction_add)
    create_reaction_remove = staticmethod(actions.create_reaction_remove)

    def __init__(
        self,
        config: Optional[SlackConfig] = None,
        connection: Optional[Any] = None,
        correlations: Optional[CorrelationTable] = None,
    ):
        self._config = config or SlackConfig()
        self.connection = connection or SlackConnection(self._config)
        self.correlations = correlations or CorrelationTable()
        self.dispatcher = OutgoingDispatcher(
            platform=PLATFORM,
            handlers=handler_table(),
            correlations=self.correlations,
            connection_provider=lambda: self.connection,
        )
        self._host: Any = None

    @property
    def config(self) -> SlackConfig:
        return self._config

    def init(self, host: Any) -> None:
        """Register the outgoing dispatch stage on ``host.middlewares``."""
        host.middlewares.register(Middleware(
            name=MIDDLEWARE_NAME,
            type="outgoing",
            order=MIDDLEWARE_ORDER,
            handler=self.dispatcher.process,
            module="slack-bridge",
            description="Sends out messages that targets platform = slack."
                        " This middleware should be placed at the end as it swallows events once sent.",
        ))
        self._host = host

    async def ready(self) -> None:
        await self.connection.connect(self._host)

    async def send(self, kind: str, *args: Any, **kwargs: Any) -> Any:
        """Build a ``kind`` message, push it through the outgoing pipeline and
        wait for the Slack API result.

        Raises whatever the delivery handler raised, or
        ``UnsupportedMessageTypeError`` if the dispatch stage rejects the type.
        """
        if self._host is None:
            raise SlackBridgeError("not_initialized", "Call init(host) before sending.")
        message_kind = MESSAGE_KINDS.get(kind)
        if message_kind is None:
            raise UnsupportedMessageTypeError(kind)

        message = stamp(message_kind.builder(*args, **kwargs))
        pending = self.correlations.track(message)
        self._host.middlewares.send_outgoing(message)
        return await pending

    async def send_text(self, channel_id: str, text: str, options: Optional[dict[str, Any]] = None) -> Any:
        return await self.send("text", channel_id, text, options)

    async def send_attachments(
        self, channel_id: str, attachments: list[dict[str, Any]], options: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.send("attachments", channel_id, attachments, options)

    async def send_update_text(
        self, channel_id: str, ts: str, text: str, options: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.send("update_text", channel_id, ts, text, options)

    async def send_update_attachments(
        self, channel_id: str, ts: str, attachments: list[dict[str, Any]], options: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.send("update_attachments", channel_id, ts, attachments, options)

    async def send_delete_text(self, channel_id: str, ts: str, options: Optional[dict[str, Any]] = None) -> Any:
        return await self.send("delete_text", channel_id, ts, options)

    async def send_reaction_add(self, name: str, channel_id: str, ts: str) -> Any:
        return await self.send("reaction_add", name, channel_id, ts)

    async def send_reaction_remove(self, name: str, channel_id: str, ts: str) -> Any:
        return await self.send("reaction_remove", name, channel_id, ts)

    async def get_user_profile(self, user_id: str) -> dict[str, Any]:
        return await self.connection.get_user_profile(user_id)

    async def get_users(self) -> list[dict[str, Any]]:
        return await self.connection.get_users()

    async def get_channels(self) -> list[dict[str, Any]]:
        return await self.connection.get_channels()

    async def get_team(self) -> dict[str, Any]:
        return await self.connection.get_team()

    async def get_data(self) -> dict[str, Any]:
        return await self.connection.get_data()

    def status(self) -> dict[str, Any]:
        return {"connected": self.connection.is_connected()}

    async def set_config_and_restart(self, config: SlackConfig) -> None:
        """Apply new settings and reconnect.

        The connection object and its HTTP client are reused: requests already
        on the wire finish with the old token, later ones use the new token.
        Pending correlations are untouched.
        """
        self._config = config
        self.connection.set_config(config)
        await self.connection.connect(self._host)

    async def close(self) -> None:
        await self.dispatcher.drain()
        if len(self.correlations):
            logger.warning("Closing with %d unsettled sends", len(self.correlations))
        await self.connection.close()
