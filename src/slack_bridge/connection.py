"""
Slack connection — Web API session shared by the dispatch handlers and the
directory pass-through calls.
"""

import logging
from typing import Any, Optional

import httpx

from slack_bridge.config import SlackConfig
from slack_bridge.errors import ConnectionError, SlackBridgeError
from slack_bridge.transport.http import HttpClient

logger = logging.getLogger("slack_bridge.connection")


class SlackConnection:
    def __init__(self, config: SlackConfig, http: Optional[HttpClient] = None):
        self._config = config
        self._http = http or HttpClient(token=config.token)
        self._connected = False
        self._self: dict[str, Any] = {}
        self._team: dict[str, Any] = {}
        self._users: list[dict[str, Any]] = []
        self._channels: list[dict[str, Any]] = []

    @property
    def config(self) -> SlackConfig:
        return self._config

    def is_connected(self) -> bool:
        return self._connected

    def set_config(self, config: SlackConfig) -> None:
        self._config = config
        self._http.set_token(config.token)
        self._connected = False

    async def connect(self, host: Any = None) -> None:
        """Authenticate and load the workspace directory.

        ``host`` is the bot host requesting the connection; only the Web API
        session is managed here.
        """
        if not self._config.token:
            raise ConnectionError("No Slack token configured. Set SLACK_BOT_TOKEN or SLACK_API_TOKEN.")
        self._connected = False
        try:
            auth = await self._http.post("auth.test")
            self._self = {"id": auth.get("user_id"), "name": auth.get("user"), "team_id": auth.get("team_id")}
            self._team = (await self._http.get("team.info")).get("team", {})
            self._users = (await self._http.get("users.list")).get("members", [])
            self._channels = await self._list_channels()
        except (SlackBridgeError, httpx.HTTPError) as e:
            logger.error("Slack connection failed: %s", e)
            raise ConnectionError(f"Failed to connect to Slack: {e}") from e
        self._connected = True
        logger.info("Connected to Slack team %s as %s", self._team.get("name"), self._self.get("name"))

    async def _list_channels(self) -> list[dict[str, Any]]:
        result = await self._http.get("conversations.list", {"exclude_archived": "true"})
        return result.get("channels", [])

    async def get_user_profile(self, user_id: str) -> dict[str, Any]:
        result = await self._http.get("users.info", {"user": user_id})
        return result.get("user", {})

    async def get_users(self) -> list[dict[str, Any]]:
        if not self._users:
            self._users = (await self._http.get("users.list")).get("members", [])
        return self._users

    async def get_channels(self) -> list[dict[str, Any]]:
        self._channels = await self._list_channels()
        return self._channels

    async def get_team(self) -> dict[str, Any]:
        if not self._team:
            self._team = (await self._http.get("team.info")).get("team", {})
        return self._team

    async def get_data(self) -> dict[str, Any]:
        return {
            "self": self._self,
            "team": self._team,
            "users": self._users,
            "channels": self._channels,
        }

    # Delivery — one call per outgoing message type

    async def send_text(self, channel_id: str, text: str, options: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self._http.post("chat.postMessage", {**(options or {}), "channel": channel_id, "text": text})

    async def send_attachments(
        self, channel_id: str, attachments: list[dict[str, Any]], options: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        return await self._http.post(
            "chat.postMessage", {**(options or {}), "channel": channel_id, "attachments": attachments},
        )

    async def update_text(
        self, channel_id: str, ts: str, text: str, options: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        return await self._http.post("chat.update", {**(options or {}), "channel": channel_id, "ts": ts, "text": text})

    async def update_attachments(
        self, channel_id: str, ts: str, attachments: list[dict[str, Any]], options: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        return await self._http.post(
            "chat.update", {**(options or {}), "channel": channel_id, "ts": ts, "attachments": attachments},
        )

    async def delete_text(self, channel_id: str, ts: str, options: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self._http.post("chat.delete", {**(options or {}), "channel": channel_id, "ts": ts})

    async def add_reaction(self, name: str, channel_id: str, ts: str) -> dict[str, Any]:
        return await self._http.post("reactions.add", {"name": name, "channel": channel_id, "timestamp": ts})

    async def remove_reaction(self, name: str, channel_id: str, ts: str) -> dict[str, Any]:
        return await self._http.post("reactions.remove", {"name": name, "channel": channel_id, "timestamp": ts})

    async def close(self) -> None:
        self._connected = False
        await self._http.close()
