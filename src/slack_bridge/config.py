"""
Integration configuration — every setting can be overridden through a
``SLACK_*`` environment variable or a ``.env`` file.

    export SLACK_BOT_TOKEN=xoxb-...
    export SLACK_HOST=bot.example.com
"""

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCOPE = "admin,bot,chat:write:bot,commands,identify,incoming-webhook,channels:read"
SECRET_FIELDS = ("api_token", "bot_token", "client_secret", "verification_token")


class SlackConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SLACK_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_token: str = ""
    bot_token: str = ""
    client_id: str = ""
    client_secret: str = ""
    host: str = ""
    verification_token: str = ""
    scope: str = DEFAULT_SCOPE

    @property
    def token(self) -> str:
        """Token used for Web API calls: the bot token, else the API token."""
        return self.bot_token or self.api_token

    def redacted(self) -> dict[str, Any]:
        values = self.model_dump()
        for name in SECRET_FIELDS:
            if values[name]:
                values[name] = values[name][:4] + "…"
        return values
