"""
slack-bridge — Slack delivery stage for bot hosts.

Outgoing messages pass through the host's middleware pipeline and the
awaiting send call receives the Slack API result.
"""

from slack_bridge.client import SlackIntegration
from slack_bridge.config import SlackConfig
from slack_bridge.connection import SlackConnection
from slack_bridge.correlation import CorrelationTable
from slack_bridge.pipeline import OutgoingDispatcher
from slack_bridge.middleware import BotHost, Middleware, MiddlewareRegistry
from slack_bridge.models.message import OutgoingMessage, Outcome
from slack_bridge.errors import (
    SlackBridgeError,
    UnsupportedMessageTypeError,
    DuplicateIdentifierError,
    SlackAPIError,
    ConnectionError,
)

__version__ = "0.1.0"
__all__ = [
    "SlackIntegration",
    "SlackConfig",
    "SlackConnection",
    "CorrelationTable",
    "OutgoingDispatcher",
    "BotHost",
    "Middleware",
    "MiddlewareRegistry",
    "OutgoingMessage",
    "Outcome",
    "SlackBridgeError",
    "UnsupportedMessageTypeError",
    "DuplicateIdentifierError",
    "SlackAPIError",
    "ConnectionError",
]
