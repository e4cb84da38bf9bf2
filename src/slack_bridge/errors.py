"""
slack-bridge error types.
"""

from typing import Any, Optional


class SlackBridgeError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class UnsupportedMessageTypeError(SlackBridgeError):
    def __init__(self, type: str):
        super().__init__("unsupported_type", f"Unsupported event type: {type}", {"type": type})
        self.type = type


class DuplicateIdentifierError(SlackBridgeError):
    """Raised when a correlation is registered twice for the same message."""

    def __init__(self, identifier: str):
        super().__init__("duplicate_identifier", f"Identifier already pending: {identifier}")
        self.identifier = identifier


class SlackAPIError(SlackBridgeError):
    def __init__(self, message: str, code: str = "slack_api_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ConnectionError(SlackBridgeError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)
