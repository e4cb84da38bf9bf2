"""
Slack Web API HTTP client.
"""

from typing import Any, Optional

import httpx

from slack_bridge.errors import SlackAPIError, SlackBridgeError

DEFAULT_BASE_URL = "https://slack.com/api"


class HttpClient:
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "slack-bridge/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _unwrap(method: str, json_data: Any) -> dict[str, Any]:
        """Slack answers HTTP 200 with ``{"ok": false, "error": "..."}`` on API errors."""
        if not isinstance(json_data, dict):
            raise SlackAPIError(f"{method}: unexpected response {json_data!r}", code="invalid_response")
        if not json_data.get("ok", False):
            error = json_data.get("error", "unknown_error")
            raise SlackAPIError(f"{method}: {error}", code=error, details=json_data)
        return json_data

    def _check(self, method: str, resp: httpx.Response) -> dict[str, Any]:
        if resp.status_code >= 400:
            raise SlackBridgeError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}")
        return self._unwrap(method, resp.json())

    async def get(self, method: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        resp = await self._client.get(f"/{method}", params=params, headers=self._auth_headers())
        return self._check(method, resp)

    async def post(self, method: str, body: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        headers = self._auth_headers()
        headers["Content-Type"] = "application/json; charset=utf-8"
        resp = await self._client.post(f"/{method}", json=body or {}, headers=headers)
        return self._check(method, resp)

    async def close(self) -> None:
        await self._client.aclose()
