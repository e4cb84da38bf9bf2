"""SlackIntegration end to end through the host pipeline, with a fake connection."""

import asyncio
from typing import Any, Optional

import pytest

from slack_bridge import BotHost, SlackConfig, SlackIntegration
from slack_bridge.errors import SlackBridgeError, UnsupportedMessageTypeError
from slack_bridge.middleware import Middleware
from slack_bridge.models.message import OutgoingMessage


class NetworkError(Exception):
    pass


class FakeSlack:
    def __init__(self, name: str = "fake", fail: Optional[BaseException] = None):
        self.name = name
        self.fail = fail
        self.sent: list[tuple[str, Any]] = []
        self.connected = False
        self.config: Optional[SlackConfig] = None
        self.closed = False

    def is_connected(self) -> bool:
        return self.connected

    async def connect(self, host: Any = None) -> None:
        self.connected = True

    def set_config(self, config: SlackConfig) -> None:
        self.config = config
        self.connected = False

    async def send_text(self, channel_id, text, options=None):
        await asyncio.sleep(0)
        if self.fail:
            raise self.fail
        self.sent.append(("text", (channel_id, text)))
        return {"ok": True, "ts": "123", "channel": channel_id, "via": self.name}

    async def add_reaction(self, name, channel_id, ts):
        self.sent.append(("reaction_add", (name, channel_id, ts)))
        return {"ok": True}

    async def get_users(self):
        return [{"id": "U1"}]

    async def get_user_profile(self, user_id):
        return {"id": user_id}

    async def get_channels(self):
        return [{"id": "C1"}]

    async def get_team(self):
        return {"id": "T1"}

    async def get_data(self):
        return {"team": {"id": "T1"}}

    async def close(self):
        self.closed = True


def make_integration(fake: Optional[FakeSlack] = None):
    host = BotHost()
    integration = SlackIntegration(SlackConfig(_env_file=None), connection=fake or FakeSlack())
    integration.init(host)
    return integration, host


def test_init_registers_terminal_outgoing_middleware():
    integration, host = make_integration()
    [middleware] = host.middlewares.list("outgoing")
    assert middleware.name == "slack.sendMessages"
    assert middleware.order == 100
    assert "swallows events" in middleware.description


@pytest.mark.asyncio
async def test_send_text_resolves_with_api_result():
    fake = FakeSlack()
    integration, _ = make_integration(fake)

    result = await integration.send_text("C1", "hello")

    assert result == {"ok": True, "ts": "123", "channel": "C1", "via": "fake"}
    assert fake.sent == [("text", ("C1", "hello"))]
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_send_text_rejects_with_delivery_error():
    error = NetworkError("timeout")
    integration, host = make_integration(FakeSlack(fail=error))
    stage_failures: list = []
    host.middlewares.add_error_listener(lambda mw, event, err: stage_failures.append(err))

    with pytest.raises(NetworkError) as exc:
        await integration.send_text("C1", "hello")

    assert exc.value is error
    assert stage_failures == [error]
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_concurrent_sends_get_their_own_results():
    fake = FakeSlack()
    integration, _ = make_integration(fake)

    results = await asyncio.gather(*(integration.send_text(f"C{i}", f"msg {i}") for i in range(10)))

    assert [r["channel"] for r in results] == [f"C{i}" for i in range(10)]
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_later_stages_never_see_slack_messages():
    integration, host = make_integration()
    seen: list = []
    host.middlewares.register(Middleware(
        name="after-slack", type="outgoing", order=200,
        handler=lambda event, next: (seen.append(event), next()),
    ))

    await integration.send_reaction_add("tada", "C1", "1.0")
    await asyncio.sleep(0)
    assert seen == []


@pytest.mark.asyncio
async def test_other_platform_events_flow_past_the_slack_stage():
    integration, host = make_integration()
    seen: list = []
    host.middlewares.register(Middleware(
        name="after-slack", type="outgoing", order=200,
        handler=lambda event, next: (seen.append(event), next()),
    ))
    event = OutgoingMessage(type="text", platform="other")

    host.middlewares.send_outgoing(event)
    for _ in range(3):
        await asyncio.sleep(0)

    assert seen == [event]
    assert integration.dispatcher.pending_tasks == 0
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_send_before_init_fails():
    integration = SlackIntegration(SlackConfig(_env_file=None), connection=FakeSlack())
    with pytest.raises(SlackBridgeError) as exc:
        await integration.send_text("C1", "hello")
    assert exc.value.code == "not_initialized"


@pytest.mark.asyncio
async def test_send_unknown_kind_fails_immediately():
    integration, _ = make_integration()
    with pytest.raises(UnsupportedMessageTypeError):
        await integration.send("carousel", "C1")
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_builder_errors_surface_before_registration():
    integration, _ = make_integration()
    with pytest.raises(ValueError):
        await integration.send_text("", "hello")
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_pass_through_and_status():
    integration, _ = make_integration()
    assert integration.status() == {"connected": False}
    await integration.ready()
    assert integration.status() == {"connected": True}

    assert await integration.get_users() == [{"id": "U1"}]
    assert await integration.get_user_profile("U9") == {"id": "U9"}
    assert await integration.get_channels() == [{"id": "C1"}]
    assert await integration.get_team() == {"id": "T1"}
    assert await integration.get_data() == {"team": {"id": "T1"}}


@pytest.mark.asyncio
async def test_set_config_and_restart_reconnects():
    fake = FakeSlack()
    integration, _ = make_integration(fake)
    new_config = SlackConfig(_env_file=None, bot_token="xoxb-new")

    await integration.set_config_and_restart(new_config)

    assert integration.config is new_config
    assert fake.config is new_config
    assert fake.connected


@pytest.mark.asyncio
async def test_swapped_connection_only_affects_new_sends():
    old, new = FakeSlack("old"), FakeSlack("new")
    integration, _ = make_integration(old)

    first = asyncio.ensure_future(integration.send_text("C1", "first"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    integration.connection = new
    second = await integration.send_text("C1", "second")

    assert (await first)["via"] == "old"
    assert second["via"] == "new"


@pytest.mark.asyncio
async def test_close_drains_and_closes_connection():
    fake = FakeSlack()
    integration, _ = make_integration(fake)
    await integration.send_text("C1", "bye")
    await integration.close()
    assert fake.closed


@pytest.mark.asyncio
async def test_foreign_dict_events_flow_past_the_slack_stage():
    integration, host = make_integration()
    seen: list = []
    failures: list = []
    host.middlewares.register(Middleware(
        name="after-slack", type="outgoing", order=200,
        handler=lambda event, next: (seen.append(event), next()),
    ))
    host.middlewares.add_error_listener(lambda mw, event, err: failures.append(err))
    event = {"platform": "messenger", "type": "text"}

    host.middlewares.send_outgoing(event)
    for _ in range(3):
        await asyncio.sleep(0)

    assert seen == [event]
    assert failures == []


@pytest.mark.asyncio
async def test_delivery_error_reaches_caller_when_error_listener_raises():
    error = NetworkError("timeout")
    integration, host = make_integration(FakeSlack(fail=error))

    def bad_listener(mw, event, err):
        raise RuntimeError("listener broke")

    host.middlewares.add_error_listener(bad_listener)

    with pytest.raises(NetworkError) as exc:
        await integration.send_text("C1", "hello")
    assert exc.value is error
    assert len(integration.correlations) == 0


@pytest.mark.asyncio
async def test_restart_keeps_the_same_connection_object():
    fake = FakeSlack()
    integration, _ = make_integration(fake)

    await integration.set_config_and_restart(SlackConfig(_env_file=None, bot_token="xoxb-new"))

    assert integration.connection is fake
    assert integration.status() == {"connected": True}
