"""
slack-bridge CLI — `slack-bridge` command.

Commands:
  slack-bridge status               Connect and report connection state
  slack-bridge config               Show effective (redacted) settings
  slack-bridge send <chan> <text>   Send a text through the outgoing pipeline
  slack-bridge users|channels|team  Workspace directory
"""

import asyncio
import json
import logging
from typing import Any

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install slack-bridge[cli]")

from slack_bridge.client import SlackIntegration
from slack_bridge.config import SlackConfig
from slack_bridge.errors import SlackBridgeError
from slack_bridge.middleware import BotHost

console = Console()


async def _open() -> SlackIntegration:
    integration = SlackIntegration(SlackConfig())
    integration.init(BotHost())
    try:
        await integration.ready()
    except Exception:
        await integration.close()
        raise
    return integration


def _run(coro: Any) -> Any:
    try:
        return asyncio.run(coro)
    except SlackBridgeError as e:
        console.print(f"[red]{e.code}:[/red] {e}")
        raise SystemExit(1)


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline activity.")
def main(verbose: bool):
    """slack-bridge — deliver bot messages to Slack."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@main.command("status")
def status_cmd():
    """Connect and show whether the connection is up."""

    async def _status():
        integration = await _open()
        try:
            return integration.status()
        finally:
            await integration.close()

    _print_json(_run(_status()))


@main.command("config")
def config_cmd():
    """Show the effective configuration with secrets masked."""
    _print_json(SlackConfig().redacted())


# Register subcommands from separate modules
from slack_bridge.cli.directory import users_cmd, channels_cmd, team_cmd
from slack_bridge.cli.send import send_cmd

main.add_command(users_cmd)
main.add_command(channels_cmd)
main.add_command(team_cmd)
main.add_command(send_cmd)


if __name__ == "__main__":
    main()
