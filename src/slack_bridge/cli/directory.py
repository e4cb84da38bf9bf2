"""CLI: slack-bridge users, slack-bridge channels, slack-bridge team"""

import click


def _fetch(name: str):
    from slack_bridge.cli.main import _open, _print_json, _run

    async def _get():
        integration = await _open()
        try:
            return await getattr(integration, name)()
        finally:
            await integration.close()

    _print_json(_run(_get()))


@click.command("users")
def users_cmd():
    """List workspace users."""
    _fetch("get_users")


@click.command("channels")
def channels_cmd():
    """List channels."""
    _fetch("get_channels")


@click.command("team")
def team_cmd():
    """Show team info."""
    _fetch("get_team")
