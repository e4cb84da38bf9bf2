"""CLI: slack-bridge send"""

import click


@click.command("send")
@click.argument("channel")
@click.argument("text")
@click.option("--json-output", "--json", is_flag=True)
def send_cmd(channel: str, text: str, json_output: bool):
    """Send a text message and wait for Slack to confirm it."""
    from slack_bridge.cli.main import _open, _print_json, _run, console

    async def _send():
        integration = await _open()
        try:
            with console.status("Sending..."):
                return await integration.send_text(channel, text)
        finally:
            await integration.close()

    result = _run(_send())
    if json_output:
        _print_json(result)
    else:
        console.print(f"[green]Sent[/green] to {result.get('channel', channel)} at ts {result.get('ts')}")
