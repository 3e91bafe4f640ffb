"""CLI: opencode-notifier config, opencode-notifier test"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from opencode_notifier.config import config_path, load_config
from opencode_notifier.dispatch import Dispatcher
from opencode_notifier.models.decision import Classification, NotificationDecision
from opencode_notifier.models.session import DEFAULT_TITLE

console = Console()

CLASSIFICATION_CHOICES = [c.value for c in Classification]


def _run(coro):
    from opencode_notifier.cli.main import _run
    return _run(coro)


@click.command("config")
@click.option("--config", "config_file", default=None, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--json-output", "--json", is_flag=True)
def config_cmd(config_file: Optional[Path], json_output: bool):
    """Show the resolved configuration."""
    cfg = load_config(config_file)
    if json_output:
        click.echo(json.dumps(cfg.model_dump(mode="json"), indent=2))
        return

    console.print(f"[dim]{config_file or config_path()}[/dim]")
    table = Table(title=f"Events (timeout {cfg.timeout:g}s, volume {cfg.volume:g})")
    table.add_column("Event", style="bold")
    table.add_column("Notification")
    table.add_column("Sound")
    table.add_column("Message")
    table.add_column("Sound file")
    table.add_column("Image")
    for c in Classification:
        table.add_row(
            c.value,
            "on" if cfg.is_notification_enabled(c) else "off",
            "on" if cfg.is_sound_enabled(c) else "off",
            cfg.message(c),
            cfg.sound_path(c) or "",
            cfg.image_path(c) or "",
        )
    console.print(table)
    if cfg.command.enabled:
        console.print(f"Command: {cfg.command.path} {' '.join(cfg.command.args)}")


@click.command("test")
@click.argument("event", type=click.Choice(CLASSIFICATION_CHOICES))
@click.option("--title", default=DEFAULT_TITLE, show_default=True, help="Session title to render")
@click.option("--config", "config_file", default=None, type=click.Path(dir_okay=False, path_type=Path))
def test_cmd(event: str, title: str, config_file: Optional[Path]):
    """Fire a sample notification for EVENT."""

    async def _test():
        dispatcher = Dispatcher(load_config(config_file))
        decision = NotificationDecision(classification=Classification(event), session_title=title)
        with console.status("Dispatching..."):
            await dispatcher.dispatch(decision)
        console.print(f"[green]Dispatched {event} for {title}[/green]")

    _run(_test())
