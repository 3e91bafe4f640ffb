"""CLI: opencode-notifier watch"""

import asyncio
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from opencode_notifier.config import load_config
from opencode_notifier.errors import NotifierError
from opencode_notifier.models.decision import NotificationDecision
from opencode_notifier.plugin import Notifier
from opencode_notifier.transport.http import DEFAULT_BASE_URL, HostClient

console = Console()


def _run(coro):
    from opencode_notifier.cli.main import _run
    return _run(coro)


@click.command("watch")
@click.option("--url", default=DEFAULT_BASE_URL, show_default=True, help="opencode server URL")
@click.option("--directory", default=None, help="Project directory the server should scope events to")
@click.option("--config", "config_file", default=None, type=click.Path(dir_okay=False, path_type=Path))
def watch_cmd(url: str, directory: Optional[str], config_file: Optional[Path]):
    """Stream session events from an opencode server and notify."""

    async def _watch():
        host = HostClient(base_url=url, directory=directory)
        notifier = Notifier(config=load_config(config_file), host=host)
        in_flight: set[asyncio.Task] = set()

        async def _handle(raw: dict) -> None:
            decision: Optional[NotificationDecision] = await notifier.event(raw)
            if decision is not None:
                console.print(f"[green]{decision.classification.value}[/green] {decision.session_title}")

        console.print(f"[dim]Listening on {host.base_url}/event (Ctrl+C to exit)[/dim]")
        try:
            async for raw in host.events():
                # Handlers overlap: an error must reach the arbiter while an idle is pending.
                task = asyncio.create_task(_handle(raw))
                in_flight.add(task)
                task.add_done_callback(in_flight.discard)
        except NotifierError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        finally:
            if in_flight:
                await asyncio.gather(*in_flight, return_exceptions=True)
            await host.close()

    try:
        _run(_watch())
    except KeyboardInterrupt:
        pass
