"""
opencode-notifier CLI.

Commands:
  opencode-notifier watch            Stream host events and notify
  opencode-notifier config           Show the resolved configuration
  opencode-notifier test <event>     Fire a sample notification
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install opencode-notifier[cli]")

from opencode_notifier.debug_log import configure_debug_logging

console = Console()


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log to stderr")
def main(verbose: bool):
    """opencode-notifier: notifications for opencode sessions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    configure_debug_logging()


# Register subcommands from separate modules
from opencode_notifier.cli.watch import watch_cmd
from opencode_notifier.cli.config import config_cmd, test_cmd

main.add_command(watch_cmd)
main.add_command(config_cmd)
main.add_command(test_cmd)


if __name__ == "__main__":
    main()
