"""claude-adk CLI entrypoint."""

from __future__ import annotations

import click

from claude_adk import __version__


@click.group()
@click.version_option(version=__version__, prog_name="claude-adk")
def main() -> None:
    """claude-adk — Claude models behind Google ADK's model interface."""


# Register subcommands
from claude_adk.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
