"""
codeorbit CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import inspect, layout, search, settings, stats, view


@click.group()
@click.version_option(package_name="codeorbit")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """codeorbit: 3D explorer for source-code dependency graphs.

    Loads the graph a scanner produced, lays it out in space and lets you
    filter, search, inspect and view it.

    \b
    Quick Start:
      codeorbit stats graph.json
      codeorbit search graph.json login --type form
      codeorbit view graph.json --output graph.html --open
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
        datefmt="[%X]",
    )


# Register commands
main.add_command(layout.layout)
main.add_command(stats.stats)
main.add_command(search.search)
main.add_command(inspect.inspect)
main.add_command(view.view)
main.add_command(settings.settings)

if __name__ == "__main__":
    main()
