"""
Pi-hole API Client - CLI Interface

Command-line interface for managing connection profiles and checking
connectivity.
"""

import logging
import sys

import typer

from .delete import delete_command
from .list import list_command
from .setup import setup_command
from .test import test_command

app = typer.Typer(
    name="pihole-api",
    help="Pi-hole API client - profile management and connection checks",
    add_completion=False
)

app.command(name="setup", help="Configure a Pi-hole connection profile")(setup_command)
app.command(name="list-profiles", help="List all configured profiles")(list_command)
app.command(name="test-connection", help="Test connection to a Pi-hole")(test_command)
app.command(name="delete-profile", help="Delete a connection profile")(delete_command)


def main():
    """CLI entry point."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\n\nOperation cancelled by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
