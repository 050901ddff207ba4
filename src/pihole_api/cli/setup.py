"""
Pi-hole API Client - Setup Command

Interactive setup for a connection profile.
"""

import asyncio
import getpass

import typer
from pydantic import ValidationError

from ..core.client import PiholeClient
from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError
from ..core.models import PiholeConfig


def setup_command(
    profile: str = typer.Option(
        "default", "--profile", "-p", help="Profile name (default, home, office, etc.)"
    ),
    url: str | None = typer.Option(None, "--url", help="Pi-hole URL (e.g., http://pi.hole)"),
    password: str | None = typer.Option(None, "--password", help="Pi-hole web or app password"),
    verify_ssl: bool = typer.Option(
        True, "--verify-ssl/--no-verify-ssl", help="Verify SSL certificates"
    ),
    interactive: bool = typer.Option(
        True, "--interactive/--non-interactive", help="Interactive mode with prompts"
    ),
):
    """
    Configure a Pi-hole connection profile.

    Examples:
        # Interactive setup
        pihole-api setup

        # Non-interactive setup
        pihole-api setup --url http://pi.hole --password SECRET --non-interactive
    """
    typer.echo("\nPi-hole API - Profile Setup\n")
    typer.echo(f"Profile: {typer.style(profile, fg=typer.colors.CYAN, bold=True)}\n")

    if interactive:
        if not url:
            url = typer.prompt("Pi-hole URL (e.g., http://pi.hole)")

        if not password:
            password = getpass.getpass("Password (hidden): ")

        if url.startswith("https://") and not typer.confirm("Verify SSL certificates?", default=True):
            verify_ssl = False

    elif not all([url, password]):
        typer.echo(
            "Error: In non-interactive mode, --url and --password are required",
            err=True,
        )
        raise typer.Exit(1)

    try:
        config = PiholeConfig(url=url, password=password, verify_ssl=verify_ssl)
    except ValidationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("\nTesting connection...")
    if not _test_connection(config):
        typer.echo("\nConnection test failed. Save anyway?", err=True)
        if not typer.confirm("Continue with save?", default=False):
            typer.echo("Setup cancelled")
            raise typer.Exit(0)

    try:
        ConfigLoader.save_profile(profile, config)
    except (ConfigurationError, OSError) as e:
        typer.echo(f"\nError saving profile: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"\nProfile '{profile}' saved successfully!")
    typer.echo(f"\nConfig location: {ConfigLoader.DEFAULT_CONFIG_FILE}")
    typer.echo("Password stored in the system keyring")
    typer.echo(f"\nTest connection: pihole-api test-connection --profile {profile}")


def _test_connection(config: PiholeConfig) -> bool:
    """
    Log in once with the new settings.

    Returns:
        True if login succeeded, False otherwise
    """
    async def test():
        async with PiholeClient(config) as client:
            result = await client.connect()
            if result.is_ok():
                await client.disconnect()
            return result

    result = asyncio.run(test())
    if result.is_ok():
        typer.echo("Connection successful!")
        return True

    typer.echo(f"Connection failed: {result.error.message}")
    return False
