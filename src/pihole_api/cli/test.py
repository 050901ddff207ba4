"""
Pi-hole API Client - Test Connection Command
"""

import asyncio
from typing import Any, Dict

import typer

from ..core.client import PiholeClient
from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError
from ..core.models import PiholeConfig


def test_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Profile name to test"),
    totp: str | None = typer.Option(None, "--totp", help="TOTP code if two-factor auth is enabled"),
):
    """
    Test connection to a Pi-hole.

    Examples:
        pihole-api test-connection
        pihole-api test-connection --profile office --totp 123456
    """
    typer.echo("\nTesting Pi-hole Connection\n")
    typer.echo(f"Profile: {typer.style(profile, fg=typer.colors.CYAN, bold=True)}\n")

    try:
        config = ConfigLoader.load(profile)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        typer.echo("\nRun 'pihole-api setup' to configure a profile")
        raise typer.Exit(1)

    typer.echo(f"URL: {config.url}")
    typer.echo(f"SSL Verification: {'Enabled' if config.verify_ssl else 'Disabled'}\n")

    typer.echo("Connecting to Pi-hole...")
    result = asyncio.run(_test_connection_async(config, totp))

    if result["success"]:
        typer.echo(f"\n{typer.style('Connection successful!', fg=typer.colors.GREEN, bold=True)}")

        version = result.get("version") or {}
        core = version.get("version", {}).get("core", {}).get("local", {})
        if core.get("version"):
            typer.echo(f"\nPi-hole core version: {core['version']}")
        return

    typer.echo(f"\n{typer.style('Connection failed', fg=typer.colors.RED, bold=True)}")
    typer.echo(f"\nError: {result.get('error', 'Unknown error')}")
    if result.get("hint"):
        typer.echo(f"Hint: {result['hint']}")
    typer.echo("\nTroubleshooting tips:")
    typer.echo("   - Verify the URL is correct and reachable")
    typer.echo("   - Check the password (an app password works too)")
    typer.echo("   - Pass --totp if two-factor authentication is enabled")
    typer.echo("   - Re-run setup with --no-verify-ssl for a self-signed certificate")
    raise typer.Exit(1)


async def _test_connection_async(config: PiholeConfig, totp: str | None = None) -> Dict[str, Any]:
    """
    Log in, fetch version info and log out again.

    Returns:
        Dictionary with test results
    """
    async with PiholeClient(config) as client:
        login = await client.connect(totp)
        if login.is_err():
            return {
                "success": False,
                "error": f"{login.error.code.value}: {login.error.message}",
                "hint": login.error.hint,
            }

        version = await client.info.get_version()
        await client.disconnect()

        if version.is_err():
            return {"success": False, "error": version.error.message, "hint": version.error.hint}
        return {"success": True, "version": version.value}
