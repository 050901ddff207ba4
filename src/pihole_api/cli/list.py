"""
Pi-hole API Client - List Profiles Command
"""

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError


def list_command(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show detailed information for each profile"
    )
):
    """
    List all configured Pi-hole profiles.

    Examples:
        pihole-api list-profiles
        pihole-api list-profiles --verbose
    """
    typer.echo("\nConfigured Pi-hole Profiles\n")

    try:
        profiles = ConfigLoader.list_profiles()
    except ConfigurationError as e:
        typer.echo(f"Error listing profiles: {e}", err=True)
        raise typer.Exit(1)

    if not profiles:
        typer.echo("No profiles configured yet")
        typer.echo("\nTip: Run 'pihole-api setup' to configure your first profile")
        return

    typer.echo(f"Found {len(profiles)} profile(s):\n")

    for profile in profiles:
        if verbose:
            info = ConfigLoader.get_profile_info(profile)
            typer.echo(typer.style(profile, fg=typer.colors.CYAN, bold=True))
            typer.echo(f"   URL: {info['url']}")
            typer.echo(f"   Password stored: {'yes' if info['has_password'] else 'no'}")
            typer.echo(f"   SSL Verification: {'on' if info['verify_ssl'] else 'off'}")
            typer.echo()
        else:
            typer.echo(f"  - {profile}")

    if not verbose:
        typer.echo("\nTip: Use --verbose to see profile details")

    typer.echo(f"\nConfig file: {ConfigLoader.DEFAULT_CONFIG_FILE}")
