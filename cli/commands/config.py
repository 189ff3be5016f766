"""
Configuration Management Commands for the Issuance CLI

Commands for inspecting, validating and updating the layered CLI
configuration (defaults, profile, file, environment).
"""

import json
import sys
from typing import Optional

import click

from cli.config import PROFILES, ConfigurationManager
from cli.context import CLIContext, pass_context, handle_cli_error
from cli.output import OutputFormatter


def _manager(ctx: CLIContext) -> ConfigurationManager:
    if ctx.config_manager is None:
        ctx.load_config()
    return ctx.config_manager


def _parse_config_value(value: str):
    """Parse a command-line value into bool, number, JSON structure or string."""
    if value.lower() in ('true', 'yes'):
        return True
    if value.lower() in ('false', 'no'):
        return False
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@click.group()
@pass_context
def config(ctx: CLIContext):
    """
    Configuration management commands.
    """
    ctx.logger.debug("Config command group invoked")


@config.command('show')
@click.option('--key', help='Specific configuration key to show (dot notation)')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json', 'yaml']),
              default='yaml', show_default=True, help='Output format')
@pass_context
@handle_cli_error
def show_config(ctx: CLIContext, key: Optional[str], output_format: str):
    """
    Display the merged configuration.

    Examples:
        issuance config show
        issuance config show --key ledger.data_dir
    """
    manager = _manager(ctx)
    formatter = OutputFormatter(output_format, color_output=False)

    if key:
        value = manager.get(key)
        if value is None:
            click.echo(f"Configuration key not found: {key}", err=True)
            sys.exit(1)
        click.echo(formatter.format(value if isinstance(value, dict) else {key: value}))
    else:
        click.echo(formatter.format(manager.load()))


@config.command('sources')
@pass_context
@handle_cli_error
def config_sources(ctx: CLIContext):
    """List configuration sources in the order they were applied."""
    sources = _manager(ctx).get_sources()
    click.echo("Configuration sources (later entries take precedence):")
    for i, source in enumerate(sources, 1):
        click.echo(f"  {i}. {source}")


@config.command('validate')
@pass_context
@handle_cli_error
def validate_config(ctx: CLIContext):
    """Validate configuration values."""
    ctx.logger.info("Validating configuration")

    errors = _manager(ctx).validate()
    if errors:
        click.echo("Configuration validation failed:", err=True)
        for error in errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)

    click.echo("Configuration is valid")


@config.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--save', 'save_path', type=click.Path(dir_okay=False),
              help='Write the resulting configuration to this file')
@pass_context
@handle_cli_error
def set_config(ctx: CLIContext, key: str, value: str, save_path: Optional[str]):
    """
    Set a configuration value using dot notation.

    Examples:
        issuance config set cli.output_format json --save .issuance.yml
    """
    manager = _manager(ctx)
    parsed_value = _parse_config_value(value)
    manager.set(key, parsed_value)
    click.echo(f"Set {key} = {parsed_value!r}")

    if save_path:
        fmt = 'json' if save_path.endswith('.json') else 'yaml'
        path = manager.save(save_path, format=fmt)
        click.echo(f"Saved to {path}")


@config.command('list-profiles')
@pass_context
@handle_cli_error
def list_profiles(ctx: CLIContext):
    """List the built-in configuration profiles."""
    rows = []
    for name, overrides in PROFILES.items():
        keys = [f"{section}.{k}" for section, values in overrides.items() for k in values]
        rows.append({'profile': name, 'overrides': ', '.join(keys)})
    ctx.output(rows, ['profile', 'overrides'])
