#!/usr/bin/env python3
"""
Issuance Ledger - Command Line Interface

A CLI for operating a token-issuance ledger: paid and free minting,
allow-list administration, pause control, pricing, and treasury withdrawal.
"""

import sys
from typing import Optional

import click
import yaml

from cli import __version__
from cli.commands.admin import admin
from cli.commands.allowlist import allowlist
from cli.commands.asset import asset
from cli.commands.config import config
from cli.commands.ledger import events, info, init
from cli.commands.mint import mint
from cli.commands.treasury import treasury
from cli.context import CLIContext, pass_context


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c',
              help='Path to configuration file')
@click.option('--profile', '-p',
              type=click.Choice(['production', 'development']),
              help='Configuration profile')
@click.option('--data-dir', '-d',
              help='Ledger data directory (overrides ledger.data_dir)')
@click.option('--output-format', '-o',
              type=click.Choice(['table', 'json', 'yaml']),
              help='Output format')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.version_option(__version__, prog_name='issuance')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], profile: Optional[str],
        data_dir: Optional[str], output_format: Optional[str], verbose: int):
    """
    Token Issuance Ledger Command Line Interface

    Examples:
        issuance init --owner alice --max-supply 10000 --base-uri https://meta/
        issuance mint single --as bob --value 50000000000000000
        issuance allowlist add carol dave --as alice
        issuance treasury withdraw --as alice
    """
    ctx.config_file = config_file
    ctx.profile = profile
    ctx.data_dir = data_dir
    ctx.output_format = output_format
    ctx.verbose = verbose

    try:
        ctx.load_config()
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: failed to load configuration: {e}", err=True)
        sys.exit(1)

    ctx.setup_logging()
    ctx.logger.debug("CLI initialized with context")


cli.add_command(init)
cli.add_command(info)
cli.add_command(events)
cli.add_command(mint)
cli.add_command(allowlist)
cli.add_command(admin)
cli.add_command(treasury)
cli.add_command(asset)
cli.add_command(config)


def main():
    cli()


if __name__ == '__main__':
    main()
