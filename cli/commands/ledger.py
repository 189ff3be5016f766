"""
Ledger lifecycle commands: create a ledger, show its state, list notifications.
"""

from typing import Optional

import click

from ledger.events import EventType
from cli.context import CLIContext, pass_context, handle_cli_error


@click.command('init')
@click.option('--owner', required=True, help='Initial owner account')
@click.option('--max-supply', type=int, help='Maximum number of tokens ever issued')
@click.option('--base-uri', help='Base metadata pointer; token URI is this followed by the id')
@click.option('--price', type=int, help='Unit price in smallest units')
@click.option('--name', help='Collection name')
@click.option('--symbol', help='Collection symbol')
@pass_context
@handle_cli_error
def init(ctx: CLIContext, owner: str, max_supply: Optional[int], base_uri: Optional[str],
         price: Optional[int], name: Optional[str], symbol: Optional[str]):
    """
    Create a new ledger in the data directory.

    Examples:
        issuance init --owner alice --max-supply 10000 --base-uri https://baseUri/
    """
    if max_supply is None:
        max_supply = ctx.get_config('ledger.default_max_supply', 10000)
    if base_uri is None:
        base_uri = ctx.get_config('ledger.default_base_uri', '')
    if price is None:
        price = ctx.get_config('ledger.default_price')

    session = ctx.ledger_manager.create(
        owner=owner,
        max_supply=max_supply,
        base_uri=base_uri,
        unit_price=price,
        name=name,
        symbol=symbol,
    )
    ctx.logger.info(f"Initialized ledger in {ctx.ledger_manager.storage.storage_dir}")
    ctx.output(session.ledger.get_info())


@click.command('info')
@click.option('--stats', is_flag=True, help='Include storage and holder statistics')
@pass_context
@handle_cli_error
def info(ctx: CLIContext, stats: bool):
    """Show the ledger's configuration, counter, pause state and treasury."""
    if stats:
        ctx.output(ctx.ledger_manager.get_stats())
    else:
        ctx.output(ctx.ledger_manager.load().ledger.get_info())


@click.command('events')
@click.option('--type', 'event_type', type=click.Choice([t.value for t in EventType]),
              help='Only show events of this type')
@click.option('--token-id', type=int, help='Only show events for this token')
@click.option('--limit', type=int, default=50, show_default=True, help='Show at most the last N events')
@pass_context
@handle_cli_error
def events(ctx: CLIContext, event_type: Optional[str], token_id: Optional[int], limit: int):
    """List recorded notifications, oldest first."""
    session = ctx.ledger_manager.load()
    records = session.event_log.events(
        event_type=EventType(event_type) if event_type else None,
        token_id=token_id,
    )
    if limit > 0:
        records = records[-limit:]

    ctx.output(
        [e.to_dict() for e in records],
        headers=['sequence', 'event_type', 'token_id', 'from_account', 'to_account', 'amount'],
    )
