"""
Owner administration commands for the Issuance CLI: pause control, pricing,
metadata pointer and ownership.
"""

import click

from cli.context import CLIContext, pass_context, handle_cli_error, caller_option


@click.group()
@pass_context
def admin(ctx: CLIContext):
    """
    Owner-only administration commands.
    """
    ctx.logger.debug("Admin command group invoked")


@admin.command('pause')
@caller_option
@pass_context
@handle_cli_error
def admin_pause(ctx: CLIContext, caller: str):
    """Block public and allow-listed minting."""
    ctx.transact(lambda s: s.ledger.pause(caller))
    ctx.output({'paused': True})


@admin.command('unpause')
@caller_option
@pass_context
@handle_cli_error
def admin_unpause(ctx: CLIContext, caller: str):
    """Resume public and allow-listed minting."""
    ctx.transact(lambda s: s.ledger.unpause(caller))
    ctx.output({'paused': False})


@admin.command('set-price')
@click.argument('price', type=int)
@caller_option
@pass_context
@handle_cli_error
def admin_set_price(ctx: CLIContext, price: int, caller: str):
    """Set the unit PRICE in smallest units."""
    ctx.transact(lambda s: s.ledger.set_price(caller, price))
    ctx.output({'price': price})


@admin.command('set-base-uri')
@click.argument('base_uri')
@caller_option
@pass_context
@handle_cli_error
def admin_set_base_uri(ctx: CLIContext, base_uri: str, caller: str):
    """Set the base metadata pointer used by token URIs."""
    ctx.transact(lambda s: s.ledger.set_base_uri(caller, base_uri))
    ctx.output({'base_metadata_pointer': base_uri})


@admin.command('transfer-ownership')
@click.argument('new_owner')
@caller_option
@pass_context
@handle_cli_error
def admin_transfer_ownership(ctx: CLIContext, new_owner: str, caller: str):
    """Hand the owner role to NEW_OWNER."""
    ctx.transact(lambda s: s.ledger.transfer_ownership(caller, new_owner))
    ctx.output({'previous_owner': caller, 'owner': new_owner})


@admin.command('renounce-ownership')
@caller_option
@click.confirmation_option(prompt='The ledger will have no owner. Continue?')
@pass_context
@handle_cli_error
def admin_renounce_ownership(ctx: CLIContext, caller: str):
    """Leave the ledger without an owner. Owner-only operations become unavailable."""
    ctx.transact(lambda s: s.ledger.renounce_ownership(caller))
    ctx.output({'previous_owner': caller, 'owner': None})
