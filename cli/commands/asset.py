"""
Asset query and transfer commands for the Issuance CLI.
"""

import click

from cli.context import CLIContext, pass_context, handle_cli_error, caller_option


@click.group()
@pass_context
def asset(ctx: CLIContext):
    """
    Issued asset commands: holder lookup, metadata pointer, transfers.
    """
    ctx.logger.debug("Asset command group invoked")


@asset.command('owner-of')
@click.argument('token_id', type=int)
@pass_context
@handle_cli_error
def asset_owner_of(ctx: CLIContext, token_id: int):
    """Show the holder of TOKEN_ID."""
    ledger = ctx.ledger_manager.load().ledger
    ctx.output({'token_id': token_id, 'owner': ledger.owner_of(token_id)})


@asset.command('uri')
@click.argument('token_id', type=int)
@pass_context
@handle_cli_error
def asset_uri(ctx: CLIContext, token_id: int):
    """Show the metadata pointer of TOKEN_ID."""
    ledger = ctx.ledger_manager.load().ledger
    ctx.output({'token_id': token_id, 'uri': ledger.token_uri(token_id)})


@asset.command('holdings')
@click.argument('account')
@pass_context
@handle_cli_error
def asset_holdings(ctx: CLIContext, account: str):
    """List the tokens held by ACCOUNT."""
    registry = ctx.ledger_manager.load().registry
    tokens = registry.tokens_of(account)
    ctx.output({'account': account, 'balance': len(tokens), 'token_ids': tokens})


@asset.command('transfer')
@click.argument('token_id', type=int)
@click.option('--to', 'recipient', required=True, help='Account receiving the token')
@caller_option
@pass_context
@handle_cli_error
def asset_transfer(ctx: CLIContext, token_id: int, recipient: str, caller: str):
    """Transfer TOKEN_ID from its holder to another account."""
    ctx.transact(lambda s: s.registry.transfer(caller, recipient, token_id))
    ctx.output({'token_id': token_id, 'from': caller, 'to': recipient})
