"""
Minting Operation Commands for the Issuance CLI

Commands for every issuance path: paid single and batch mints, allow-listed
free mints, owner claims, and owner-initiated mints to another account.
"""

from typing import List

import click

from cli.context import CLIContext, pass_context, handle_cli_error, caller_option


def _report(ctx: CLIContext, operation: str, recipient: str, token_ids: List[int], **extra):
    result = {
        'operation': operation,
        'recipient': recipient,
        'token_ids': token_ids,
        'count': len(token_ids),
    }
    result.update(extra)
    ctx.output(result)


@click.group()
@pass_context
def mint(ctx: CLIContext):
    """
    Minting operation commands.

    Issue new tokens through the paid, allow-listed, or owner paths.
    """
    ctx.logger.debug("Mint command group invoked")


@mint.command('single')
@caller_option
@click.option('--value', type=int, required=True, help='Amount paid, in smallest units')
@pass_context
@handle_cli_error
def mint_single(ctx: CLIContext, caller: str, value: int):
    """
    Mint one token by paying at least the unit price.

    Examples:
        issuance mint single --as bob --value 50000000000000000
    """
    token_ids = ctx.transact(lambda s: s.ledger.mint(caller, value))
    _report(ctx, 'mint', caller, token_ids, paid=value)


@mint.command('multiple')
@click.argument('count', type=int)
@caller_option
@click.option('--value', type=int, required=True, help='Amount paid, in smallest units')
@pass_context
@handle_cli_error
def mint_multiple(ctx: CLIContext, count: int, caller: str, value: int):
    """
    Mint COUNT tokens (at most 20) paying at least COUNT times the price.

    Examples:
        issuance mint multiple 3 --as bob --value 150000000000000000
    """
    token_ids = ctx.transact(lambda s: s.ledger.mint_multiple(caller, count, value))
    _report(ctx, 'mint_multiple', caller, token_ids, paid=value)


@mint.command('whitelisted')
@caller_option
@click.option('--value', type=int, default=0, show_default=True, help='Amount paid; must be zero')
@pass_context
@handle_cli_error
def mint_whitelisted(ctx: CLIContext, caller: str, value: int):
    """Free mint for an allow-listed account. Consumes its allow-list entry."""
    token_ids = ctx.transact(lambda s: s.ledger.whitelisted_mint(caller, value))
    _report(ctx, 'whitelisted_mint', caller, token_ids)


@mint.command('claim')
@caller_option
@pass_context
@handle_cli_error
def mint_claim(ctx: CLIContext, caller: str):
    """Owner claims one token for free (allowed while paused)."""
    token_ids = ctx.transact(lambda s: s.ledger.owner_claim(caller))
    _report(ctx, 'owner_claim', caller, token_ids)


@mint.command('claim-multiple')
@click.argument('count', type=int)
@caller_option
@pass_context
@handle_cli_error
def mint_claim_multiple(ctx: CLIContext, count: int, caller: str):
    """Owner claims COUNT tokens for free (allowed while paused)."""
    token_ids = ctx.transact(lambda s: s.ledger.owner_claim_multiple(caller, count))
    _report(ctx, 'owner_claim_multiple', caller, token_ids)


@mint.command('safe')
@click.option('--to', 'recipient', required=True, help='Account receiving the token')
@caller_option
@pass_context
@handle_cli_error
def mint_safe(ctx: CLIContext, recipient: str, caller: str):
    """Owner mints one token for free to another account."""
    token_ids = ctx.transact(lambda s: s.ledger.safe_mint(caller, recipient))
    _report(ctx, 'safe_mint', recipient, token_ids)
