"""
Treasury commands for the Issuance CLI.
"""

from typing import Optional

import click

from cli.context import CLIContext, pass_context, handle_cli_error, caller_option


@click.group()
@pass_context
def treasury(ctx: CLIContext):
    """
    Treasury commands: held balance and owner withdrawal.
    """
    ctx.logger.debug("Treasury command group invoked")


@treasury.command('balance')
@click.option('--account', help='Show withdrawn credits of this account instead')
@pass_context
@handle_cli_error
def treasury_balance(ctx: CLIContext, account: Optional[str]):
    """Show the held treasury balance."""
    session = ctx.ledger_manager.load()
    if account:
        ctx.output({'account': account, 'credits': session.account_book.balance_of(account)})
    else:
        ctx.output({'treasury_balance': session.ledger.treasury_balance})


@treasury.command('withdraw')
@caller_option
@pass_context
@handle_cli_error
def treasury_withdraw(ctx: CLIContext, caller: str):
    """Send the entire held balance to the owner."""
    amount = ctx.transact(lambda s: s.ledger.withdraw(caller))
    ctx.output({'withdrawn': amount, 'to': caller})
