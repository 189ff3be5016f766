"""
Allow-list administration commands for the Issuance CLI.
"""

from typing import Tuple

import click

from cli.context import CLIContext, pass_context, handle_cli_error, caller_option


@click.group()
@pass_context
def allowlist(ctx: CLIContext):
    """
    Allow-list commands.

    Accounts on the allow-list may mint one token for free.
    """
    ctx.logger.debug("Allowlist command group invoked")


@allowlist.command('add')
@click.argument('accounts', nargs=-1, required=True)
@caller_option
@pass_context
@handle_cli_error
def allowlist_add(ctx: CLIContext, accounts: Tuple[str, ...], caller: str):
    """
    Add ACCOUNTS (at most 100). Accounts already holding a token are skipped.

    Examples:
        issuance allowlist add carol dave --as alice
    """
    if len(accounts) == 1:
        added = ctx.transact(lambda s: s.ledger.add_to_allowlist(caller, accounts[0]))
        added = [accounts[0]] if added else []
    else:
        added = ctx.transact(lambda s: s.ledger.add_many_to_allowlist(caller, list(accounts)))

    skipped = [a for a in accounts if a not in added]
    ctx.output({'added': added, 'skipped': skipped})


@allowlist.command('remove')
@click.argument('accounts', nargs=-1, required=True)
@caller_option
@pass_context
@handle_cli_error
def allowlist_remove(ctx: CLIContext, accounts: Tuple[str, ...], caller: str):
    """Remove ACCOUNTS (at most 100). Non-members are ignored."""
    if len(accounts) == 1:
        removed = ctx.transact(lambda s: s.ledger.remove_from_allowlist(caller, accounts[0]))
        removed = [accounts[0]] if removed else []
    else:
        removed = ctx.transact(lambda s: s.ledger.remove_many_from_allowlist(caller, list(accounts)))

    ctx.output({'removed': removed})


@allowlist.command('check')
@click.argument('account')
@pass_context
@handle_cli_error
def allowlist_check(ctx: CLIContext, account: str):
    """Show whether ACCOUNT is on the allow-list."""
    ledger = ctx.ledger_manager.load().ledger
    ctx.output({'account': account, 'listed': ledger.is_listed(account)})


@allowlist.command('list')
@pass_context
@handle_cli_error
def allowlist_list(ctx: CLIContext):
    """List every allow-listed account."""
    ledger = ctx.ledger_manager.load().ledger
    ctx.output([{'account': a} for a in ledger.allowlist_members()])
