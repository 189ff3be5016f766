"""
Shared CLI context, error handling and helpers for the Issuance CLI commands.
"""

import functools
import logging
import sys
import traceback
from pathlib import Path
from typing import Any, Callable, List, Optional

import click
from pydantic import ValidationError

from ledger.events import DEFAULT_MAX_EVENTS
from ledger.exceptions import LedgerError
from registry.manager import LedgerExistsError, LedgerManager, LedgerSession
from registry.storage import StorageError

from .config import ConfigurationManager
from .output import OutputFormatter


LOGGER_NAMES = ['issuance-cli', 'ledger', 'registry']


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.profile: Optional[str] = None
        self.data_dir: Optional[str] = None
        self.output_format: Optional[str] = None
        self.verbose: int = 0
        self.config_manager: Optional[ConfigurationManager] = None
        self.logger: logging.Logger = logging.getLogger('issuance-cli')
        self._ledger_manager: Optional[LedgerManager] = None

    def setup_logging(self):
        """Configure logging based on verbosity level or the configured level."""
        if self.verbose >= 2:
            level = logging.DEBUG
        elif self.verbose == 1:
            level = logging.INFO
        else:
            level = getattr(logging, str(self.get_config('logging.level', 'WARNING')).upper(), logging.WARNING)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        for name in LOGGER_NAMES:
            logger = logging.getLogger(name)
            logger.setLevel(level)
            if not logger.handlers:
                handler = logging.StreamHandler(sys.stderr)
                handler.setFormatter(formatter)
                logger.addHandler(handler)

    def load_config(self):
        self.config_manager = ConfigurationManager(self.config_file, self.profile)
        self.config_manager.load()

    def get_config(self, key_path: str, default: Any = None) -> Any:
        if self.config_manager is None:
            return default
        return self.config_manager.get(key_path, default)

    @property
    def ledger_manager(self) -> LedgerManager:
        if self._ledger_manager is None:
            data_dir = self.data_dir or self.get_config('ledger.data_dir')
            self._ledger_manager = LedgerManager(
                storage_dir=Path(data_dir).expanduser(),
                backup_count=self.get_config('storage.backup_count', 5),
                lock_timeout=self.get_config('storage.lock_timeout', 10.0),
                max_events=self.get_config('storage.max_events', DEFAULT_MAX_EVENTS),
            )
            self.logger.debug(f"Using ledger data directory {data_dir}")
        return self._ledger_manager

    def transact(self, operation: Callable[[LedgerSession], Any]) -> Any:
        """Run an operation against the stored ledger and persist it on success."""
        return self.ledger_manager.transact(operation)

    def output(self, data: Any, headers: Optional[List[str]] = None):
        """Output data in the selected format."""
        format_type = self.output_format or self.get_config('cli.output_format', 'table')
        formatter = OutputFormatter(
            format_type,
            color_output=self.get_config('cli.color_output', True),
        )
        click.echo(formatter.format(data, headers))


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Decorator turning ledger, storage and validation errors into CLI failures."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except KeyboardInterrupt:
            click.echo("\nOperation cancelled by user.", err=True)
            sys.exit(130)
        except (LedgerError, LedgerExistsError, StorageError, ValidationError,
                ValueError, OSError) as e:
            ctx = click.get_current_context(silent=True)
            cli_ctx = ctx.find_object(CLIContext) if ctx else None

            click.echo(f"Error: {e}", err=True)
            if cli_ctx and cli_ctx.verbose >= 2:
                click.echo(traceback.format_exc(), err=True)
            else:
                click.echo("Use -vv for detailed error information.", err=True)

            sys.exit(1)

    return wrapper


def caller_option(func):
    """The --as option naming the acting principal."""
    return click.option('--as', 'caller', required=True, metavar='ACCOUNT',
                        help='Account performing the operation')(func)
