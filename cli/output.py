"""
Output Formatting Module for the Issuance CLI

Renders command results as tables, JSON, or YAML. Table output shows
amounts alongside their whole-coin value and collapses token id lists into
ranges.
"""

import json
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from tabulate import tabulate


# Smallest units per whole coin
UNITS_PER_COIN = 10 ** 18

AMOUNT_KEYS = {'price', 'paid', 'withdrawn', 'credits', 'treasury_balance', 'amount'}
TOKEN_LIST_KEYS = {'token_ids'}

ANSI_COLORS = {
    'header': '\033[1;34m',
    'key': '\033[1;36m',
    'number': '\033[33m',
    'bool': '\033[35m',
    'null': '\033[90m',
}


def format_coin_amount(amount: int) -> str:
    """Render a smallest-unit amount with its whole-coin value, e.g. '50000000000000000 (0.05)'."""
    coins = Decimal(amount) / UNITS_PER_COIN
    text = format(coins.normalize(), 'f') if amount else '0'
    return f"{amount} ({text})"


def collapse_ids(token_ids: Iterable[int]) -> str:
    """Render ascending ids compactly: [1, 2, 3, 7] -> '1-3, 7'."""
    parts: List[str] = []
    run_start = previous = None
    for token_id in token_ids:
        if previous is not None and token_id == previous + 1:
            previous = token_id
            continue
        if run_start is not None:
            parts.append(str(run_start) if run_start == previous else f"{run_start}-{previous}")
        run_start = previous = token_id
    if run_start is not None:
        parts.append(str(run_start) if run_start == previous else f"{run_start}-{previous}")
    return ', '.join(parts) if parts else '-'


class OutputFormatter:
    """Formatter for CLI results."""

    def __init__(self, format_type: str = 'table', color_output: bool = True):
        self.format_type = format_type
        self.color_output = color_output and sys.stdout.isatty()

    def format(self, data: Any, headers: Optional[List[str]] = None) -> str:
        if self.format_type == 'json':
            return self.format_json(data)
        if self.format_type == 'yaml':
            return self.format_yaml(data)
        return self.format_table(data, headers)

    def format_json(self, data: Any) -> str:
        return json.dumps(data, indent=2, default=self._to_plain)

    def format_yaml(self, data: Any) -> str:
        # Round-trip through JSON so datetimes and paths become plain scalars
        plain = json.loads(self.format_json(data))
        return yaml.safe_dump(plain, default_flow_style=False, sort_keys=False).rstrip()

    def format_table(self, data: Any, headers: Optional[List[str]] = None) -> str:
        if isinstance(data, dict):
            rows = [[self._paint(str(key), 'key'), self._cell(key, value)]
                    for key, value in data.items()]
            return tabulate(rows, tablefmt='plain', disable_numparse=True)

        if isinstance(data, list):
            if not data:
                return "No data available"
            if not isinstance(data[0], dict):
                return '\n'.join(str(item) for item in data)

            columns = headers or list(data[0].keys())
            rows = [[self._cell(column, row.get(column)) for column in columns] for row in data]
            return tabulate(rows, headers=[self._paint(c, 'header') for c in columns],
                            tablefmt='grid', disable_numparse=True)

        return str(data)

    def _cell(self, key: str, value: Any) -> str:
        """Render one value, using the key to recognise amounts and id lists."""
        if value is None:
            return self._paint('null', 'null')
        if isinstance(value, bool):
            return self._paint('yes' if value else 'no', 'bool')
        if key in AMOUNT_KEYS and isinstance(value, int):
            return self._paint(format_coin_amount(value), 'number')
        if key in TOKEN_LIST_KEYS and isinstance(value, list):
            return collapse_ids(value)
        if isinstance(value, (int, float)):
            return self._paint(str(value), 'number')
        if isinstance(value, datetime):
            return value.strftime('%Y-%m-%d %H:%M:%S')
        if isinstance(value, dict):
            return f"<{len(value)} items>"
        if isinstance(value, list):
            return ', '.join(str(v) for v in value) if len(value) <= 10 else f"[{len(value)} items]"
        return str(value)

    def _paint(self, text: str, kind: str) -> str:
        if not self.color_output or kind not in ANSI_COLORS:
            return text
        return f"{ANSI_COLORS[kind]}{text}\033[0m"

    @staticmethod
    def _to_plain(obj: Any) -> str:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        return str(obj)
