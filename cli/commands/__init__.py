"""
Issuance CLI Commands Package

Command modules for the token issuance ledger CLI.
"""

__all__ = ['admin', 'allowlist', 'asset', 'config', 'ledger', 'mint', 'treasury']
