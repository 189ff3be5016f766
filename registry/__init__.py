"""
Issuance Ledger - Registry

Ownership registry collaborator, persisted snapshot schema, JSON storage and
the ledger manager.
"""
