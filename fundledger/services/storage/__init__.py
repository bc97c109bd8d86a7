"""
Storage Services Package

The abstract ledger storage interface and its backends: in-memory, SQL
(SQLAlchemy) and Google Sheets.
"""

from fundledger.services.storage.interface import (
    LedgerStorageInterface,
    RetrievalFailed,
    StorageConnectionError,
    StorageError,
)
from fundledger.services.storage.memory import InMemoryLedgerStorage
from fundledger.services.storage.sql import SQLLedgerStorage, build_engine
from fundledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
)

__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "RetrievalFailed",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStorage",
    "InMemoryLedgerStorage",
    "SQLLedgerStorage",
    "build_engine",
]
