"""Services package."""

from fundledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    RetrievalFailed,
    SQLLedgerStorage,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStorage",
    "InMemoryLedgerStorage",
    "LedgerStorageInterface",
    "RetrievalFailed",
    "SQLLedgerStorage",
    "StorageConnectionError",
    "StorageError",
]
