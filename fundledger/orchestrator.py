"""
Main Orchestrator for FundLedger

Wires configuration, storage, strategy selection and audit logging into a
ready-to-use LedgerQueryExecutor.

DESIGN DECISION: If the configured storage cannot be built, start-up
fails. There is no silent fallback to an empty in-memory ledger: a
dashboard showing a zero balance because the database was unreachable
is worse than an error page.
"""

from typing import Optional

from fundledger.audit import LedgerAuditLogger, configure_logging
from fundledger.config import Settings, get_settings
from fundledger.queries import LedgerQueryExecutor, StrategySelector
from fundledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    SQLLedgerStorage,
)


def build_storage(settings: Optional[Settings] = None) -> LedgerStorageInterface:
    """
    Create the storage backend named by LEDGER_STORAGE_BACKEND.

    For SQL, the schema is created if missing. That is the one explicit
    initialisation step; nothing is patched lazily on later requests.
    """
    settings = settings or get_settings()
    backend = settings.ledger.storage_backend

    if backend == "sql":
        database = settings.database
        storage = SQLLedgerStorage(database_url=database.url, echo=database.echo)
        storage.create_schema()
        return storage
    if backend == "google_sheets":
        return GoogleSheetsLedgerStorage(GoogleSheetsClient(settings.google_sheets))
    if backend == "memory":
        return InMemoryLedgerStorage()

    raise ValueError(f"Unknown storage backend: {backend}")


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[LedgerStorageInterface] = None,
) -> LedgerQueryExecutor:
    """
    Factory function to create the ledger executor.

    Args:
        settings: Settings to use (defaults to get_settings())
        storage: Pre-built storage, e.g. a seeded in-memory ledger.
                 Built from settings when omitted.

    Returns:
        A LedgerQueryExecutor
    """
    settings = settings or get_settings()
    ledger = settings.ledger
    configure_logging(ledger.log_level)

    if storage is None:
        storage = build_storage(settings)

    selector = StrategySelector(
        mode=ledger.retrieval_strategy,
        pushdown_max_criteria=ledger.pushdown_max_criteria,
    )
    return LedgerQueryExecutor(
        storage=storage,
        selector=selector,
        audit_logger=LedgerAuditLogger(),
    )
