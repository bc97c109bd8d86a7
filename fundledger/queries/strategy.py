"""
Retrieval Strategy Selector

DESIGN DECISION: Criteria can be evaluated in two places:

PUSHDOWN:
- Criteria are handed to the storage backend
- The backend narrows the records (SQL WHERE, or the adapter's own pass)

IN MEMORY:
- The backend returns every transaction
- The shared predicate narrows them afterwards

Historically the two paths drifted apart. Here both end in the same
ordering step and both rely on the same predicate semantics, so for the
same data and criteria they return the same list. The tests run every
backend through both strategies to hold that line.

Neither strategy catches retrieval errors. A failed fetch is the caller's
problem; no strategy falls back to the other or returns what it has.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from fundledger.models.ledger import FilterCriteria, Transaction
from fundledger.queries.filters import filter_transactions
from fundledger.services.storage.interface import LedgerStorageInterface

STRATEGY_MODES = ("auto", "pushdown", "in_memory")


def _id_order(txn_id: str) -> tuple:
    """Integer ids (database keys) compare as numbers, anything else as text."""
    if txn_id.isdecimal():
        return (1, int(txn_id), txn_id)
    return (0, 0, txn_id)


def order_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Date descending, id descending on ties; ignores storage-native order."""
    return sorted(
        transactions,
        key=lambda txn: (txn.date, _id_order(txn.id)),
        reverse=True,
    )


class RetrievalStrategy(ABC):
    """How filtered transactions are obtained from storage."""

    name: str = "abstract"

    @abstractmethod
    async def fetch(
        self,
        storage: LedgerStorageInterface,
        criteria: FilterCriteria,
    ) -> list[Transaction]:
        """Return the transactions matching `criteria`, newest first."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PushdownStrategy(RetrievalStrategy):
    """Let the storage backend evaluate the criteria."""

    name = "pushdown"

    async def fetch(
        self,
        storage: LedgerStorageInterface,
        criteria: FilterCriteria,
    ) -> list[Transaction]:
        records = await storage.fetch_transactions(criteria)
        return order_newest_first(records)


class InMemoryStrategy(RetrievalStrategy):
    """Fetch everything, then apply the predicate here."""

    name = "in_memory"

    async def fetch(
        self,
        storage: LedgerStorageInterface,
        criteria: FilterCriteria,
    ) -> list[Transaction]:
        records = await storage.fetch_transactions(None)
        return order_newest_first(filter_transactions(records, criteria))


class StrategySelector:
    """
    Picks a retrieval strategy for a set of criteria.

    In "auto" mode, criteria with at most `pushdown_max_criteria` active
    fields go to storage and larger combinations are filtered in memory.
    "pushdown" and "in_memory" force one strategy.
    """

    def __init__(self, mode: str = "auto", pushdown_max_criteria: int = 1):
        if mode not in STRATEGY_MODES:
            raise ValueError(
                f"Unknown retrieval strategy mode: {mode!r}. Expected one of {STRATEGY_MODES}"
            )
        if pushdown_max_criteria < 0:
            raise ValueError("pushdown_max_criteria cannot be negative")
        self._mode = mode
        self._pushdown_max_criteria = pushdown_max_criteria
        self._pushdown = PushdownStrategy()
        self._in_memory = InMemoryStrategy()

    @property
    def mode(self) -> str:
        return self._mode

    def select(self, criteria: FilterCriteria) -> RetrievalStrategy:
        if self._mode == "pushdown":
            return self._pushdown
        if self._mode == "in_memory":
            return self._in_memory
        if criteria.active_count <= self._pushdown_max_criteria:
            return self._pushdown
        return self._in_memory

    async def retrieve(
        self,
        storage: LedgerStorageInterface,
        criteria: FilterCriteria,
    ) -> tuple[RetrievalStrategy, list[Transaction]]:
        """Select a strategy and run it. Returns (strategy, transactions)."""
        strategy = self.select(criteria)
        return strategy, await strategy.fetch(storage, criteria)
