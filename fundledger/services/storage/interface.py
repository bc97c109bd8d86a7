"""
Abstract Storage Interface

DESIGN DECISION: The ledger core never talks to a database directly.
Storage backends implement this interface and hand the core read-only
snapshots of records. This allows us to:
1. Use in-memory storage for testing
2. Push criteria down to SQL where the backend can evaluate them
3. Read a Google Sheet where it cannot

A backend that cannot supply records raises RetrievalFailed. It must not
return partial data or placeholder values instead.
"""

from abc import ABC, abstractmethod
from typing import Optional

from fundledger.models.ledger import FilterCriteria, FundContribution, Transaction


class LedgerStorageInterface(ABC):
    """
    Read interface every ledger backend implements.

    Backends return records in whatever order is native to them; the core
    imposes its own ordering.
    """

    #: Short name used in logs
    backend_name: str = "unknown"

    @abstractmethod
    async def fetch_transactions(
        self,
        criteria: Optional[FilterCriteria] = None,
    ) -> list[Transaction]:
        """
        Retrieve transactions.

        Args:
            criteria: Criteria to evaluate at the storage layer. None
                      returns every transaction.

        Returns:
            Matching transactions

        Raises:
            RetrievalFailed: If the backend cannot supply the records
        """
        pass

    @abstractmethod
    async def fetch_fund_contributions(self) -> list[FundContribution]:
        """
        Retrieve every fund contribution.

        Raises:
            RetrievalFailed: If the backend cannot supply the records
        """
        pass

    @abstractmethod
    async def list_banks(self) -> list[str]:
        """
        Distinct bank labels across all transactions, sorted.

        Transactions without a bank are not represented.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class RetrievalFailed(StorageError):
    """The backend could not supply the requested records."""
    pass


class StorageConnectionError(RetrievalFailed):
    """Could not connect to storage backend."""
    pass
