"""
In-Memory Storage

Holds records in lists, in insertion order. Used by tests and by callers
that already have a snapshot in hand. Criteria pushdown uses the shared
predicate, so it agrees with the in-memory strategy by construction.
"""

from typing import Iterable, Optional

from fundledger.models.ledger import FilterCriteria, FundContribution, Transaction
from fundledger.queries.filters import filter_transactions
from fundledger.queries.grouping import distinct_banks
from fundledger.services.storage.interface import LedgerStorageInterface


class InMemoryLedgerStorage(LedgerStorageInterface):
    """List-backed ledger storage."""

    backend_name = "memory"

    def __init__(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        contributions: Optional[Iterable[FundContribution]] = None,
    ):
        self._transactions: list[Transaction] = list(transactions or [])
        self._contributions: list[FundContribution] = []
        for contribution in contributions or []:
            self.add_contribution(contribution)

    def add_transaction(self, transaction: Transaction) -> Transaction:
        self._transactions.append(transaction)
        return transaction

    def add_contribution(self, contribution: FundContribution) -> FundContribution:
        """Store a contribution, stamping its creation sequence."""
        stamped = contribution.model_copy(update={"sequence": len(self._contributions)})
        self._contributions.append(stamped)
        return stamped

    async def fetch_transactions(
        self,
        criteria: Optional[FilterCriteria] = None,
    ) -> list[Transaction]:
        if criteria is None:
            return list(self._transactions)
        return filter_transactions(self._transactions, criteria)

    async def fetch_fund_contributions(self) -> list[FundContribution]:
        return list(self._contributions)

    async def list_banks(self) -> list[str]:
        return distinct_banks(self._transactions)
