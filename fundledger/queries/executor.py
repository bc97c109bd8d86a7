"""
Ledger Query Execution Engine

DESIGN DECISION: View computation is DETERMINISTIC.
The executor fetches a snapshot through the storage interface, then runs
the pure core functions over it: filter, balance, group, running totals.
It holds no state between calls, so concurrent requests do not interact.

Errors are never turned into results. A retrieval failure or a
reconciliation failure is logged and re-raised unchanged; the caller gets
either a complete view or an exception.
"""

from typing import Optional
from uuid import UUID

from fundledger.audit.logger import LedgerAuditLogger
from fundledger.models.ledger import FilterCriteria
from fundledger.models.results import ContributionView, DashboardSummary, LedgerView
from fundledger.queries.balance import ZERO, balance, quantize, totals_by_counterparty, totals_by_kind
from fundledger.queries.cumulative import cumulative_totals, order_contributions
from fundledger.queries.filters import filter_contributions
from fundledger.queries.grouping import AggregationInvariantViolated, group_by_bank
from fundledger.queries.strategy import StrategySelector, order_newest_first
from fundledger.services.storage.interface import LedgerStorageInterface, RetrievalFailed


class LedgerQueryExecutor:
    """
    Computes ledger views from storage.

    GUARANTEES:
    - Only returns figures computed from records the storage supplied
    - Same criteria, same data: same view, whichever strategy ran
    - Bank statements always reconcile with the overall balance
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        selector: Optional[StrategySelector] = None,
        audit_logger: Optional[LedgerAuditLogger] = None,
    ):
        self._storage = storage
        self._selector = selector or StrategySelector()
        self._audit = audit_logger or LedgerAuditLogger()

    async def transactions_view(
        self,
        criteria: Optional[FilterCriteria] = None,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerView:
        """
        Filtered transactions with balance and per-bank statements.

        Raises:
            RetrievalFailed: Storage could not supply records
            AggregationInvariantViolated: Bank balances did not reconcile
        """
        criteria = criteria or FilterCriteria()
        strategy = self._selector.select(criteria)
        self._audit.log_strategy_selected(criteria, strategy.name, correlation_id)

        try:
            transactions = await strategy.fetch(self._storage, criteria)
            banks = await self._storage.list_banks()
        except RetrievalFailed as e:
            self._audit.log_retrieval_failed("transactions", e, correlation_id)
            raise

        net = balance(transactions)
        try:
            groups = group_by_bank(transactions)
        except AggregationInvariantViolated as e:
            self._audit.log_invariant_violated("transactions", e, correlation_id)
            raise

        view = LedgerView(
            criteria=criteria,
            strategy=strategy.name,
            transactions=transactions,
            balance=net,
            groups=groups,
            kind_totals=totals_by_kind(transactions),
            banks=banks,
        )
        self._audit.log_view_executed(
            "transactions",
            criteria,
            result_count=view.result_count,
            total=net,
            strategy=strategy.name,
            correlation_id=correlation_id,
        )
        return view

    async def contributions_view(
        self,
        criteria: Optional[FilterCriteria] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ContributionView:
        """
        Fund contributions in the month/year window with running totals.

        The running total starts at zero inside the window.

        Raises:
            InvalidCriteria: Category or bank was given
            RetrievalFailed: Storage could not supply records
        """
        criteria = criteria or FilterCriteria()
        try:
            contributions = await self._storage.fetch_fund_contributions()
        except RetrievalFailed as e:
            self._audit.log_retrieval_failed("contributions", e, correlation_id)
            raise

        window = order_contributions(filter_contributions(contributions, criteria))
        entries = cumulative_totals(window)
        total = entries[-1].running_total if entries else ZERO

        self._audit.log_view_executed(
            "contributions",
            criteria,
            result_count=len(entries),
            total=total,
            correlation_id=correlation_id,
        )
        return ContributionView(criteria=criteria, entries=entries, total=total)

    async def dashboard(
        self,
        recent_limit: int = 5,
        correlation_id: Optional[UUID] = None,
    ) -> DashboardSummary:
        """
        Headline figures across the whole ledger.

        Raises:
            RetrievalFailed: Storage could not supply records
        """
        try:
            transactions = await self._storage.fetch_transactions(None)
            contributions = await self._storage.fetch_fund_contributions()
            banks = await self._storage.list_banks()
        except RetrievalFailed as e:
            self._audit.log_retrieval_failed("dashboard", e, correlation_id)
            raise

        ordered = order_newest_first(transactions)
        current = balance(ordered)
        contributed = quantize(sum((c.amount for c in contributions), ZERO))

        summary = DashboardSummary(
            current_balance=current,
            kind_totals=totals_by_kind(ordered),
            counterparty_totals=totals_by_counterparty(ordered),
            bank_count=len(banks),
            total_fund_contributions=contributed,
            recent_transactions=ordered[:recent_limit],
        )
        self._audit.log_view_executed(
            "dashboard",
            FilterCriteria(),
            result_count=len(ordered),
            total=current,
            correlation_id=correlation_id,
        )
        return summary
