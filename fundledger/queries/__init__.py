"""
Ledger query package.

The pure core (filters, balance, grouping, cumulative) is imported before
the strategy and executor layers that sit on top of storage.
"""

from fundledger.queries.filters import (
    build_predicate,
    filter_contributions,
    filter_transactions,
    matches,
)
from fundledger.queries.balance import (
    KIND_SIGNS,
    balance,
    sign_for,
    signed_amount,
    totals_by_counterparty,
    totals_by_kind,
)
from fundledger.queries.grouping import (
    AggregationInvariantViolated,
    distinct_banks,
    group_by_bank,
    reconcile,
)
from fundledger.queries.cumulative import cumulative_totals, order_contributions
from fundledger.queries.strategy import (
    InMemoryStrategy,
    PushdownStrategy,
    RetrievalStrategy,
    StrategySelector,
    order_newest_first,
)
from fundledger.queries.executor import LedgerQueryExecutor

__all__ = [
    # Filter Predicate Builder
    "build_predicate",
    "filter_contributions",
    "filter_transactions",
    "matches",
    # Balance Calculator
    "KIND_SIGNS",
    "balance",
    "sign_for",
    "signed_amount",
    "totals_by_counterparty",
    "totals_by_kind",
    # Grouping
    "AggregationInvariantViolated",
    "distinct_banks",
    "group_by_bank",
    "reconcile",
    # Cumulative Sequence Generator
    "cumulative_totals",
    "order_contributions",
    # Retrieval strategies
    "InMemoryStrategy",
    "PushdownStrategy",
    "RetrievalStrategy",
    "StrategySelector",
    "order_newest_first",
    # Executor
    "LedgerQueryExecutor",
]
