"""
Data Models Package

Pydantic models for the records the ledger reads and the views it returns.
"""

from fundledger.models.ledger import (
    FILTER_FIELDS,
    OTHER_BANK,
    FilterCriteria,
    FundContribution,
    InvalidCriteria,
    Transaction,
    TransactionKind,
)
from fundledger.models.results import (
    BankGroup,
    ContributionView,
    CumulativeEntry,
    DashboardSummary,
    LedgerView,
)

__all__ = [
    # Records
    "FILTER_FIELDS",
    "OTHER_BANK",
    "FilterCriteria",
    "FundContribution",
    "InvalidCriteria",
    "Transaction",
    "TransactionKind",
    # Results
    "BankGroup",
    "ContributionView",
    "CumulativeEntry",
    "DashboardSummary",
    "LedgerView",
]
