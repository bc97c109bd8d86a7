"""
Result Models

What the ledger core hands back to its callers. These are the only shapes
the presentation layer sees; it never reads storage directly.
"""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from fundledger.models.ledger import FilterCriteria, FundContribution, Transaction


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BankGroup(BaseModel):
    """One bank's slice of a filtered transaction set."""
    model_config = ConfigDict(frozen=True)

    bank: str = Field(
        ...,
        description="Bank label, or 'Other' for transactions without one"
    )
    transactions: tuple[Transaction, ...] = Field(
        default_factory=tuple,
        description="Members in input order"
    )
    balance: Decimal = Field(
        ...,
        description="Net balance over this group's members only"
    )

    @property
    def count(self) -> int:
        return len(self.transactions)


class CumulativeEntry(BaseModel):
    """A fund contribution paired with the running total up to it."""
    model_config = ConfigDict(frozen=True)

    contribution: FundContribution
    running_total: Decimal

    @property
    def formatted_total(self) -> str:
        """Running total with exactly two fractional digits."""
        return f"{self.running_total:.2f}"


class LedgerView(BaseModel):
    """
    Filtered transaction view.

    Transactions are newest first. `banks` lists every bank label in the
    store (not only the filtered ones) so callers can offer filter choices.
    """

    criteria: FilterCriteria
    strategy: str = Field(
        ...,
        description="Retrieval strategy that supplied the records"
    )
    executed_at: datetime = Field(default_factory=_now)

    transactions: list[Transaction] = Field(default_factory=list)
    balance: Decimal
    groups: list[BankGroup] = Field(default_factory=list)
    kind_totals: dict[str, Decimal] = Field(default_factory=dict)
    banks: list[str] = Field(default_factory=list)

    @property
    def result_count(self) -> int:
        return len(self.transactions)


class ContributionView(BaseModel):
    """Fund contributions in date order with running totals."""

    criteria: FilterCriteria
    executed_at: datetime = Field(default_factory=_now)

    entries: list[CumulativeEntry] = Field(default_factory=list)
    total: Decimal = Field(
        ...,
        description="Sum of the contributions in the window"
    )


class DashboardSummary(BaseModel):
    """Headline figures for the dashboard."""

    executed_at: datetime = Field(default_factory=_now)

    current_balance: Decimal
    kind_totals: dict[str, Decimal] = Field(default_factory=dict)
    counterparty_totals: list[tuple[str, Decimal]] = Field(
        default_factory=list,
        description="Deposit totals per friend, largest first"
    )
    bank_count: int = Field(ge=0)
    total_fund_contributions: Decimal
    recent_transactions: list[Transaction] = Field(default_factory=list)
