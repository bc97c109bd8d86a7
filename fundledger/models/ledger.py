"""
Core Data Models for FundLedger

These models define the strict schemas for the records the ledger core
works on. They are handed to the core as read-only snapshots by a storage
collaborator, so every model here is frozen.

DESIGN DECISION: Money is always Decimal with at most 2 fractional digits.
A transaction amount is a magnitude; its direction comes from its kind.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)


# =============================================================================
# ENUMS & CONSTANTS
# =============================================================================

class TransactionKind(str, Enum):
    """
    Transaction kinds known to the ledger.

    The set is open-ended: stored records may carry kinds that are not
    listed here and they must still load. Unknown kinds simply do not move
    the balance.
    """
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    CHARGES = "charges"
    MUTUAL_FUNDS = "mutual_funds"
    JENISH_PERSONAL = "jenish_personal"


# Grouping key for transactions that have no bank label
OTHER_BANK = "Other"

# Order in which criteria fields are reported
FILTER_FIELDS = ("month", "year", "category", "bank")


class InvalidCriteria(ValueError):
    """Filter criteria or request parameters are malformed."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        super().__init__(message)
        self.problems = list(problems or [])


# =============================================================================
# RECORDS
# =============================================================================

def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Transaction(BaseModel):
    """
    A single bank transaction.

    Only `deposit` transactions normally carry a counterparty (the friend
    who paid in), but the model does not enforce it: stored data is
    accepted as it is.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Opaque identifier assigned at creation"
    )
    amount: Annotated[
        Decimal,
        Field(ge=0, decimal_places=2, description="Magnitude of the transaction")
    ]
    date: datetime.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    kind: str = Field(
        ...,
        min_length=1,
        description="Transaction kind, see TransactionKind"
    )
    category: Optional[str] = Field(
        default=None,
        description="Free-form category label (e.g. 'bank_charges')"
    )
    bank: Optional[str] = Field(
        default=None,
        description="Originating bank account label"
    )
    counterparty: Optional[str] = Field(
        default=None,
        description="Friend the deposit is attributed to"
    )
    description: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        """Storage backends with integer keys hand us ints."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("kind", mode="before")
    @classmethod
    def unwrap_kind(cls, v):
        if isinstance(v, TransactionKind):
            return v.value
        return v

    @field_validator("category", "bank", "counterparty", "description", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        """Empty labels from storage mean 'not set'."""
        return _blank_to_none(v)

    @property
    def bank_label(self) -> str:
        """Bank label used for grouping."""
        return self.bank if self.bank is not None else OTHER_BANK


class FundContribution(BaseModel):
    """
    A contribution into the mutual fund.

    `sequence` is the creation order. Several contributions can share a
    date, so ordering is (date, sequence).

    Amounts are signed so that corrections can be recorded.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
    )
    amount: Annotated[
        Decimal,
        Field(decimal_places=2, description="Contribution amount")
    ]
    date: datetime.date
    sequence: int = Field(
        default=0,
        ge=0,
        description="Creation order, breaks ties between equal dates"
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


# =============================================================================
# FILTER CRITERIA
# =============================================================================

class FilterCriteria(BaseModel):
    """
    Optional filter dimensions a caller may activate.

    `None` means "do not filter on this dimension". Active fields combine
    with AND. Construction with a malformed value raises InvalidCriteria;
    values are never clamped.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    month: Optional[int] = Field(default=None, ge=1, le=12, strict=True)
    year: Optional[int] = Field(default=None, ge=1, le=9999, strict=True)
    category: Optional[str] = Field(default=None, min_length=1)
    bank: Optional[str] = Field(default=None, min_length=1)

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            problems = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise InvalidCriteria(
                "Invalid filter criteria: " + "; ".join(problems),
                problems,
            ) from exc

    @property
    def active_fields(self) -> tuple[str, ...]:
        """Names of the fields that constrain the result."""
        return tuple(name for name in FILTER_FIELDS if getattr(self, name) is not None)

    @property
    def active_count(self) -> int:
        return len(self.active_fields)

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0

    def describe(self) -> str:
        """Human-readable summary, used in logs."""
        if self.is_empty:
            return "all records"
        return " | ".join(f"{name}: {getattr(self, name)}" for name in self.active_fields)
