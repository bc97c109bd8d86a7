"""
Filter Predicate Builder

DESIGN DECISION: There is exactly ONE predicate implementation.
Every code path that narrows transactions, whether a storage adapter
filtering at retrieval time or the in-memory strategy filtering after a
full fetch, goes through build_predicate(). Two paths can therefore never
disagree about which records match.

Each active criterion contributes one clause; clauses combine with AND.
An inactive criterion contributes nothing, so empty criteria give the
identity predicate.
"""

from typing import Callable, Iterable

from fundledger.models.ledger import (
    FilterCriteria,
    FundContribution,
    InvalidCriteria,
    Transaction,
)

Predicate = Callable[[Transaction], bool]


def _month_clause(month: int) -> Predicate:
    return lambda txn: txn.date.month == month


def _year_clause(year: int) -> Predicate:
    return lambda txn: txn.date.year == year


def _category_clause(category: str) -> Predicate:
    # None never equals an active label
    return lambda txn: txn.category == category


def _bank_clause(bank: str) -> Predicate:
    # Compares the raw field: bank="Other" does not match unlabelled records
    return lambda txn: txn.bank == bank


def build_predicate(criteria: FilterCriteria) -> Predicate:
    """
    Compose the criteria into a single include/exclude decision.

    The returned callable is pure: it only reads the transaction it is
    given, so it can be evaluated in any order and any number of times.
    """
    clauses: list[Predicate] = []
    if criteria.month is not None:
        clauses.append(_month_clause(criteria.month))
    if criteria.year is not None:
        clauses.append(_year_clause(criteria.year))
    if criteria.category is not None:
        clauses.append(_category_clause(criteria.category))
    if criteria.bank is not None:
        clauses.append(_bank_clause(criteria.bank))

    if not clauses:
        return lambda txn: True

    def predicate(txn: Transaction) -> bool:
        return all(clause(txn) for clause in clauses)

    return predicate


def matches(criteria: FilterCriteria, transaction: Transaction) -> bool:
    """Single-record convenience wrapper around build_predicate()."""
    return build_predicate(criteria)(transaction)


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: FilterCriteria,
) -> list[Transaction]:
    """Keep the transactions that satisfy every active criterion, in input order."""
    predicate = build_predicate(criteria)
    return [txn for txn in transactions if predicate(txn)]


def filter_contributions(
    contributions: Iterable[FundContribution],
    criteria: FilterCriteria,
) -> list[FundContribution]:
    """
    Narrow fund contributions by month and/or year.

    Contributions have no category or bank, so activating either of those
    is a caller error rather than something to ignore.
    """
    unsupported = [name for name in ("category", "bank") if getattr(criteria, name) is not None]
    if unsupported:
        raise InvalidCriteria(
            f"Fund contributions cannot be filtered by: {', '.join(unsupported)}",
            [f"{name}: not a fund contribution dimension" for name in unsupported],
        )

    selected = []
    for contribution in contributions:
        if criteria.month is not None and contribution.date.month != criteria.month:
            continue
        if criteria.year is not None and contribution.date.year != criteria.year:
            continue
        selected.append(contribution)
    return selected
