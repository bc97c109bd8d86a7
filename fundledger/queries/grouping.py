"""
Grouping & Per-Group Aggregator

Splits a filtered transaction set into per-bank statements. Each group's
balance is computed over that group's members only, and the group
balances must add up to the balance of the whole set. A mismatch is a
programming defect, so it raises instead of being reported as data.
"""

from decimal import Decimal
from typing import Iterable

from fundledger.models.ledger import Transaction
from fundledger.models.results import BankGroup
from fundledger.queries.balance import ZERO, balance


class AggregationInvariantViolated(RuntimeError):
    """Per-group totals do not reconcile with the overall total."""
    pass


def group_by_bank(transactions: Iterable[Transaction]) -> list[BankGroup]:
    """
    Partition by bank label ('Other' when missing).

    Groups come out in the order each label is first seen, members keep
    their input order. Feed this a date-ordered list to get a
    deterministic statement layout.
    """
    records = list(transactions)
    members: dict[str, list[Transaction]] = {}
    for txn in records:
        members.setdefault(txn.bank_label, []).append(txn)

    groups = [
        BankGroup(bank=bank, transactions=tuple(txns), balance=balance(txns))
        for bank, txns in members.items()
    ]
    reconcile(groups, balance(records))
    return groups


def reconcile(groups: Iterable[BankGroup], expected: Decimal) -> None:
    """Raise AggregationInvariantViolated unless the groups sum to `expected`."""
    group_list = list(groups)
    total = sum((group.balance for group in group_list), ZERO)
    if total != expected:
        raise AggregationInvariantViolated(
            f"Bank balances sum to {total} but the filtered set balances to {expected} "
            f"({len(group_list)} groups)"
        )


def distinct_banks(transactions: Iterable[Transaction]) -> list[str]:
    """Sorted bank labels actually present; unlabelled records are not counted."""
    return sorted({txn.bank for txn in transactions if txn.bank is not None})
