"""
Balance Calculator

The single sign mapping for the whole system:

    deposit                            -> +amount
    withdrawal, charges, mutual_funds  -> -amount
    anything else                      ->  0

Accumulation is done in Decimal so the result does not depend on the
order records are summed in, and balance(A + B) == balance(A) + balance(B)
for disjoint A and B. Per-bank statements rely on that.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from fundledger.models.ledger import Transaction, TransactionKind

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

KIND_SIGNS: dict[str, int] = {
    TransactionKind.DEPOSIT.value: 1,
    TransactionKind.WITHDRAWAL.value: -1,
    TransactionKind.CHARGES.value: -1,
    TransactionKind.MUTUAL_FUNDS.value: -1,
}


def quantize(amount: Decimal) -> Decimal:
    """Round to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def sign_for(kind: str) -> int:
    """+1, -1, or 0 for kinds that do not move the balance."""
    return KIND_SIGNS.get(kind, 0)


def signed_amount(transaction: Transaction) -> Decimal:
    return transaction.amount * sign_for(transaction.kind)


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Net balance of a set of transactions. Empty input gives 0.00."""
    total = ZERO
    for txn in transactions:
        total += signed_amount(txn)
    return quantize(total)


def totals_by_kind(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Unsigned total per kind, keyed in first-seen order."""
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        totals[txn.kind] = totals.get(txn.kind, ZERO) + txn.amount
    return {kind: quantize(total) for kind, total in totals.items()}


def totals_by_counterparty(
    transactions: Iterable[Transaction],
) -> list[tuple[str, Decimal]]:
    """
    Deposit totals per friend, largest first (ties by name).

    Deposits without a counterparty are left out; no placeholder name is
    invented for them.
    """
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if txn.kind != TransactionKind.DEPOSIT.value or txn.counterparty is None:
            continue
        totals[txn.counterparty] = totals.get(txn.counterparty, ZERO) + txn.amount

    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [(name, quantize(total)) for name, total in ranked]
