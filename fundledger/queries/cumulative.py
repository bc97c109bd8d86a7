"""
Cumulative Sequence Generator

Running totals over fund contributions. The total at position i is the
exact sum of amounts 0..i, so the input order matters: it must already be
ascending by date, with same-day contributions in creation order.
"""

from typing import Iterable

from fundledger.models.ledger import FundContribution
from fundledger.models.results import CumulativeEntry
from fundledger.queries.balance import ZERO, quantize


def order_contributions(
    contributions: Iterable[FundContribution],
) -> list[FundContribution]:
    """Sort by date, then creation sequence."""
    return sorted(contributions, key=lambda c: (c.date, c.sequence))


def cumulative_totals(
    contributions: Iterable[FundContribution],
) -> list[CumulativeEntry]:
    """
    Left-to-right prefix sum.

    Raises:
        ValueError: If a contribution is dated before its predecessor.
    """
    entries = []
    running = ZERO
    previous = None
    for contribution in contributions:
        if previous is not None and contribution.date < previous.date:
            raise ValueError(
                f"Contributions must be ordered by date: {contribution.id} "
                f"({contribution.date}) follows {previous.id} ({previous.date})"
            )
        running += contribution.amount
        entries.append(
            CumulativeEntry(contribution=contribution, running_total=quantize(running))
        )
        previous = contribution
    return entries
