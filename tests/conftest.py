"""
Shared fixtures for FundLedger tests.

Test strategy:
1. Unit tests for the pure core (filters, balance, grouping, running totals)
2. Consistency tests running every backend through both retrieval strategies
3. No real Google API calls (a fake worksheet client stands in)
"""

import asyncio
from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from fundledger.models.ledger import FundContribution, Transaction
from fundledger.services.storage import InMemoryLedgerStorage, SQLLedgerStorage


@pytest.fixture
def make_transaction():
    """Factory for transactions with readable defaults."""
    ids = count(1)

    def factory(
        kind="deposit",
        amount="100.00",
        on=date(2024, 1, 15),
        bank=None,
        category=None,
        counterparty=None,
        description=None,
        id=None,
    ) -> Transaction:
        return Transaction(
            id=id if id is not None else f"t{next(ids):03d}",
            amount=Decimal(amount),
            date=on,
            kind=kind,
            category=category,
            bank=bank,
            counterparty=counterparty,
            description=description,
        )

    return factory


@pytest.fixture
def sample_transactions(make_transaction):
    """
    A small ledger spanning two years, three banks and unlabelled records.

    Net balance: 500 + 250 + 75 - 100 - 20 - 200 - 40 - 5.50 - 60 = 399.50
    (the jenish_personal and refund rows are neutral).
    """
    return [
        make_transaction("deposit", "500.00", date(2024, 1, 5), bank="HDFC", category="contribution", counterparty="Asha"),
        make_transaction("withdrawal", "100.00", date(2024, 1, 20), bank="HDFC", category="transfer"),
        make_transaction("charges", "20.00", date(2024, 1, 31), bank="SBI", category="bank_charges"),
        make_transaction("mutual_funds", "200.00", date(2024, 2, 3), bank="SBI", category="mutual_fund"),
        make_transaction("deposit", "250.00", date(2024, 2, 14), bank="SBI", category="contribution", counterparty="Ravi"),
        make_transaction("jenish_personal", "80.00", date(2024, 2, 14), bank="HDFC"),
        make_transaction("withdrawal", "40.00", date(2024, 3, 1), category="transfer"),
        make_transaction("charges", "5.50", date(2023, 1, 10), bank="ICICI", category="bank_charges"),
        make_transaction("deposit", "75.00", date(2023, 12, 25), counterparty="Asha"),
        make_transaction("refund", "12.00", date(2023, 12, 26), bank="ICICI"),
        make_transaction("withdrawal", "60.00", date(2023, 1, 18), bank="hdfc", category="transfer"),
    ]


@pytest.fixture
def sample_contributions():
    return [
        FundContribution(id="c1", amount=Decimal("100.00"), date=date(2024, 1, 10)),
        FundContribution(id="c2", amount=Decimal("50.00"), date=date(2024, 2, 10)),
        FundContribution(id="c3", amount=Decimal("25.00"), date=date(2024, 2, 10)),
        FundContribution(id="c4", amount=Decimal("40.00"), date=date(2023, 11, 2)),
    ]


@pytest.fixture
def memory_storage(sample_transactions, sample_contributions):
    return InMemoryLedgerStorage(sample_transactions, sample_contributions)


@pytest.fixture
def sql_storage(tmp_path, sample_transactions, sample_contributions):
    """SQLite-backed storage seeded with the sample ledger."""
    storage = SQLLedgerStorage(database_url=f"sqlite:///{tmp_path / 'ledger.db'}")
    storage.create_schema()
    for txn in sample_transactions:
        storage.insert_transaction(txn)
    for contribution in sample_contributions:
        storage.insert_fund_contribution(contribution)
    return storage


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run
