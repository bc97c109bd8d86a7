"""
Tests for the storage backends.

SQL runs against a temporary SQLite file. Google Sheets runs against a
fake client serving canned worksheet values; no Google API is called.
"""

from datetime import date
from decimal import Decimal

import pytest

from fundledger.models.ledger import FilterCriteria, FundContribution, Transaction
from fundledger.services.storage import (
    GoogleSheetsLedgerStorage,
    InMemoryLedgerStorage,
    RetrievalFailed,
    SQLLedgerStorage,
    StorageConnectionError,
    StorageError,
)


# =============================================================================
# SQL
# =============================================================================

@pytest.fixture
def empty_sql_storage(tmp_path):
    storage = SQLLedgerStorage(database_url=f"sqlite:///{tmp_path / 'empty.db'}")
    storage.create_schema()
    return storage


class TestSQLLedgerStorage:
    """Tests for SQLLedgerStorage."""

    def test_needs_engine_or_url(self):
        with pytest.raises(StorageError):
            SQLLedgerStorage()

    def test_create_schema_is_idempotent(self, sql_storage, run):
        sql_storage.create_schema()
        assert len(run(sql_storage.fetch_transactions())) == 11

    def test_missing_schema_fails_retrieval(self, tmp_path, run):
        storage = SQLLedgerStorage(database_url=f"sqlite:///{tmp_path / 'bare.db'}")
        with pytest.raises(RetrievalFailed):
            run(storage.fetch_transactions())
        with pytest.raises(StorageConnectionError):
            run(storage.list_banks())

    def test_insert_assigns_ids(self, empty_sql_storage, run):
        stored = empty_sql_storage.insert_transaction(
            Transaction(
                amount=Decimal("12.34"),
                date=date(2024, 4, 1),
                kind="deposit",
                bank="SBI",
                counterparty="Ravi",
                description="April share",
            )
        )
        assert stored.id == "1"

        fetched = run(empty_sql_storage.fetch_transactions())
        assert fetched == [stored]

    def test_amounts_keep_cents(self, sql_storage, run):
        fetched = run(sql_storage.fetch_transactions(FilterCriteria(bank="ICICI")))
        assert sorted(t.amount for t in fetched) == [Decimal("5.50"), Decimal("12.00")]

    def test_pushdown_month(self, sql_storage, run):
        fetched = run(sql_storage.fetch_transactions(FilterCriteria(month=1)))
        assert sorted(t.id for t in fetched) == ["1", "11", "2", "3", "8"]

    def test_pushdown_combined(self, sql_storage, run):
        criteria = FilterCriteria(month=2, year=2024, category="contribution", bank="SBI")
        fetched = run(sql_storage.fetch_transactions(criteria))
        assert [t.id for t in fetched] == ["5"]

    def test_bank_match_is_exact(self, sql_storage, run):
        upper = run(sql_storage.fetch_transactions(FilterCriteria(bank="HDFC")))
        lower = run(sql_storage.fetch_transactions(FilterCriteria(bank="hdfc")))
        assert sorted(t.id for t in upper) == ["1", "2", "6"]
        assert [t.id for t in lower] == ["11"]

    def test_null_bank_never_matches(self, sql_storage, run):
        assert run(sql_storage.fetch_transactions(FilterCriteria(bank="Other"))) == []

    def test_native_order_is_newest_first(self, sql_storage, run):
        fetched = run(sql_storage.fetch_transactions())
        dates = [t.date for t in fetched]
        assert dates == sorted(dates, reverse=True)

    def test_list_banks(self, sql_storage, run):
        assert run(sql_storage.list_banks()) == ["HDFC", "ICICI", "SBI", "hdfc"]

    def test_list_banks_empty(self, empty_sql_storage, run):
        assert run(empty_sql_storage.list_banks()) == []

    def test_contributions_in_date_order(self, sql_storage, run):
        contributions = run(sql_storage.fetch_fund_contributions())
        assert [c.amount for c in contributions] == [
            Decimal("40.00"), Decimal("100.00"), Decimal("50.00"), Decimal("25.00"),
        ]
        assert [c.sequence for c in contributions] == [4, 1, 2, 3]

    def test_insert_contribution_sets_sequence(self, empty_sql_storage):
        stored = empty_sql_storage.insert_fund_contribution(
            FundContribution(amount=Decimal("-10.00"), date=date(2024, 1, 1))
        )
        assert stored.id == "1"
        assert stored.sequence == 1
        assert stored.amount == Decimal("-10.00")


# =============================================================================
# IN MEMORY
# =============================================================================

class TestInMemoryLedgerStorage:
    """Tests for InMemoryLedgerStorage."""

    def test_contributions_are_sequenced(self, memory_storage, run):
        contributions = run(memory_storage.fetch_fund_contributions())
        assert [(c.id, c.sequence) for c in contributions] == [
            ("c1", 0), ("c2", 1), ("c3", 2), ("c4", 3),
        ]

    def test_fetch_returns_a_copy(self, memory_storage, run):
        first = run(memory_storage.fetch_transactions())
        first.clear()
        assert len(run(memory_storage.fetch_transactions())) == 11

    def test_add_transaction(self, make_transaction, run):
        storage = InMemoryLedgerStorage()
        storage.add_transaction(make_transaction(bank="Axis"))
        assert run(storage.list_banks()) == ["Axis"]

    def test_pushdown(self, memory_storage, run):
        fetched = run(memory_storage.fetch_transactions(FilterCriteria(year=2023)))
        assert [t.id for t in fetched] == ["t008", "t009", "t010", "t011"]


# =============================================================================
# GOOGLE SHEETS
# =============================================================================

TRANSACTION_HEADER = [
    "id", "amount", "transaction_date", "transaction_type",
    "transaction_category", "bank_name", "friend_name", "description",
]
CONTRIBUTION_HEADER = ["id", "amount", "contribution_date"]


class FakeWorksheet:
    def __init__(self, values):
        self._values = values

    def get_all_values(self):
        return self._values


class FakeSheetsClient:
    """Serves fixed worksheet contents in place of GoogleSheetsClient."""

    def __init__(self, transactions=None, contributions=None):
        self._transactions = FakeWorksheet([TRANSACTION_HEADER] + (transactions or []))
        self._contributions = FakeWorksheet([CONTRIBUTION_HEADER] + (contributions or []))

    def get_transactions_sheet(self):
        return self._transactions

    def get_contributions_sheet(self):
        return self._contributions


class MissingSheetClient(FakeSheetsClient):
    def get_transactions_sheet(self):
        raise RetrievalFailed("Worksheet not found: Transactions")


@pytest.fixture
def sheet_rows():
    return [
        ["1", "500.00", "2024-01-05", "deposit", "contribution", "HDFC", "Asha", ""],
        ["2", "100", "2024-01-20", "withdrawal", "transfer", "HDFC", "", ""],
        ["", "", "", "", "", "", "", ""],
        ["3", "20.00", "2024-01-31", "charges", "bank_charges", "SBI"],
        ["4", "75.00", "2023-12-25", "deposit", "", " ", "Asha", "cash"],
    ]


@pytest.fixture
def sheets_storage(sheet_rows):
    client = FakeSheetsClient(
        transactions=sheet_rows,
        contributions=[
            ["1", "100.00", "2024-01-10"],
            ["  ", "", ""],
            ["2", "50", "2024-02-10"],
            ["3", "-10.00", "2024-02-10"],
        ],
    )
    return GoogleSheetsLedgerStorage(client)


class TestGoogleSheetsLedgerStorage:
    """Tests for GoogleSheetsLedgerStorage."""

    def test_reads_rows_and_skips_blank_ones(self, sheets_storage, run):
        transactions = run(sheets_storage.fetch_transactions())
        assert [t.id for t in transactions] == ["1", "2", "3", "4"]

    def test_short_rows_and_blank_cells(self, sheets_storage, run):
        transactions = {t.id: t for t in run(sheets_storage.fetch_transactions())}
        assert transactions["3"].counterparty is None
        assert transactions["3"].description is None
        assert transactions["4"].bank is None
        assert transactions["4"].category is None
        assert transactions["2"].amount == Decimal("100")

    def test_pushdown_uses_shared_predicate(self, sheets_storage, run):
        hdfc = run(sheets_storage.fetch_transactions(FilterCriteria(bank="HDFC")))
        january = run(sheets_storage.fetch_transactions(FilterCriteria(month=1)))
        assert [t.id for t in hdfc] == ["1", "2"]
        assert [t.id for t in january] == ["1", "2", "3"]

    def test_list_banks(self, sheets_storage, run):
        assert run(sheets_storage.list_banks()) == ["HDFC", "SBI"]

    @pytest.mark.parametrize("bad_row", [
        ["5", "abc", "2024-01-05", "deposit"],
        ["5", "10.00", "2024-13-01", "deposit"],
        ["5", "-10.00", "2024-01-05", "deposit"],
        ["5", "10.005", "2024-01-05", "deposit"],
        ["", "10.00", "2024-01-05", "deposit"],
        ["5", "10.00", "2024-01-05", ""],
    ])
    def test_malformed_row_fails_retrieval(self, sheet_rows, bad_row, run):
        storage = GoogleSheetsLedgerStorage(FakeSheetsClient(transactions=sheet_rows + [bad_row]))
        with pytest.raises(RetrievalFailed, match="sheet row 7"):
            run(storage.fetch_transactions())

    def test_missing_worksheet(self, run):
        storage = GoogleSheetsLedgerStorage(MissingSheetClient())
        with pytest.raises(RetrievalFailed, match="Worksheet not found"):
            run(storage.fetch_transactions())

    def test_contributions(self, sheets_storage, run):
        contributions = run(sheets_storage.fetch_fund_contributions())
        assert [(c.id, c.amount, c.sequence) for c in contributions] == [
            ("1", Decimal("100.00"), 0),
            ("2", Decimal("50"), 1),
            ("3", Decimal("-10.00"), 2),
        ]

    def test_short_contribution_row_fails(self, run):
        storage = GoogleSheetsLedgerStorage(FakeSheetsClient(contributions=[["1", "50"]]))
        with pytest.raises(RetrievalFailed, match="sheet row 2"):
            run(storage.fetch_fund_contributions())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
