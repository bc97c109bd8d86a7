"""
Google Sheets Storage Implementation

DESIGN DECISION: A Google Sheet is supported as a read backend because
the fund's records are often kept in one by the friends themselves.

TRADEOFFS:
- No query language, so "pushdown" happens at this adapter's boundary:
  rows are parsed and narrowed here with the shared predicate before
  anything is returned
- No transactions (each read is one get_all_values() snapshot per sheet)

Unlike a forgiving importer, this backend does NOT skip rows it cannot
parse. A malformed row fails the whole retrieval: silently dropping a
transaction would silently change every balance.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from fundledger.config import GoogleSheetsSettings, get_settings
from fundledger.models.ledger import FilterCriteria, FundContribution, Transaction
from fundledger.queries.filters import filter_transactions
from fundledger.queries.grouping import distinct_banks
from fundledger.services.storage.interface import (
    LedgerStorageInterface,
    RetrievalFailed,
    StorageConnectionError,
)

logger = structlog.get_logger(__name__)


# Column mappings for the Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "amount",
    "transaction_date",
    "transaction_type",
    "transaction_category",
    "bank_name",
    "friend_name",
    "description",
]

# Column mappings for the FundContributions sheet
CONTRIBUTION_COLUMNS = [
    "id",
    "amount",
    "contribution_date",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for the connection.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials with read-only scopes.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets.readonly",
                    "https://www.googleapis.com/auth/drive.readonly",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError as e:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound as e:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def _get_worksheet(self, title: str) -> gspread.Worksheet:
        try:
            return self.get_spreadsheet().worksheet(title)
        except gspread.WorksheetNotFound as e:
            raise RetrievalFailed(f"Worksheet not found: {title}") from e

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self._get_worksheet(self._settings.transactions_sheet_name)

    def get_contributions_sheet(self) -> gspread.Worksheet:
        return self._get_worksheet(self._settings.contributions_sheet_name)


class GoogleSheetsLedgerStorage(LedgerStorageInterface):
    """
    Google Sheets implementation of ledger storage.

    One record per row, header in row 1. Column order follows
    TRANSACTION_COLUMNS and CONTRIBUTION_COLUMNS.
    """

    backend_name = "google_sheets"

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_transaction(self, row: list) -> Transaction:
        """Convert a spreadsheet row to a Transaction."""
        def safe_get(index: int) -> str:
            try:
                return row[index]
            except IndexError:
                return ""

        return Transaction(
            id=safe_get(0),
            amount=Decimal(safe_get(1)),
            date=date.fromisoformat(safe_get(2)),
            kind=safe_get(3),
            category=safe_get(4),
            bank=safe_get(5),
            counterparty=safe_get(6),
            description=safe_get(7),
        )

    def _row_to_contribution(self, row: list, sequence: int) -> FundContribution:
        """Convert a spreadsheet row to a FundContribution."""
        return FundContribution(
            id=row[0],
            amount=Decimal(row[1]),
            date=date.fromisoformat(row[2]),
            sequence=sequence,
        )

    def _read_rows(self, sheet: gspread.Worksheet) -> list[tuple[int, list]]:
        """All non-empty data rows with their sheet row number."""
        try:
            all_rows = sheet.get_all_values()
        except gspread.exceptions.APIError as e:
            raise RetrievalFailed(f"Failed to read worksheet: {e}") from e
        return [
            (row_number, row)
            for row_number, row in enumerate(all_rows[1:], start=2)  # Row 1 is header
            if any(cell.strip() for cell in row)
        ]

    def _load_transactions(self) -> list[Transaction]:
        sheet = self._client.get_transactions_sheet()
        records = []
        for row_number, row in self._read_rows(sheet):
            try:
                records.append(self._row_to_transaction(row))
            except (ValidationError, InvalidOperation, ValueError) as e:
                raise RetrievalFailed(
                    f"Malformed transaction in sheet row {row_number}: {e}"
                ) from e
        return records

    async def fetch_transactions(
        self,
        criteria: Optional[FilterCriteria] = None,
    ) -> list[Transaction]:
        records = self._load_transactions()
        if criteria is not None:
            records = filter_transactions(records, criteria)
        logger.debug(
            "sheets_transactions_fetched",
            row_count=len(records),
            criteria=criteria.describe() if criteria is not None else None,
        )
        return records

    async def fetch_fund_contributions(self) -> list[FundContribution]:
        sheet = self._client.get_contributions_sheet()
        contributions = []
        for sequence, (row_number, row) in enumerate(self._read_rows(sheet)):
            try:
                contributions.append(self._row_to_contribution(row, sequence))
            except (ValidationError, InvalidOperation, ValueError, IndexError) as e:
                raise RetrievalFailed(
                    f"Malformed fund contribution in sheet row {row_number}: {e}"
                ) from e
        return contributions

    async def list_banks(self) -> list[str]:
        return distinct_banks(self._load_transactions())
