"""
SQL Storage Implementation

SQLAlchemy Core tables for transactions and fund contributions. This is the
backend where criteria pushdown is real: active criteria become WHERE
clauses and the database does the narrowing.

The translation below must stay equivalent to queries.filters: month and
year are extracted from the date column, category and bank are exact
equality on the trimmed label (Transaction strips labels when it loads
them), and NULL never equals an active value.

Schema creation is an explicit, idempotent step (create_schema) that the
hosting application calls once at start-up.
"""

from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    create_engine,
    extract,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from fundledger.models.ledger import FilterCriteria, FundContribution, Transaction
from fundledger.queries.balance import quantize
from fundledger.services.storage.interface import (
    LedgerStorageInterface,
    RetrievalFailed,
    StorageConnectionError,
    StorageError,
)

logger = structlog.get_logger(__name__)

metadata = MetaData()

transactions = Table(
    "transactions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("amount", Numeric(10, 2), nullable=False),
    Column("transaction_date", Date, nullable=False),
    Column("transaction_type", String(50), nullable=False),
    Column("transaction_category", String(100)),
    Column("bank_name", String(255)),
    Column("friend_name", String(255)),
    Column("description", String(1000)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

fund_contributions = Table(
    "fund_contributions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("amount", Numeric(10, 2), nullable=False),
    Column("contribution_date", Date, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def criteria_conditions(criteria: FilterCriteria) -> list:
    """Translate criteria into WHERE clauses on the transactions table."""
    conditions = []
    if criteria.month is not None:
        conditions.append(extract("month", transactions.c.transaction_date) == criteria.month)
    if criteria.year is not None:
        conditions.append(extract("year", transactions.c.transaction_date) == criteria.year)
    if criteria.category is not None:
        conditions.append(func.trim(transactions.c.transaction_category) == criteria.category)
    if criteria.bank is not None:
        conditions.append(func.trim(transactions.c.bank_name) == criteria.bank)
    return conditions


class SQLLedgerStorage(LedgerStorageInterface):
    """
    Relational implementation of ledger storage.

    Reads are the contract the core depends on. The insert helpers exist
    for seeding and for the CRUD layer; they return the stored model with
    its database id.
    """

    backend_name = "sql"

    def __init__(
        self,
        engine: Optional[Engine] = None,
        database_url: Optional[str] = None,
        echo: bool = False,
    ):
        if engine is None:
            if database_url is None:
                raise StorageError("SQLLedgerStorage needs an engine or a database_url")
            engine = build_engine(database_url, echo=echo)
        self._engine = engine

    def create_schema(self) -> None:
        """Create missing tables. Safe to call repeatedly."""
        try:
            metadata.create_all(self._engine)
        except OperationalError as e:
            raise StorageConnectionError(f"Failed to create ledger schema: {e}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create ledger schema: {e}") from e

    def _row_to_transaction(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            amount=quantize(Decimal(row["amount"])),
            date=row["transaction_date"],
            kind=row["transaction_type"],
            category=row["transaction_category"],
            bank=row["bank_name"],
            counterparty=row["friend_name"],
            description=row["description"],
        )

    def _row_to_contribution(self, row) -> FundContribution:
        return FundContribution(
            id=row["id"],
            amount=quantize(Decimal(row["amount"])),
            date=row["contribution_date"],
            sequence=row["id"],
        )

    def insert_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a transaction; the database assigns its id."""
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    insert(transactions).values(
                        amount=transaction.amount,
                        transaction_date=transaction.date,
                        transaction_type=transaction.kind,
                        transaction_category=transaction.category,
                        bank_name=transaction.bank,
                        friend_name=transaction.counterparty,
                        description=transaction.description,
                    )
                )
                new_id = result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save transaction: {e}") from e
        return transaction.model_copy(update={"id": str(new_id)})

    def insert_fund_contribution(self, contribution: FundContribution) -> FundContribution:
        """Persist a fund contribution; its id doubles as creation sequence."""
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    insert(fund_contributions).values(
                        amount=contribution.amount,
                        contribution_date=contribution.date,
                    )
                )
                new_id = result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save fund contribution: {e}") from e
        return contribution.model_copy(update={"id": str(new_id), "sequence": new_id})

    async def fetch_transactions(
        self,
        criteria: Optional[FilterCriteria] = None,
    ) -> list[Transaction]:
        """Select transactions, evaluating criteria in the database."""
        stmt = select(transactions)
        if criteria is not None:
            conditions = criteria_conditions(criteria)
            if conditions:
                stmt = stmt.where(*conditions)
        stmt = stmt.order_by(
            transactions.c.transaction_date.desc(),
            transactions.c.id.desc(),
        )

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except OperationalError as e:
            raise StorageConnectionError(f"Failed to fetch transactions: {e}") from e
        except SQLAlchemyError as e:
            raise RetrievalFailed(f"Failed to fetch transactions: {e}") from e

        logger.debug(
            "sql_transactions_fetched",
            row_count=len(rows),
            criteria=criteria.describe() if criteria is not None else None,
        )
        return [self._row_to_transaction(row) for row in rows]

    async def fetch_fund_contributions(self) -> list[FundContribution]:
        stmt = select(fund_contributions).order_by(
            fund_contributions.c.contribution_date.asc(),
            fund_contributions.c.id.asc(),
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except OperationalError as e:
            raise StorageConnectionError(f"Failed to fetch fund contributions: {e}") from e
        except SQLAlchemyError as e:
            raise RetrievalFailed(f"Failed to fetch fund contributions: {e}") from e
        return [self._row_to_contribution(row) for row in rows]

    async def list_banks(self) -> list[str]:
        trimmed = func.trim(transactions.c.bank_name)
        bank_label = trimmed.label("bank_label")
        stmt = (
            select(bank_label)
            .where(transactions.c.bank_name.is_not(None))
            .where(trimmed != "")
            .distinct()
            .order_by(bank_label)
        )
        try:
            with self._engine.connect() as conn:
                return list(conn.execute(stmt).scalars().all())
        except OperationalError as e:
            raise StorageConnectionError(f"Failed to list banks: {e}") from e
        except SQLAlchemyError as e:
            raise RetrievalFailed(f"Failed to list banks: {e}") from e
