"""
Audit Logger

DESIGN DECISION: Every ledger view that is computed is logged, together
with the criteria, the retrieval strategy that supplied the records and
the resulting balance. When two screens ever disagree about a balance,
the log shows which path produced which number.

Failures are logged here and then re-raised by the caller. Logging never
replaces an error with a default value.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from fundledger.models.ledger import FilterCriteria


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `log_level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper()))


class LedgerAuditLogger:
    """
    Structured event log for the ledger core.

    Event names are stable strings so they can be grepped and alerted on.
    """

    def __init__(self, logger=None):
        self._logger = logger or structlog.get_logger("fundledger.audit")

    def log_strategy_selected(
        self,
        criteria: FilterCriteria,
        strategy: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._logger.debug(
            "retrieval_strategy_selected",
            strategy=strategy,
            active_criteria=list(criteria.active_fields),
            correlation_id=str(correlation_id) if correlation_id else None,
        )

    def log_view_executed(
        self,
        view: str,
        criteria: FilterCriteria,
        result_count: int,
        total: Decimal,
        strategy: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successfully computed view."""
        self._logger.info(
            "ledger_view_executed",
            view=view,
            criteria=criteria.describe(),
            strategy=strategy,
            result_count=result_count,
            total=str(total),
            correlation_id=str(correlation_id) if correlation_id else None,
        )

    def log_retrieval_failed(
        self,
        view: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._logger.error(
            "ledger_retrieval_failed",
            view=view,
            error_type=type(error).__name__,
            error=str(error),
            correlation_id=str(correlation_id) if correlation_id else None,
        )

    def log_invariant_violated(
        self,
        view: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Reconciliation failures are defects: logged at critical."""
        self._logger.critical(
            "ledger_invariant_violated",
            view=view,
            error=str(error),
            correlation_id=str(correlation_id) if correlation_id else None,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a request and pass it through every call
    made on its behalf.
    """
    return uuid4()
