"""Read-only expense totals over the daily ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlmodel import Session

from ..domain.repositories import ClientRepository
from ..errors import NotFoundError
from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelClientRepository,
    SQLModelDailyTransactionRepository,
    SQLModelMonthlyBudgetRepository,
)
from ..logging_config import get_logger
from ..models.daily_transaction import TransactionType
from .budget_policy import ZERO, month_bounds, parse_date, to_money
from .daily_transactions import DateLike
from .unit_of_work import DEFAULT_RETRY_ATTEMPTS, run_unit_of_work


@dataclass(slots=True)
class MonthlySummary:
    """Income/expense roll-up for one client-month, plus the budget figures if any."""

    year: int
    month: int
    income: Decimal
    expenses: Decimal
    daily_budget: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


class ExpenseAggregator:
    """Sums over persisted transactions; never writes."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        logger: Optional[logging.Logger] = None,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    ):
        self.session_factory = session_factory
        self.logger = logger or get_logger("services.aggregates")
        self.retry_attempts = retry_attempts

    def _run(self, operation: str, work):
        return run_unit_of_work(
            self.session_factory,
            work,
            logger=self.logger,
            operation=operation,
            attempts=self.retry_attempts,
        )

    @staticmethod
    def _require_client(session: Session, client_id: int) -> None:
        clients: ClientRepository = SQLModelClientRepository(session)
        if clients.get_by_id(client_id) is None:
            raise NotFoundError("Client", client_id)

    def sum_expenses_by_date(self, client_id: int, day: DateLike) -> Decimal:
        """Total expense amount booked on exactly ``day``."""

        target = parse_date(day)

        def work(session: Session) -> Decimal:
            self._require_client(session, client_id)
            return SQLModelDailyTransactionRepository(session).sum_expenses(
                client_id, target, target
            )

        return to_money(self._run("sum_expenses_by_date", work))

    def sum_expenses_by_month(self, client_id: int, year: int, month: int) -> Decimal:
        """Total expense amount from the first to the last day of the month."""

        start, end = month_bounds(year, month)

        def work(session: Session) -> Decimal:
            self._require_client(session, client_id)
            return SQLModelDailyTransactionRepository(session).sum_expenses(client_id, start, end)

        return to_money(self._run("sum_expenses_by_month", work))

    def monthly_summary(self, client_id: int, year: int, month: int) -> MonthlySummary:
        start, end = month_bounds(year, month)

        def work(session: Session) -> MonthlySummary:
            self._require_client(session, client_id)
            totals = SQLModelDailyTransactionRepository(session).get_period_totals(
                client_id, start, end
            )
            budget = SQLModelMonthlyBudgetRepository(session).get_for_month(client_id, year, month)
            return MonthlySummary(
                year=year,
                month=month,
                income=to_money(totals.get(TransactionType.INCOME.value, ZERO)),
                expenses=to_money(totals.get(TransactionType.EXPENSE.value, ZERO)),
                daily_budget=to_money(budget.daily_budget) if budget else None,
                remaining_balance=to_money(budget.remaining_balance) if budget else None,
            )

        return self._run("monthly_summary", work)
