"""Monthly budget store: get-or-create, policy updates and balance deltas.

``apply_delta`` is the only way the ledger moves a budget's remaining balance.
Every public method opens its own unit of work; the ``*_in`` variants run
inside a session the caller already holds so the ledger can combine budget and
transaction writes atomically.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..domain.repositories import MonthlyBudgetRepository
from ..errors import ConflictError, InvalidAmountError, NotFoundError
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelClientRepository, SQLModelMonthlyBudgetRepository
from ..logging_config import get_logger
from ..models.client import Client
from ..models.monthly_budget import MonthlyBudget
from .budget_policy import (
    ZERO,
    MoneyLike,
    compute_daily_budget,
    compute_days_in_month,
    compute_effective_amount,
    signed_amount,
    to_money,
    validate_percentage,
)
from .unit_of_work import DEFAULT_RETRY_ATTEMPTS, run_unit_of_work


def _non_negative(value: MoneyLike, label: str) -> Decimal:
    amount = to_money(value)
    if amount < 0:
        raise InvalidAmountError(f"{label} cannot be negative, got {amount}")
    return amount


class MonthlyBudgetService:
    """Owns the per-(client, year, month) budget rows."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        logger: Optional[logging.Logger] = None,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    ):
        self.session_factory = session_factory
        self.logger = logger or get_logger("services.monthly_budgets")
        self.retry_attempts = retry_attempts

    def _run(self, operation: str, work):
        return run_unit_of_work(
            self.session_factory,
            work,
            logger=self.logger,
            operation=operation,
            attempts=self.retry_attempts,
        )

    # ------------------------------------------------------------------
    # Session-scoped operations
    # ------------------------------------------------------------------

    def require_client_in(self, session: Session, client_id: int) -> Client:
        client = SQLModelClientRepository(session).get_by_id(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    def get_in(self, session: Session, budget_id: int, *, for_update: bool = False) -> MonthlyBudget:
        budget = SQLModelMonthlyBudgetRepository(session).get_by_id(budget_id, for_update=for_update)
        if budget is None:
            raise NotFoundError("Monthly budget", budget_id)
        return budget

    def get_or_create_in(
        self,
        session: Session,
        client_id: int,
        year: int,
        month: int,
        salary: Optional[MoneyLike] = None,
    ) -> MonthlyBudget:
        """Return the client's budget for the period, inserting a blank one if absent.

        A concurrent insert of the same period trips the unique constraint; the
        insert runs in a SAVEPOINT so only it is rolled back before re-reading
        the winner's row.
        """

        days_in_month = compute_days_in_month(year, month)
        client = self.require_client_in(session, client_id)
        repo: MonthlyBudgetRepository = SQLModelMonthlyBudgetRepository(session)
        monthly_salary = _non_negative(client.salary if salary is None else salary, "Salary")

        for _ in range(self.retry_attempts):
            existing = repo.get_for_month(client_id, year, month, for_update=True)
            if existing is not None:
                return existing
            budget = MonthlyBudget(
                client_id=client_id,
                year=year,
                month=month,
                monthly_salary=monthly_salary,
                budget_amount=ZERO,
                is_percentage=False,
                daily_budget=ZERO,
                remaining_balance=ZERO,
                days_in_month=days_in_month,
            )
            try:
                with session.begin_nested():
                    created = repo.create(budget)
            except IntegrityError:
                # the rolled-back savepoint already expunged the pending row
                self.logger.info(
                    "Monthly budget created concurrently; re-reading",
                    extra={"client_id": client_id, "year": year, "month": month},
                )
                continue
            self.logger.info(
                "Monthly budget created",
                extra={
                    "client_id": client_id,
                    "budget_id": created.id,
                    "year": year,
                    "month": month,
                },
            )
            return created
        raise ConflictError(
            f"Could not resolve monthly budget for client {client_id} {year}-{month:02d}"
        )

    def apply_delta_in(
        self, session: Session, budget_id: int, amount: MoneyLike, *, is_income: bool
    ) -> MonthlyBudget:
        """Add ``amount`` to the remaining balance for income, subtract it otherwise."""

        delta = signed_amount(amount, is_income=is_income)
        budget = SQLModelMonthlyBudgetRepository(session).add_to_remaining_balance(budget_id, delta)
        if budget is None:
            raise NotFoundError("Monthly budget", budget_id)
        self.logger.debug(
            "Remaining balance adjusted",
            extra={
                "budget_id": budget_id,
                "delta": str(delta),
                "remaining_balance": str(budget.remaining_balance),
            },
        )
        return budget

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, budget_id: int) -> MonthlyBudget:
        return self._run("get_monthly_budget", lambda session: self.get_in(session, budget_id))

    def find(self, client_id: int, year: int, month: int) -> Optional[MonthlyBudget]:
        """Return the budget for the period without creating it."""

        def work(session: Session) -> Optional[MonthlyBudget]:
            return SQLModelMonthlyBudgetRepository(session).get_for_month(client_id, year, month)

        return self._run("find_monthly_budget", work)

    def list_for_client(self, client_id: int) -> list[MonthlyBudget]:
        def work(session: Session) -> list[MonthlyBudget]:
            self.require_client_in(session, client_id)
            return SQLModelMonthlyBudgetRepository(session).list_for_client(client_id)

        return self._run("list_monthly_budgets", work)

    def get_or_create(
        self, client_id: int, year: int, month: int, salary: Optional[MoneyLike] = None
    ) -> MonthlyBudget:
        return self._run(
            "get_or_create_monthly_budget",
            lambda session: self.get_or_create_in(session, client_id, year, month, salary),
        )

    def update_salary(self, budget_id: int, salary: MoneyLike) -> MonthlyBudget:
        """Set the month's salary.

        For a percentage budget with a non-zero percentage the daily budget is
        recomputed and the remaining balance is reset to the new effective
        amount, discarding the effect of transactions booked so far.
        """

        monthly_salary = _non_negative(salary, "Salary")

        def work(session: Session) -> MonthlyBudget:
            budget = self.get_in(session, budget_id, for_update=True)
            budget.monthly_salary = monthly_salary
            if budget.is_percentage and to_money(budget.budget_amount) > 0:
                effective = compute_effective_amount(monthly_salary, budget.budget_amount, True)
                budget.daily_budget = compute_daily_budget(effective, budget.days_in_month)
                budget.remaining_balance = effective
            return SQLModelMonthlyBudgetRepository(session).update(budget)

        budget = self._run("update_monthly_salary", work)
        self.logger.info(
            "Monthly salary updated",
            extra={"budget_id": budget_id, "monthly_salary": str(monthly_salary)},
        )
        return budget

    def update_budget_amount(
        self, budget_id: int, amount: MoneyLike, is_percentage: bool
    ) -> MonthlyBudget:
        """Set the budget policy; resets the remaining balance to the effective amount."""

        budget_amount = _non_negative(amount, "Budget amount")
        if is_percentage:
            validate_percentage(budget_amount)

        def work(session: Session) -> MonthlyBudget:
            budget = self.get_in(session, budget_id, for_update=True)
            effective = compute_effective_amount(budget.monthly_salary, budget_amount, is_percentage)
            budget.budget_amount = budget_amount
            budget.is_percentage = is_percentage
            budget.daily_budget = compute_daily_budget(effective, budget.days_in_month)
            budget.remaining_balance = effective
            return SQLModelMonthlyBudgetRepository(session).update(budget)

        budget = self._run("update_budget_amount", work)
        self.logger.info(
            "Budget amount updated",
            extra={
                "budget_id": budget_id,
                "budget_amount": str(budget_amount),
                "is_percentage": is_percentage,
            },
        )
        return budget

    def apply_delta(self, budget_id: int, amount: MoneyLike, is_income: bool) -> MonthlyBudget:
        return self._run(
            "apply_delta",
            lambda session: self.apply_delta_in(session, budget_id, amount, is_income=is_income),
        )

    def delete(self, budget_id: int) -> None:
        """Administrative removal of a budget together with its transactions."""

        def work(session: Session) -> None:
            budget = self.get_in(session, budget_id, for_update=True)
            SQLModelMonthlyBudgetRepository(session).delete(budget)

        self._run("delete_monthly_budget", work)
        self.logger.info("Monthly budget deleted", extra={"budget_id": budget_id})
