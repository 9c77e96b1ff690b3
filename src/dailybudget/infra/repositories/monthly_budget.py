"""SQLModel implementation of MonthlyBudget repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ...models.monthly_budget import MonthlyBudget


class SQLModelMonthlyBudgetRepository:
    """Monthly budget repository bound to one unit-of-work session.

    Writes are flushed, never committed: the session factory that opened the
    session commits or rolls back the whole unit.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, budget_id: int, *, for_update: bool = False) -> Optional[MonthlyBudget]:
        """Retrieve a budget by ID, re-reading the row even if it is cached."""
        statement = select(MonthlyBudget).where(MonthlyBudget.id == budget_id)
        if for_update:
            statement = statement.with_for_update()
        statement = statement.execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def get_for_month(
        self, client_id: int, year: int, month: int, *, for_update: bool = False
    ) -> Optional[MonthlyBudget]:
        """Get the budget for a client's (year, month)."""
        statement = (
            select(MonthlyBudget)
            .where(MonthlyBudget.client_id == client_id)
            .where(MonthlyBudget.year == year)
            .where(MonthlyBudget.month == month)
        )
        if for_update:
            statement = statement.with_for_update()
        statement = statement.execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def list_for_client(self, client_id: int) -> list[MonthlyBudget]:
        statement = (
            select(MonthlyBudget)
            .where(MonthlyBudget.client_id == client_id)
            .order_by(MonthlyBudget.year.desc(), MonthlyBudget.month.desc())  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def create(self, budget: MonthlyBudget) -> MonthlyBudget:
        """Insert a new budget; raises IntegrityError if the period already exists."""
        self.session.add(budget)
        self.session.flush()
        self.session.refresh(budget)
        return budget

    def update(self, budget: MonthlyBudget) -> MonthlyBudget:
        self.session.add(budget)
        self.session.flush()
        self.session.refresh(budget)
        return budget

    def add_to_remaining_balance(self, budget_id: int, delta: Decimal) -> Optional[MonthlyBudget]:
        """Shift ``remaining_balance`` in a single UPDATE and return the fresh row.

        The arithmetic happens inside the database so two writers can never
        overwrite each other's delta.
        """
        statement = (
            update(MonthlyBudget)
            .where(MonthlyBudget.id == budget_id)
            .values(remaining_balance=MonthlyBudget.remaining_balance + delta)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount == 0:
            return None
        return self.get_by_id(budget_id)

    def delete(self, budget: MonthlyBudget) -> None:
        """Delete a budget; its transactions go with it through the ORM cascade."""
        self.session.delete(budget)
        self.session.flush()
