"""SQLModel implementation of DailyTransaction repository."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.daily_transaction import DailyTransaction, TransactionType


class SQLModelDailyTransactionRepository:
    """Daily transaction repository bound to one unit-of-work session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, transaction_id: int) -> Optional[DailyTransaction]:
        statement = (
            select(DailyTransaction)
            .where(DailyTransaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        return self.session.exec(statement).first()

    def list_for_client(
        self, client_id: int, *, limit: int = 100, offset: int = 0
    ) -> list[DailyTransaction]:
        """List a client's transactions, newest first."""
        statement = (
            select(DailyTransaction)
            .where(DailyTransaction.client_id == client_id)
            .order_by(DailyTransaction.occurred_on.desc(), DailyTransaction.id.desc())  # type: ignore
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def filter_by_date_range(
        self, client_id: int, start_date: date, end_date: date
    ) -> list[DailyTransaction]:
        """Get transactions within ``[start_date, end_date]``."""
        statement = (
            select(DailyTransaction)
            .where(DailyTransaction.client_id == client_id)
            .where(DailyTransaction.occurred_on >= start_date)
            .where(DailyTransaction.occurred_on <= end_date)
            .order_by(DailyTransaction.occurred_on, DailyTransaction.id)  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def list_for_budget(self, budget_id: int) -> list[DailyTransaction]:
        statement = (
            select(DailyTransaction)
            .where(DailyTransaction.monthly_budget_id == budget_id)
            .order_by(DailyTransaction.occurred_on, DailyTransaction.id)  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def create(self, transaction: DailyTransaction) -> DailyTransaction:
        self.session.add(transaction)
        self.session.flush()
        self.session.refresh(transaction)
        return transaction

    def update(self, transaction: DailyTransaction) -> DailyTransaction:
        self.session.add(transaction)
        self.session.flush()
        self.session.refresh(transaction)
        return transaction

    def delete(self, transaction: DailyTransaction) -> None:
        self.session.delete(transaction)
        self.session.flush()

    def sum_expenses(self, client_id: int, start_date: date, end_date: date) -> Decimal:
        """Sum expense amounts within ``[start_date, end_date]``; 0 when none."""
        statement = (
            select(func.coalesce(func.sum(DailyTransaction.amount), 0))
            .where(DailyTransaction.client_id == client_id)
            .where(DailyTransaction.txn_type == TransactionType.EXPENSE)
            .where(DailyTransaction.occurred_on >= start_date)
            .where(DailyTransaction.occurred_on <= end_date)
        )
        total = self.session.exec(statement).one()
        return Decimal(str(total or 0))

    def get_period_totals(
        self, client_id: int, start_date: date, end_date: date
    ) -> dict[str, Decimal]:
        """Get income/expense totals within ``[start_date, end_date]``."""
        statement = (
            select(DailyTransaction.txn_type, func.sum(DailyTransaction.amount))
            .where(DailyTransaction.client_id == client_id)
            .where(DailyTransaction.occurred_on >= start_date)
            .where(DailyTransaction.occurred_on <= end_date)
            .group_by(DailyTransaction.txn_type)
        )
        totals = {TransactionType.INCOME.value: Decimal("0"), TransactionType.EXPENSE.value: Decimal("0")}
        for txn_type, amount in self.session.exec(statement).all():
            key = txn_type.value if isinstance(txn_type, TransactionType) else str(txn_type).lower()
            totals[key] = Decimal(str(amount or 0))
        return totals
