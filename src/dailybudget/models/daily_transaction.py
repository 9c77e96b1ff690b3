"""SQLModel definitions for daily ledger entries."""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Index
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .monthly_budget import MonthlyBudget


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


class DailyTransaction(SQLModel, table=True):
    """A dated income or expense booked against a monthly budget.

    ``amount`` is always positive; ``txn_type`` carries the sign.
    """

    __tablename__: ClassVar[str] = "daily_transaction"
    __table_args__ = (
        Index("ix_daily_transaction_client_occurred_on", "client_id", "occurred_on"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    description: str = Field(nullable=False, max_length=255)
    amount: Decimal = Field(nullable=False, max_digits=12, decimal_places=2)
    txn_type: TransactionType = Field(default=TransactionType.EXPENSE, nullable=False)
    occurred_on: date = Field(nullable=False)
    remaining_balance_after_transaction: Decimal = Field(
        default=Decimal("0.00"), max_digits=12, decimal_places=2
    )
    client_id: int = Field(foreign_key="client.id", nullable=False)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    monthly_budget_id: int = Field(foreign_key="monthly_budget.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    monthly_budget: "MonthlyBudget" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("MonthlyBudget", back_populates="transactions"),
    )

    @property
    def is_income(self) -> bool:
        return self.txn_type == TransactionType.INCOME
