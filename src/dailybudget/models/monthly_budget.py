"""Per-client monthly budget table."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .daily_transaction import DailyTransaction


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonthlyBudget(SQLModel, table=True):
    """Salary, budget policy and running balance for one (client, year, month).

    ``budget_amount`` is a currency value when ``is_percentage`` is false and a
    percentage of ``monthly_salary`` otherwise. ``remaining_balance`` starts at
    the effective amount and moves with every transaction booked against it.
    """

    __tablename__: ClassVar[str] = "monthly_budget"
    __table_args__ = (
        UniqueConstraint("client_id", "year", "month", name="uq_monthly_budget_client_period"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="client.id", nullable=False, index=True)
    year: int = Field(nullable=False)
    month: int = Field(nullable=False)
    monthly_salary: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    budget_amount: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    is_percentage: bool = Field(default=False, nullable=False)
    daily_budget: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    remaining_balance: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    days_in_month: int = Field(nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    transactions: list["DailyTransaction"] = Relationship(
        back_populates="monthly_budget",
        sa_relationship=relationship(
            "DailyTransaction",
            back_populates="monthly_budget",
            cascade="all, delete-orphan",
        ),
    )
