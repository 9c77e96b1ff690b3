"""Client profile read by the budget core."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Client(SQLModel, table=True):
    """Budget owner; its salary seeds each newly created monthly budget."""

    __tablename__: ClassVar[str] = "client"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=100)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    salary: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
