"""SQLModel table exports."""

from .category import Category
from .client import Client
from .daily_transaction import DailyTransaction, TransactionType
from .monthly_budget import MonthlyBudget

__all__ = [
    "Category",
    "Client",
    "DailyTransaction",
    "MonthlyBudget",
    "TransactionType",
]
