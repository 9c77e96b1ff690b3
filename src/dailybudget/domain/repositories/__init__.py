"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository
from .client import ClientRepository
from .daily_transaction import DailyTransactionRepository
from .monthly_budget import MonthlyBudgetRepository

__all__ = [
    "CategoryRepository",
    "ClientRepository",
    "DailyTransactionRepository",
    "MonthlyBudgetRepository",
]
