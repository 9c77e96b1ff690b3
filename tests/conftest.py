"""Pytest configuration and shared fixtures for DailyBudget tests.

Every test gets its own SQLite file under ``tmp_path`` wired exactly like the
application engine (pragmas, ``BEGIN IMMEDIATE``), so the budget services run
against real transactions without touching the developer database.
"""

from __future__ import annotations

import itertools
import logging
from decimal import Decimal

import pytest
from sqlmodel import select

from dailybudget.config import TestConfig
from dailybudget.infra.database import bootstrap_database, create_session_factory
from dailybudget.infra.repositories import SQLModelCategoryRepository, SQLModelClientRepository
from dailybudget.logging_config import ROOT_LOGGER_NAME
from dailybudget.models import Category, Client, MonthlyBudget
from dailybudget.services import DailyTransactionService, ExpenseAggregator, MonthlyBudgetService

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path, monkeypatch) -> TestConfig:
    """Configuration rooted in a per-test temporary data directory."""

    monkeypatch.setenv("DAILYBUDGET_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.delenv("DAILYBUDGET_DATABASE_URL", raising=False)
    return TestConfig()


@pytest.fixture
def db_engine(config):
    """Create an isolated SQLite database with all tables for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    engine, _ = bootstrap_database(config)

    yield engine

    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Unit-of-work factory matching the one the services receive in production."""

    return create_session_factory(db_engine)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def budgets(session_factory) -> MonthlyBudgetService:
    return MonthlyBudgetService(session_factory)


@pytest.fixture
def ledger(session_factory, budgets) -> DailyTransactionService:
    return DailyTransactionService(session_factory, budgets=budgets)


@pytest.fixture
def aggregates(session_factory) -> ExpenseAggregator:
    return ExpenseAggregator(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def client_factory(session_factory):
    """Factory for creating test clients.

    Returns:
        Callable: Function that creates and persists Client instances
    """

    counter = itertools.count(1)

    def _create_client(
        name: str = "Test Client",
        salary: str | Decimal = "5000.00",
        email: str | None = None,
        is_active: bool = True,
    ) -> Client:
        email = email or f"client{next(counter)}@example.com"
        with session_factory() as session:
            return SQLModelClientRepository(session).create(
                Client(name=name, email=email, salary=Decimal(salary), is_active=is_active)
            )

    return _create_client


@pytest.fixture
def client(client_factory) -> Client:
    """Default client earning 5000.00 a month."""

    return client_factory()


@pytest.fixture
def category_factory(session_factory):
    """Factory for creating categories owned by a given client."""

    def _create_category(client_id: int, name: str = "Food & Dining") -> Category:
        with session_factory() as session:
            return SQLModelCategoryRepository(session).create(
                Category(client_id=client_id, name=name)
            )

    return _create_category


@pytest.fixture
def funded_budget(budgets, client):
    """Budget for June 2024 (30 days) at 60% of a 5000.00 salary: 3000.00 to spend."""

    budget = budgets.get_or_create(client.id, 2024, 6)
    return budgets.update_budget_amount(budget.id, Decimal("60"), True)


# =============================================================================
# Helper Utilities
# =============================================================================


@pytest.fixture
def count_budgets(session_factory):
    """Return a helper counting the budget rows stored for a client."""

    def _count(client_id: int) -> int:
        with session_factory() as session:
            statement = select(MonthlyBudget).where(MonthlyBudget.client_id == client_id)
            return len(session.exec(statement).all())

    return _count


@pytest.fixture
def reset_logging():
    """Drop handlers installed by ``setup_logging`` so they do not leak between tests."""

    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
