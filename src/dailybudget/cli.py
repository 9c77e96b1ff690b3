"""Command line entry points for DailyBudget."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import click

from .config import BaseConfig
from .errors import DailyBudgetError
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelCategoryRepository, SQLModelClientRepository
from .logging_config import setup_logging
from .models import Category, Client, TransactionType
from .services import DailyTransactionService, ExpenseAggregator, MonthlyBudgetService

DEMO_EMAIL = "client@example.com"
DEMO_CATEGORIES = ("Food & Dining", "Transportation", "Entertainment")
DEMO_TRANSACTIONS = (
    ("Lunch", Decimal("15.00"), TransactionType.EXPENSE, "Food & Dining"),
    ("Coffee", Decimal("5.00"), TransactionType.EXPENSE, "Food & Dining"),
    ("Bus Fare", Decimal("3.50"), TransactionType.EXPENSE, "Transportation"),
    ("Freelance", Decimal("120.00"), TransactionType.INCOME, None),
)


class _Context:
    def __init__(self, config: BaseConfig):
        self.config = config
        self.logger = setup_logging(config)
        self.engine = create_db_engine(config)
        self.session_factory = create_session_factory(self.engine)
        self.budgets = MonthlyBudgetService(
            self.session_factory, retry_attempts=config.CONFLICT_RETRIES
        )
        self.ledger = DailyTransactionService(
            self.session_factory, budgets=self.budgets, retry_attempts=config.CONFLICT_RETRIES
        )
        self.aggregates = ExpenseAggregator(
            self.session_factory, retry_attempts=config.CONFLICT_RETRIES
        )


@click.group()
@click.option("--database-url", envvar="DAILYBUDGET_DATABASE_URL", default=None, help="Override database URL")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Monthly budget and daily transaction tools."""

    config = BaseConfig()
    if database_url:
        config.DATABASE_URL = database_url
    ctx.obj = _Context(config)


@cli.command("init-db")
@click.pass_obj
def init_db(app: _Context) -> None:
    """Create database tables."""

    init_database(app.engine)
    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@cli.command("seed-demo")
@click.option(
    "--on",
    "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Date to book the demo transactions on (defaults to today)",
)
@click.pass_obj
def seed_demo(app: _Context, on_date: Optional[datetime]) -> None:
    """Seed a demo client with a 60% budget and a few transactions."""

    init_database(app.engine)
    day = on_date.date() if on_date else date.today()
    with app.session_factory() as session:
        clients = SQLModelClientRepository(session)
        client = clients.get_by_email(DEMO_EMAIL)
        if client is None:
            client = clients.create(
                Client(name="Demo Client", email=DEMO_EMAIL, salary=Decimal("5000.00"))
            )
        categories = SQLModelCategoryRepository(session)
        existing = {c.name: c for c in categories.list_for_client(client.id)}
        for name in DEMO_CATEGORIES:
            if name not in existing:
                existing[name] = categories.create(Category(client_id=client.id, name=name))
        client_id = client.id
        category_ids = {name: cat.id for name, cat in existing.items()}

    budget = app.budgets.get_or_create(client_id, day.year, day.month)
    if app.ledger.list_for_budget(budget.id):
        click.echo(f"Demo data already present for {day:%Y-%m} (budget {budget.id}); skipping")
        return

    budget = app.budgets.update_budget_amount(budget.id, Decimal("60"), True)
    for description, amount, txn_type, category_name in DEMO_TRANSACTIONS:
        app.ledger.create(
            description=description,
            amount=amount,
            txn_type=txn_type,
            occurred_on=day,
            client_id=client_id,
            category_id=category_ids.get(category_name) if category_name else None,
        )
    budget = app.budgets.get(budget.id)
    click.echo(
        f"Seeded client {client_id}: budget {budget.id} for {day:%Y-%m}, "
        f"remaining balance {budget.remaining_balance}"
    )


@cli.command("month-summary")
@click.argument("client_id", type=int)
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.pass_obj
def month_summary(app: _Context, client_id: int, year: int, month: int) -> None:
    """Print budget figures and expense totals for a client-month.

    Expects a database prepared by ``init-db`` or ``seed-demo``.
    """

    try:
        summary = app.aggregates.monthly_summary(client_id, year, month)
    except DailyBudgetError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"Period:            {year}-{month:02d}")
    click.echo(f"Income:            {summary.income}")
    click.echo(f"Expenses:          {summary.expenses}")
    click.echo(f"Net:               {summary.net}")
    if summary.remaining_balance is None:
        click.echo("No budget recorded for this month")
    else:
        click.echo(f"Daily budget:      {summary.daily_budget}")
        click.echo(f"Remaining balance: {summary.remaining_balance}")


def main() -> None:  # pragma: no cover - console script shim
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
