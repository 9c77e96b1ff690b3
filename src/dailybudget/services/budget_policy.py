"""Pure budget arithmetic: effective amount, daily allowance, days per month.

Every money value is a ``Decimal`` quantized to cents with half-up rounding so
running balances never accumulate floating-point drift.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from ..errors import InvalidAmountError, InvalidDateError, InvalidRangeError

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
MAX_MONEY = Decimal("9999999999.99")

MoneyLike = Union[Decimal, int, float, str]


def to_money(value: MoneyLike) -> Decimal:
    """Coerce ``value`` into a cent-precision Decimal."""

    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    try:
        # floats go through str() so 0.1 stays 0.1 instead of its binary expansion
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    try:
        amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"Amount out of range: {value!r}") from exc
    # Numeric(12, 2) columns hold at most ten integer digits
    if abs(amount) > MAX_MONEY:
        raise InvalidAmountError(f"Amount out of range: {value!r}")
    return amount


def to_positive_money(value: MoneyLike) -> Decimal:
    """Coerce ``value`` and require it to be strictly positive."""

    amount = to_money(value)
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be greater than zero, got {amount}")
    return amount


def parse_date(value: Union[date, datetime, str]) -> date:
    """Accept a date, a datetime (date part) or an ISO ``YYYY-MM-DD`` string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date: {value!r}") from exc
    raise InvalidDateError(f"Invalid date: {value!r}")


def compute_days_in_month(year: int, month: int) -> int:
    """Return calendar days in ``month`` of ``year`` (leap-year aware)."""

    if not 1 <= month <= 12:
        raise InvalidDateError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidDateError(f"Year out of range: {year}")
    return monthrange(year, month)[1]


def validate_percentage(percentage: Decimal) -> Decimal:
    if percentage < 0 or percentage > HUNDRED:
        raise InvalidRangeError(f"Percentage must be between 0 and 100, got {percentage}")
    return percentage


@dataclass(frozen=True, slots=True)
class FixedBudget:
    """Budget expressed directly in currency."""

    amount: Decimal

    def effective_amount(self, monthly_salary: MoneyLike) -> Decimal:
        return to_money(self.amount)


@dataclass(frozen=True, slots=True)
class PercentageOfSalary:
    """Budget expressed as a share of the monthly salary."""

    percentage: Decimal

    def __post_init__(self) -> None:
        validate_percentage(Decimal(self.percentage))

    def effective_amount(self, monthly_salary: MoneyLike) -> Decimal:
        return to_money(to_money(monthly_salary) * Decimal(self.percentage) / HUNDRED)


BudgetRule = Union[FixedBudget, PercentageOfSalary]


def budget_rule(budget_amount: MoneyLike, is_percentage: bool) -> BudgetRule:
    """Build the rule described by the persisted ``(budget_amount, is_percentage)`` pair."""

    amount = to_money(budget_amount)
    if is_percentage:
        return PercentageOfSalary(amount)
    return FixedBudget(amount)


def compute_effective_amount(
    monthly_salary: MoneyLike, budget_amount: MoneyLike, is_percentage: bool
) -> Decimal:
    """Resolve a budget policy to currency.

    >>> compute_effective_amount(5000, 60, True)
    Decimal('3000.00')
    """

    return budget_rule(budget_amount, is_percentage).effective_amount(monthly_salary)


def compute_daily_budget(effective_amount: MoneyLike, days_in_month: int) -> Decimal:
    """Spread the effective amount evenly over the month."""

    if days_in_month <= 0:
        raise InvalidRangeError(f"days_in_month must be positive, got {days_in_month}")
    return to_money(to_money(effective_amount) / Decimal(days_in_month))


def signed_amount(amount: MoneyLike, *, is_income: bool) -> Decimal:
    """Return the balance effect of a transaction: income adds, expense subtracts."""

    value = to_money(amount)
    return value if is_income else -value


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last calendar day of the month."""

    last_day = compute_days_in_month(year, month)
    return date(year, month, 1), date(year, month, last_day)
