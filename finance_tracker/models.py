"""Domain models used by the finance_tracker backend.

The classes defined here are lightweight data containers that do not know
anything about persistence or transport concerns. Transactions are frozen:
status flips and edits produce new instances through :func:`dataclasses.replace`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"


class Tone(str, Enum):
    """How a variation should be read by the presentation layer."""

    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single income, expense or investment contribution.

    ``date`` is the nominal occurrence (or due) date. When :attr:`is_fixed` is
    set the transaction recurs in that month and every month after it.
    """

    title: str
    amount: Decimal
    date: date
    category: str
    type: TransactionType
    is_fixed: bool = False
    is_paid: bool = False
    id: Optional[int] = None

    @property
    def is_investment(self) -> bool:
        return self.type is TransactionType.INVESTMENT


@dataclass(frozen=True, slots=True)
class SettlementSplit:
    """Totals of a set split by settlement status."""

    total: Decimal = ZERO
    settled: Decimal = ZERO
    pending: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class AnnualSeries:
    """Per-month income and expense totals for one calendar year."""

    year: int
    income_by_month: tuple[Decimal, ...]
    expense_by_month: tuple[Decimal, ...]
    total_income: Decimal
    total_expense: Decimal
    result: Decimal


@dataclass(frozen=True, slots=True)
class CategoryDelta:
    category: str
    diff: Decimal


@dataclass(frozen=True, slots=True)
class Variation:
    """Percentage change between two scalars.

    ``undefined`` flags a zero base with a non-zero new value; ``percent`` is
    then reported as 100.
    """

    percent: Decimal
    undefined: bool
    tone: Tone
    difference: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class ComparisonReport:
    year1: int
    year2: int
    increases: tuple[CategoryDelta, ...]
    decreases: tuple[CategoryDelta, ...]
    series_y1: AnnualSeries
    series_y2: AnnualSeries
    income_variation: Variation
    expense_variation: Variation
    result_variation: Variation


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    period: str
    income: Decimal
    expense: Decimal
    invested: Decimal
    net_balance: Decimal
    previous_expense: Decimal
    expense_variation: Variation
    expense_by_category: dict[str, Decimal]
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True, slots=True)
class LedgerView:
    """Income or expense screen: the resolved rows and their settlement split."""

    period: str
    type: TransactionType
    split: SettlementSplit
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True, slots=True)
class MonthlyReport:
    period: str
    expense_by_category: dict[str, Decimal]
    daily_balance: tuple[Decimal, ...]


@dataclass(frozen=True, slots=True)
class InvestmentSummary:
    total_invested: Decimal
    current_value: Decimal
    profitability: Variation
    transactions: tuple[Transaction, ...]


__all__ = [
    "ZERO",
    "TransactionType",
    "Tone",
    "Transaction",
    "SettlementSplit",
    "AnnualSeries",
    "CategoryDelta",
    "Variation",
    "ComparisonReport",
    "DashboardSummary",
    "LedgerView",
    "MonthlyReport",
    "InvestmentSummary",
]
