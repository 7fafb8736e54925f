"""Year-over-year comparison and percentage variations."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Union

from .aggregator import annual_series
from .config import DEFAULT_TOP_MOVERS
from .models import ZERO, CategoryDelta, ComparisonReport, Tone, Transaction, TransactionType, Variation

HUNDRED = Decimal("100")

Number = Union[Decimal, int, float]


def category_totals_strict(transactions: Iterable[Transaction], year: int) -> dict[str, Decimal]:
    """Expense totals per category for transactions literally dated in ``year``.

    Fixed transactions are counted once, in the year of their date; there is no
    forward projection here, unlike the monthly views.
    """

    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.type is not TransactionType.EXPENSE or transaction.date.year != year:
            continue
        totals[transaction.category] = totals.get(transaction.category, ZERO) + transaction.amount
    return totals


def category_deltas(transactions: Iterable[Transaction], year1: int, year2: int) -> list[CategoryDelta]:
    snapshot = tuple(transactions)
    totals1 = category_totals_strict(snapshot, year1)
    totals2 = category_totals_strict(snapshot, year2)

    # dict.fromkeys keeps year1's order, then appends categories new in year2.
    categories = dict.fromkeys([*totals1, *totals2])
    deltas = []
    for category in categories:
        diff = totals2.get(category, ZERO) - totals1.get(category, ZERO)
        if diff != 0:
            deltas.append(CategoryDelta(category=category, diff=diff))
    return deltas


def top_increases(deltas: Iterable[CategoryDelta], limit: int = DEFAULT_TOP_MOVERS) -> tuple[CategoryDelta, ...]:
    ranked = sorted((d for d in deltas if d.diff > 0), key=lambda d: d.diff, reverse=True)
    return tuple(ranked[:limit])


def top_decreases(deltas: Iterable[CategoryDelta], limit: int = DEFAULT_TOP_MOVERS) -> tuple[CategoryDelta, ...]:
    ranked = sorted((d for d in deltas if d.diff < 0), key=lambda d: d.diff)
    return tuple(ranked[:limit])


def variation(v1: Number, v2: Number, *, is_expense: bool = False) -> Variation:
    """Percentage change from ``v1`` to ``v2``.

    A zero base reports 0% when both sides are zero and 100% (flagged as
    undefined) otherwise. Growth reads as bad for expenses and good for
    income or balances.
    """

    base = _to_decimal(v1)
    new = _to_decimal(v2)
    undefined = False
    if base != 0:
        percent = (new - base) / abs(base) * HUNDRED
    elif new != 0:
        percent = HUNDRED
        undefined = True
    else:
        percent = ZERO
    return Variation(percent=percent, undefined=undefined, tone=_tone(percent, is_expense), difference=new - base)


def profitability(total_invested: Number, current_value: Number) -> Variation:
    """Unrealised gain of the portfolio relative to what was contributed."""

    return variation(total_invested, current_value)


def compare(
    transactions: Iterable[Transaction],
    year1: int,
    year2: int,
    limit: int = DEFAULT_TOP_MOVERS,
) -> ComparisonReport:
    snapshot = tuple(transactions)
    deltas = category_deltas(snapshot, year1, year2)
    series_y1 = annual_series(snapshot, year1)
    series_y2 = annual_series(snapshot, year2)
    return ComparisonReport(
        year1=year1,
        year2=year2,
        increases=top_increases(deltas, limit),
        decreases=top_decreases(deltas, limit),
        series_y1=series_y1,
        series_y2=series_y2,
        income_variation=variation(series_y1.total_income, series_y2.total_income),
        expense_variation=variation(series_y1.total_expense, series_y2.total_expense, is_expense=True),
        result_variation=variation(series_y1.result, series_y2.result),
    )


def _tone(percent: Decimal, is_expense: bool) -> Tone:
    if percent == 0:
        return Tone.NEUTRAL
    grew = percent > 0
    if is_expense:
        return Tone.BAD if grew else Tone.GOOD
    return Tone.GOOD if grew else Tone.BAD


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)
