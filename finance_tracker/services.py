"""High-level application services orchestrating the finance_tracker backend.

Each query reads the whole collection from the repository and re-derives the
screen from scratch through the pure engine functions; nothing is cached
between calls.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Mapping, Optional

from . import aggregator, analyzer
from .config import AppConfig
from .database import SQLiteRepository
from .importers import ImportReport, TransactionFileImporter
from .models import (
    AnnualSeries,
    ComparisonReport,
    DashboardSummary,
    InvestmentSummary,
    LedgerView,
    MonthlyReport,
    Transaction,
    TransactionType,
)
from .periods import Period, available_years, default_comparison_years
from .resolver import (
    CONTRIBUTIONS_VIEW,
    DASHBOARD_VIEW,
    EXPENSE_VIEW,
    INCOME_VIEW,
    ViewPolicy,
    investment_history,
    sorted_by_date,
)
from .validation import ParseResult, parse_portfolio_value, parse_transaction

logger = logging.getLogger(__name__)

EXPENSES_ONLY = frozenset({TransactionType.EXPENSE})


class LedgerService:
    """Coordinates persistence, validation and the reporting engine."""

    def __init__(self, config: AppConfig, repository: SQLiteRepository) -> None:
        self._config = config
        self._repository = repository

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def save_transaction(
        self,
        raw: Mapping[str, object],
        *,
        type_: Optional[TransactionType] = None,
        transaction_id: Optional[int] = None,
    ) -> ParseResult[Transaction]:
        """Validate ``raw`` and upsert it.

        Invalid input leaves the store untouched and the failure is returned
        as is. Editing an id that no longer exists is a no-op whose result has
        no value. An edit that omits the type keeps the stored one, and a
        stored investment stays an investment whatever the input says.
        """

        if transaction_id is not None:
            existing = self._repository.get(transaction_id)
            if existing is not None and (existing.is_investment or (type_ is None and not raw.get("type"))):
                type_ = existing.type

        parsed = parse_transaction(raw, type_=type_, transaction_id=transaction_id)
        if not parsed.ok:
            logger.info("Rejected transaction input: %s", [error.field for error in parsed.errors])
            return parsed

        saved = self._repository.save(parsed.value)
        return ParseResult(value=saved)

    def import_file(self, path: Optional[Path | str] = None) -> ImportReport:
        """Import a CSV/Excel file, saving valid rows and collecting failures."""

        source = Path(path) if path is not None else self._config.data_file
        sheet = TransactionFileImporter(source).load()
        report = ImportReport(source=str(source), failures=sheet.failures)
        for transaction in sheet.transactions:
            report.imported.append(self._repository.save(transaction))
        return report

    def delete_transaction(self, transaction_id: int) -> bool:
        return self._repository.delete(transaction_id)

    def toggle_status(self, transaction_id: int) -> bool:
        return self._repository.toggle_status(transaction_id)

    def update_portfolio_value(self, raw: object) -> ParseResult[Decimal]:
        parsed = parse_portfolio_value(raw)
        if parsed.ok:
            self._repository.set_portfolio_value(parsed.value)
        return parsed

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def list_transactions(self) -> tuple[Transaction, ...]:
        return sorted_by_date(self._repository.get_all(), newest_first=True)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._repository.get(transaction_id)

    def dashboard(self, period: Period) -> DashboardSummary:
        transactions = self._repository.get_all()
        current = DASHBOARD_VIEW.apply(transactions, period)
        contributions = CONTRIBUTIONS_VIEW.apply(transactions, period)
        previous = DASHBOARD_VIEW.apply(transactions, period.previous())

        expense = aggregator.sum_by_type(current, TransactionType.EXPENSE)
        previous_expense = aggregator.sum_by_type(previous, TransactionType.EXPENSE)
        return DashboardSummary(
            period=str(period),
            income=aggregator.sum_by_type(current, TransactionType.INCOME),
            expense=expense,
            invested=aggregator.sum_by_type(contributions, TransactionType.INVESTMENT),
            net_balance=aggregator.net_balance(current + contributions),
            previous_expense=previous_expense,
            expense_variation=analyzer.variation(previous_expense, expense, is_expense=True),
            expense_by_category=aggregator.category_totals(current, EXPENSES_ONLY),
            transactions=sorted_by_date(current),
        )

    def income_view(self, period: Period) -> LedgerView:
        return self._ledger_view(period, INCOME_VIEW, TransactionType.INCOME)

    def expense_view(self, period: Period) -> LedgerView:
        return self._ledger_view(period, EXPENSE_VIEW, TransactionType.EXPENSE)

    def investments(self) -> InvestmentSummary:
        history = investment_history(self._repository.get_all())
        total_invested = aggregator.sum_by_type(history, TransactionType.INVESTMENT)
        current_value = self._repository.get_portfolio_value()
        return InvestmentSummary(
            total_invested=total_invested,
            current_value=current_value,
            profitability=analyzer.profitability(total_invested, current_value),
            transactions=sorted_by_date(history, newest_first=True),
        )

    def monthly_report(self, period: Period) -> MonthlyReport:
        members = DASHBOARD_VIEW.apply(self._repository.get_all(), period)
        return MonthlyReport(
            period=str(period),
            expense_by_category=aggregator.category_totals(members, EXPENSES_ONLY),
            daily_balance=aggregator.daily_cumulative_balance(period, members),
        )

    def annual_report(self, year: int) -> AnnualSeries:
        return aggregator.annual_series(self._repository.get_all(), year)

    def comparative_report(self, year1: int, year2: int) -> ComparisonReport:
        return analyzer.compare(self._repository.get_all(), year1, year2, limit=self._config.top_movers)

    def report_years(self, today: Optional[date] = None) -> dict[str, object]:
        """Years to offer in the report pickers and the default comparison pair."""

        years = available_years((t.date for t in self._repository.get_all()), today or date.today())
        year1, year2 = default_comparison_years(years)
        return {"years": years, "comparison": {"year1": year1, "year2": year2}}

    def _ledger_view(self, period: Period, policy: ViewPolicy, type_: TransactionType) -> LedgerView:
        members = policy.apply(self._repository.get_all(), period)
        return LedgerView(
            period=str(period),
            type=type_,
            split=aggregator.settlement_split(members),
            transactions=sorted_by_date(members),
        )
