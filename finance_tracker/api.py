"""FastAPI application exposing the finance_tracker backend."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Annotated, Any, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware

from .config import load_config
from .database import SQLiteRepository
from .formatting import format_date, format_money, format_percent
from .models import Transaction, TransactionType, Variation
from .periods import Period
from .services import LedgerService
from .state import ViewState
from .validation import ParseResult

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Initialise shared services once and reuse them across requests."""

    config = load_config()
    logging.basicConfig(level=config.log_level)
    repository = SQLiteRepository(config.database_file)
    repository.initialise_schema()
    logger.info("Using database %s", config.database_file)

    app.state.config = config
    app.state.repository = repository
    app.state.ledger = LedgerService(config, repository)

    yield

    repository.close()


app = FastAPI(lifespan=lifespan, title="finance_tracker backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependency injection ------------------------------------------------------

def get_ledger_service() -> LedgerService:
    service: LedgerService = app.state.ledger
    return service


def get_period(
    year: Annotated[Optional[int], Query(ge=1, le=9999)] = None,
    month: Annotated[Optional[int], Query(ge=1, le=12)] = None,
) -> Period:
    """Requested month, defaulting each missing part to today's."""

    today = date.today()
    return Period(year or today.year, month or today.month)


LedgerDep = Annotated[LedgerService, Depends(get_ledger_service)]
PeriodDep = Annotated[Period, Depends(get_period)]


# Helpers -------------------------------------------------------------------

def _payload(value: object) -> Any:
    return jsonable_encoder(value)


def _transaction_row(transaction: Transaction) -> dict[str, object]:
    row = _payload(transaction)
    symbol = app.state.config.currency_symbol
    row["display_amount"] = format_money(transaction.amount, symbol)
    row["display_date"] = format_date(transaction.date)
    return row


def _variation(variation: Variation) -> dict[str, object]:
    payload = _payload(variation)
    payload["display"] = format_percent(variation.percent)
    return payload


def _unwrap(result: ParseResult) -> object:
    if not result.ok:
        raise HTTPException(
            status_code=422,
            detail=[{"field": error.field, "message": error.message} for error in result.errors],
        )
    return result.value


# Routes --------------------------------------------------------------------


@app.get("/health")
def health_check() -> dict[str, str]:
    """Return a basic heartbeat payload for monitoring purposes."""

    return {"status": "ok"}


@app.get("/transactions")
def list_transactions(ledger: LedgerDep) -> dict[str, object]:
    transactions = ledger.list_transactions()
    return {"transactions": [_transaction_row(t) for t in transactions], "count": len(transactions)}


@app.post("/transactions", status_code=201)
def create_transaction(
    ledger: LedgerDep,
    payload: Annotated[dict[str, Any], Body()],
    type_: Annotated[Optional[TransactionType], Query(alias="type")] = None,
) -> dict[str, object]:
    """Validate and insert a new transaction.

    Any ``id`` in the body is ignored; use ``PUT /transactions/{id}`` to edit.
    """

    payload = {key: value for key, value in payload.items() if key != "id"}
    saved = _unwrap(ledger.save_transaction(payload, type_=type_))
    return {"transaction": _transaction_row(saved)}


@app.put("/transactions/{transaction_id}")
def update_transaction(
    transaction_id: int,
    ledger: LedgerDep,
    payload: Annotated[dict[str, Any], Body()],
) -> dict[str, object]:
    saved = _unwrap(ledger.save_transaction(payload, transaction_id=transaction_id))
    if saved is None:
        return {"saved": False, "transaction": None}
    return {"saved": True, "transaction": _transaction_row(saved)}


@app.delete("/transactions/{transaction_id}")
def delete_transaction(transaction_id: int, ledger: LedgerDep) -> dict[str, object]:
    return {"deleted": ledger.delete_transaction(transaction_id)}


@app.post("/transactions/{transaction_id}/toggle")
def toggle_transaction_status(transaction_id: int, ledger: LedgerDep) -> dict[str, object]:
    toggled = ledger.toggle_status(transaction_id)
    transaction = ledger.get_transaction(transaction_id)
    return {
        "toggled": toggled,
        "transaction": _transaction_row(transaction) if transaction else None,
    }


@app.get("/dashboard")
def dashboard(ledger: LedgerDep, period: PeriodDep) -> dict[str, object]:
    summary = ledger.dashboard(period)
    payload = _payload(summary)
    payload["transactions"] = [_transaction_row(t) for t in summary.transactions]
    payload["expense_variation"] = _variation(summary.expense_variation)
    return payload


@app.get("/incomes")
def income_view(ledger: LedgerDep, period: PeriodDep) -> dict[str, object]:
    view = ledger.income_view(period)
    payload = _payload(view)
    payload["transactions"] = [_transaction_row(t) for t in view.transactions]
    return payload


@app.get("/expenses")
def expense_view(ledger: LedgerDep, period: PeriodDep) -> dict[str, object]:
    view = ledger.expense_view(period)
    payload = _payload(view)
    payload["transactions"] = [_transaction_row(t) for t in view.transactions]
    return payload


@app.get("/investments")
def investments(ledger: LedgerDep) -> dict[str, object]:
    summary = ledger.investments()
    payload = _payload(summary)
    payload["transactions"] = [_transaction_row(t) for t in summary.transactions]
    payload["profitability"] = _variation(summary.profitability)
    return payload


@app.put("/portfolio/value")
def update_portfolio_value(
    ledger: LedgerDep,
    payload: Annotated[dict[str, Any], Body()],
) -> dict[str, object]:
    value = _unwrap(ledger.update_portfolio_value(payload.get("value")))
    return {"current_value": _payload(value)}


@app.get("/reports/monthly")
def monthly_report(ledger: LedgerDep, period: PeriodDep) -> dict[str, object]:
    return _payload(ledger.monthly_report(period))


@app.get("/reports/annual")
def annual_report(
    ledger: LedgerDep,
    year: Annotated[Optional[int], Query(ge=1, le=9999)] = None,
) -> dict[str, object]:
    return _payload(ledger.annual_report(year or date.today().year))


@app.get("/reports/comparative")
def comparative_report(
    ledger: LedgerDep,
    year1: Annotated[Optional[int], Query(ge=1, le=9999)] = None,
    year2: Annotated[Optional[int], Query(ge=1, le=9999)] = None,
) -> dict[str, object]:
    if year1 is None or year2 is None:
        defaults = ledger.report_years()["comparison"]
        year1 = year1 or defaults["year1"]
        year2 = year2 or defaults["year2"]
    return _payload(ledger.comparative_report(year1, year2))


@app.get("/reports/years")
def report_years(ledger: LedgerDep) -> dict[str, object]:
    return ledger.report_years()


@app.get("/periods/navigate")
def navigate_period(
    period: PeriodDep,
    delta: Annotated[int, Query(ge=-1200, le=1200)] = 0,
) -> dict[str, object]:
    """Return the month ``delta`` months away from the requested one."""

    try:
        state = ViewState(period).navigate(delta)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    target = state.selected_period
    return {"year": target.year, "month": target.month, "period": str(target)}


@app.post("/import")
def import_transactions(ledger: LedgerDep) -> dict[str, object]:
    """Import the configured CSV/Excel file and persist every valid row."""

    try:
        report = ledger.import_file()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {
        "source": report.source,
        "imported": len(report.imported),
        "failures": _payload(report.failures),
    }
