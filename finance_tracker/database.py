"""SQLite persistence layer for the finance_tracker backend.

The repository provides a small, well-typed API that hides SQL details from the
rest of the code. It relies on the standard library :mod:`sqlite3` module and
always serves the full collection: the engine re-derives every view from a
fresh read and never asks the store to filter or order.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .models import ZERO, Transaction, TransactionType

logger = logging.getLogger(__name__)

PORTFOLIO_VALUE_KEY = "portfolio_value"


class SQLiteRepository:
    """Encapsulates all SQLite access for the application."""

    def __init__(self, database_path: Path | str) -> None:
        self._database_path = database_path
        # Sync FastAPI routes run on threadpool workers.
        self._connection = sqlite3.connect(database_path, check_same_thread=False)
        self._connection.execute("PRAGMA foreign_keys = ON;")
        self._connection.row_factory = sqlite3.Row

    def close(self) -> None:
        """Close the underlying SQLite connection."""

        self._connection.close()

    # ------------------------------------------------------------------
    # Schema management
    # ------------------------------------------------------------------
    def initialise_schema(self) -> None:
        """Create all tables required by the application if they do not exist."""

        cursor = self._connection.cursor()
        cursor.executescript(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                amount TEXT NOT NULL,
                date TEXT NOT NULL,
                category TEXT NOT NULL,
                type TEXT NOT NULL CHECK (type IN ('income', 'expense', 'investment')),
                is_fixed INTEGER NOT NULL DEFAULT 0,
                is_paid INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )
        self._connection.commit()

    # ------------------------------------------------------------------
    # Transaction persistence
    # ------------------------------------------------------------------
    def get_all(self) -> list[Transaction]:
        """Return every stored transaction, in no particular order."""

        rows = self._connection.execute("SELECT * FROM transactions").fetchall()
        return [_row_to_transaction(row) for row in rows]

    def get(self, transaction_id: int) -> Optional[Transaction]:
        row = self._connection.execute(
            "SELECT * FROM transactions WHERE id = ?",
            (transaction_id,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_transaction(row)

    def save(self, transaction: Transaction) -> Optional[Transaction]:
        """Insert or replace a transaction.

        A transaction without an id is inserted and returned with the id the
        database assigned. A transaction with an id replaces the matching
        record; when no record matches nothing is written and ``None`` is
        returned.
        """

        params = {
            "title": transaction.title,
            "amount": str(transaction.amount),
            "date": transaction.date.isoformat(),
            "category": transaction.category,
            "type": transaction.type.value,
            "is_fixed": int(transaction.is_fixed),
            "is_paid": int(transaction.is_paid),
        }

        if transaction.id is None:
            cursor = self._connection.execute(
                """
                INSERT INTO transactions (title, amount, date, category, type, is_fixed, is_paid)
                VALUES (:title, :amount, :date, :category, :type, :is_fixed, :is_paid)
                """,
                params,
            )
            self._connection.commit()
            return replace(transaction, id=cursor.lastrowid)

        cursor = self._connection.execute(
            """
            UPDATE transactions SET
                title = :title,
                amount = :amount,
                date = :date,
                category = :category,
                type = :type,
                is_fixed = :is_fixed,
                is_paid = :is_paid
            WHERE id = :id
            """,
            {**params, "id": transaction.id},
        )
        self._connection.commit()
        if cursor.rowcount == 0:
            logger.info("Ignoring update of unknown transaction %s", transaction.id)
            return None
        return transaction

    def delete(self, transaction_id: int) -> bool:
        """Remove a transaction. Unknown ids are ignored."""

        cursor = self._connection.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        self._connection.commit()
        if cursor.rowcount == 0:
            logger.info("Ignoring delete of unknown transaction %s", transaction_id)
            return False
        return True

    def toggle_status(self, transaction_id: int) -> bool:
        """Flip ``is_paid``. Unknown ids are ignored."""

        cursor = self._connection.execute(
            "UPDATE transactions SET is_paid = 1 - is_paid WHERE id = ?",
            (transaction_id,),
        )
        self._connection.commit()
        if cursor.rowcount == 0:
            logger.info("Ignoring status toggle of unknown transaction %s", transaction_id)
            return False
        return True

    # ------------------------------------------------------------------
    # Settings helpers
    # ------------------------------------------------------------------
    def set_setting(self, key: str, value: str) -> None:
        self._connection.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._connection.commit()

    def get_setting(self, key: str, default: Optional[str] = None) -> Optional[str]:
        row = self._connection.execute(
            "SELECT value FROM settings WHERE key = ?",
            (key,),
        ).fetchone()
        if row is None:
            return default
        return str(row["value"])

    def get_portfolio_value(self) -> Decimal:
        """Last recorded market value of the portfolio, ``0`` when never set."""

        stored = self.get_setting(PORTFOLIO_VALUE_KEY)
        if stored is None:
            return ZERO
        return Decimal(stored)

    def set_portfolio_value(self, value: Decimal) -> None:
        self.set_setting(PORTFOLIO_VALUE_KEY, str(value))


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=int(row["id"]),
        title=row["title"],
        amount=Decimal(row["amount"]),
        date=date.fromisoformat(row["date"]),
        category=row["category"],
        type=TransactionType(row["type"]),
        is_fixed=bool(row["is_fixed"]),
        is_paid=bool(row["is_paid"]),
    )
