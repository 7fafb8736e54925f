"""Application configuration utilities for the finance_tracker backend.

This module centralises environment-driven configuration so the rest of the
code base does not need to read environment variables directly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TOP_MOVERS = 5


@dataclass(frozen=True)
class AppConfig:
    """Strongly-typed container for runtime configuration.

    Attributes:
        project_root: Root directory of the project. Used to derive default
            paths so the app works out of the box after cloning the repo.
        data_file: CSV or Excel file used by the batch importer when no
            explicit path is supplied.
        database_file: Absolute path to the SQLite database file holding the
            transactions and the portfolio snapshot.
        currency_symbol: Symbol prefixed to formatted money values.
        top_movers: How many categories the comparative report keeps in each
            of its increase/decrease rankings.
        log_level: Name of the root logging level (``INFO``, ``DEBUG``...).
    """

    project_root: Path
    data_file: Path
    database_file: Path
    currency_symbol: str
    top_movers: int
    log_level: str


def load_config() -> AppConfig:
    """Create a new :class:`AppConfig` instance based on environment settings.

    Environment variables override the default values, allowing users to
    customise the runtime without touching the source code.
    """

    project_root = Path(__file__).resolve().parent.parent
    data_file = Path(
        getenv_with_default(
            "FINANCE_TRACKER_DATA_FILE",
            project_root / "data" / "transactions.csv",
        )
    )
    database_file = Path(
        getenv_with_default(
            "FINANCE_TRACKER_DB_FILE",
            project_root / "finance_tracker.db",
        )
    )
    currency_symbol = getenv_with_default("FINANCE_TRACKER_CURRENCY_SYMBOL", "R$")
    top_movers = _parse_positive_int(
        getenv_with_default("FINANCE_TRACKER_TOP_MOVERS"),
        DEFAULT_TOP_MOVERS,
    )
    log_level = _parse_log_level(getenv_with_default("FINANCE_TRACKER_LOG_LEVEL"), "INFO")

    # Ensure the directories exist so later code can safely create files.
    database_file.parent.mkdir(parents=True, exist_ok=True)

    return AppConfig(
        project_root=project_root,
        data_file=data_file,
        database_file=database_file,
        currency_symbol=currency_symbol,
        top_movers=top_movers,
        log_level=log_level,
    )


def getenv_with_default(name: str, default: Optional[Path | str] = None) -> Optional[str]:
    """Return the value of an environment variable or a sensible default.

    ``None`` values are propagated so callers can make explicit decisions about
    optional configuration values. Paths are converted to strings, keeping the
    return type uniform and easy to serialise.
    """

    from os import getenv

    value = getenv(name)
    if value is not None:
        return value
    if default is None:
        return None
    return str(default)


def _parse_positive_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_log_level(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    level = value.strip().upper()
    # getLevelName maps known names to their numeric level.
    return level if isinstance(logging.getLevelName(level), int) else default
