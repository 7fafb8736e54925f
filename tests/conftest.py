from pathlib import Path

import pytest

from finance_tracker.config import AppConfig
from finance_tracker.database import SQLiteRepository
from finance_tracker.services import LedgerService


@pytest.fixture
def repository(tmp_path: Path):
    repo = SQLiteRepository(tmp_path / "ledger.db")
    repo.initialise_schema()
    yield repo
    repo.close()


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        project_root=tmp_path,
        data_file=tmp_path / "transactions.csv",
        database_file=tmp_path / "ledger.db",
        currency_symbol="R$",
        top_movers=5,
        log_level="INFO",
    )


@pytest.fixture
def ledger(config: AppConfig, repository: SQLiteRepository) -> LedgerService:
    return LedgerService(config, repository)
