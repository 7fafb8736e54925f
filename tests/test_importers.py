from datetime import date
from decimal import Decimal

import pandas as pd

from finance_tracker.importers import TransactionFileImporter
from finance_tracker.models import TransactionType


def test_csv_rows_are_parsed_and_failures_collected(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text(
        "title,amount,date,category,type,is_fixed,is_paid,id\n"
        "Salary,3000,2024-03-05,Job,income,false,true,17\n"
        ",abc,someday,,expense,,,\n",
        encoding="utf-8",
    )

    sheet = TransactionFileImporter(path).load()

    assert len(sheet.transactions) == 1
    salary = sheet.transactions[0]
    assert salary.id is None
    assert salary.amount == Decimal("3000")
    assert salary.type is TransactionType.INCOME
    assert salary.is_paid is True

    assert len(sheet.failures) == 1
    failure = sheet.failures[0]
    assert failure.row == 3
    assert {error.field for error in failure.errors} == {"title", "amount", "date", "category"}


def test_localised_headers_are_understood(tmp_path):
    path = tmp_path / "planilha.csv"
    path.write_text(
        "Titulo,Valor,Data,Categoria,Tipo,Fixo,Pago\n"
        "Aluguel,\"1.200,00\",10/03/2024,Moradia,expense,sim,nao\n",
        encoding="utf-8",
    )

    sheet = TransactionFileImporter(path).load()

    assert sheet.failures == []
    rent = sheet.transactions[0]
    assert rent.title == "Aluguel"
    assert rent.amount == Decimal("1200.00")
    assert rent.date == date(2024, 3, 10)
    assert rent.is_fixed is True
    assert rent.is_paid is False


def test_excel_files_are_supported(tmp_path):
    path = tmp_path / "export.xlsx"
    pd.DataFrame(
        [
            {"title": "ETF", "amount": "500", "date": "2024-03-01", "category": "Stocks", "type": "investment"},
        ]
    ).to_excel(path, index=False)

    sheet = TransactionFileImporter(path).load()

    assert len(sheet.transactions) == 1
    assert sheet.transactions[0].is_paid is True
