from datetime import date
from decimal import Decimal

from finance_tracker.models import Tone, TransactionType
from finance_tracker.periods import Period


def save(ledger, **raw):
    result = ledger.save_transaction(raw)
    assert result.ok, result.errors
    return result.value


def test_negative_amount_does_not_alter_the_collection(ledger, repository):
    save(ledger, title="Salary", amount="3000", date="2024-03-05", category="Job", type="income")
    before = repository.get_all()

    result = ledger.save_transaction(
        {"title": "Refund", "amount": "-10", "date": "2024-03-06", "category": "Misc", "type": "expense"}
    )

    assert not result.ok
    assert [error.field for error in result.errors] == ["amount"]
    assert repository.get_all() == before


def test_dashboard_combines_period_views(ledger):
    save(ledger, title="Salary", amount="5000", date="2024-01-05", category="Job", type="income", is_fixed=True)
    save(ledger, title="Rent", amount="1200", date="2024-03-10", category="Housing", type="expense")
    save(ledger, title="Market", amount="300", date="2024-03-12", category="Food", type="expense")
    save(ledger, title="ETF", amount="800", date="2024-03-15", category="Stocks", type="investment")
    save(ledger, title="Old market", amount="100", date="2024-02-12", category="Food", type="expense")

    summary = ledger.dashboard(Period(2024, 3))

    assert summary.period == "2024-03"
    assert summary.income == 5000
    assert summary.expense == 1500
    assert summary.invested == 800
    assert summary.net_balance == 2700
    assert summary.expense_by_category == {"Housing": Decimal("1200"), "Food": Decimal("300")}
    assert summary.previous_expense == 100
    assert summary.expense_variation.tone is Tone.BAD
    assert all(t.type is not TransactionType.INVESTMENT for t in summary.transactions)
    assert [t.date for t in summary.transactions] == sorted(t.date for t in summary.transactions)


def test_expense_view_carries_unpaid_bills_until_paid(ledger):
    bill = save(ledger, title="Power", amount="90", date="2024-02-05", category="Utilities", type="expense")

    march = ledger.expense_view(Period(2024, 3))
    assert [t.id for t in march.transactions] == [bill.id]
    assert march.split.pending == 90

    ledger.toggle_status(bill.id)

    april = ledger.expense_view(Period(2024, 4))
    assert april.transactions == ()
    assert april.split.total == 0


def test_income_view_splits_received_and_pending(ledger):
    save(ledger, title="Salary", amount="3000", date="2024-03-05", category="Job", type="income", is_paid=True)
    save(ledger, title="Freelance", amount="700", date="2024-03-20", category="Side", type="income")
    save(ledger, title="Late invoice", amount="400", date="2024-02-20", category="Side", type="income")

    view = ledger.income_view(Period(2024, 3))

    assert view.type is TransactionType.INCOME
    assert view.split.total == 3700
    assert view.split.settled == 3000
    assert view.split.pending == 700


def test_investments_summary_uses_full_history_and_portfolio_value(ledger):
    save(ledger, title="ETF", amount="1000", date="2022-05-01", category="Stocks", type="investment")
    save(ledger, title="Bond", amount="1000", date="2024-03-01", category="Fixed income", type="investment")
    assert ledger.update_portfolio_value("2500").ok

    summary = ledger.investments()

    assert summary.total_invested == 2000
    assert summary.current_value == 2500
    assert summary.profitability.percent == 25
    assert summary.profitability.difference == 500
    assert [t.title for t in summary.transactions] == ["Bond", "ETF"]


def test_invalid_portfolio_value_keeps_previous_snapshot(ledger, repository):
    ledger.update_portfolio_value("1200")
    result = ledger.update_portfolio_value("abc")
    assert not result.ok
    assert repository.get_portfolio_value() == 1200


def test_edit_without_type_keeps_stored_type(ledger, repository):
    contribution = save(ledger, title="ETF", amount="100", date="2024-03-01", category="Stocks", type="investment")

    result = ledger.save_transaction(
        {"title": "ETF", "amount": "150", "date": "2024-03-01", "category": "Stocks", "is_paid": "false"},
        transaction_id=contribution.id,
    )

    assert result.ok
    stored = repository.get(contribution.id)
    assert stored.type is TransactionType.INVESTMENT
    assert stored.amount == 150
    assert stored.is_paid is True


def test_edit_cannot_turn_an_investment_into_another_type(ledger, repository):
    contribution = save(ledger, title="ETF", amount="100", date="2024-03-01", category="Stocks", type="investment")

    result = ledger.save_transaction(
        {
            "title": "ETF",
            "amount": "100",
            "date": "2024-03-01",
            "category": "Stocks",
            "type": "expense",
            "is_fixed": "true",
            "is_paid": "false",
        },
        transaction_id=contribution.id,
    )

    assert result.ok
    stored = repository.get(contribution.id)
    assert stored.type is TransactionType.INVESTMENT
    assert stored.is_fixed is False
    assert stored.is_paid is True


def test_edit_of_deleted_record_is_a_no_op(ledger, repository):
    bill = save(ledger, title="Power", amount="90", date="2024-02-05", category="Utilities", type="expense")
    ledger.delete_transaction(bill.id)

    result = ledger.save_transaction(
        {"title": "Power", "amount": "95", "date": "2024-02-05", "category": "Utilities", "type": "expense"},
        transaction_id=bill.id,
    )

    assert result.ok
    assert result.value is None
    assert repository.get_all() == []


def test_monthly_report(ledger):
    save(ledger, title="Salary", amount="100", date="2024-04-01", category="Job", type="income")
    save(ledger, title="Snack", amount="30", date="2024-04-01", category="Food", type="expense")
    save(ledger, title="Bonus", amount="50", date="2024-04-15", category="Job", type="income")

    report = ledger.monthly_report(Period(2024, 4))

    assert report.expense_by_category == {"Food": Decimal("30")}
    assert len(report.daily_balance) == 30
    assert report.daily_balance[0] == 70
    assert report.daily_balance[-1] == 120


def test_comparative_report_honours_configured_limit(ledger, config):
    for index in range(7):
        save(ledger, title=f"T{index}", amount=str(10 * (index + 1)), date="2024-05-01",
             category=f"C{index}", type="expense")

    report = ledger.comparative_report(2023, 2024)

    assert len(report.increases) == config.top_movers == 5
    assert report.increases[0].category == "C6"
    assert report.decreases == ()


def test_report_years(ledger):
    save(ledger, title="Old", amount="1", date="2019-05-01", category="Misc", type="expense")

    years = ledger.report_years(today=date(2024, 6, 1))

    assert years == {"years": [2024, 2023, 2019], "comparison": {"year1": 2023, "year2": 2024}}


def test_import_file_saves_valid_rows_and_collects_failures(ledger, config, repository):
    config.data_file.write_text(
        "title,amount,date,category,type,is_fixed,is_paid\n"
        "Salary,3000,2024-03-05,Job,income,false,true\n"
        "Broken,-5,2024-03-06,Misc,expense,false,false\n"
        "Rent,1200,2024-03-10,Housing,expense,true,false\n",
        encoding="utf-8",
    )

    report = ledger.import_file()

    assert len(report.imported) == 2
    assert all(t.id is not None for t in report.imported)
    assert [failure.row for failure in report.failures] == [3]
    assert len(repository.get_all()) == 2
