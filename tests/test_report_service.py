import pytest

from utils.errors import ValidationError


@pytest.fixture
def ledger(svc, make_template):
    add = svc.transactions.create
    add(make_template("Pay", 3000, "income", "Salary"), "2024-01-01")
    add(make_template("Rent", 1200, "expense", "Housing"), "2024-01-02")
    add(make_template("Food", 150, "expense", "Groceries"), "2024-01-10")
    add(make_template("Food", 90.5, "expense", "Groceries"), "2024-01-24")
    add(make_template("Misc", 20, "expense", ""), "2024-01-25")
    add(make_template("RRSP", 300, "savings", "Retirement"), "2024-01-15")
    add(make_template("Pay", 3000, "income", "Salary"), "2024-03-01")
    add(make_template("Rent", 1200, "expense", "Housing"), "2024-03-02")
    return svc.reports


def test_filter_transactions_inclusive_and_typed(ledger):
    jan = ledger.filter_transactions("2024-01-01", "2024-01-31")
    assert len(jan) == 6
    assert [t.date for t in jan] == sorted(t.date for t in jan)
    assert len(ledger.filter_transactions("2024-01-10", "2024-01-24", "expense")) == 2


def test_group_by_category_sums_and_orders(ledger):
    groups = ledger.group_by_category("2024-01-01", "2024-01-31", "expense")
    assert [g.category for g in groups] == ["Housing", "Groceries", "Uncategorized"]
    assert groups[1].total == pytest.approx(240.5)
    assert groups[1].count == 2


def test_period_summary_net(ledger):
    summary = ledger.get_period_summary("2024-01-01", "2024-01-31")
    assert summary["income"] == pytest.approx(3000)
    assert summary["expense"] == pytest.approx(1460.5)
    assert summary["savings"] == pytest.approx(300)
    assert summary["net"] == pytest.approx(1239.5)


def test_monthly_trend_zero_fills_gaps(ledger):
    rows = ledger.get_monthly_trend(months=3, end_month="2024-03")
    assert [r["month"] for r in rows] == ["2024-01", "2024-02", "2024-03"]
    assert rows[1] == {"month": "2024-02", "income": 0.0, "expense": 0.0, "savings": 0.0, "net": 0.0}
    assert rows[2]["net"] == pytest.approx(1800)


def test_savings_stats_ignore_future_dates(svc, make_template):
    add = svc.transactions.create
    add(make_template("Pay", 1000, "income", "Salary"), "2024-03-01")
    add(make_template("EF", 100, "savings", "Emergency Fund"), "2024-03-10")
    add(make_template("EF", 50, "savings", "Emergency Fund"), "2024-03-20")
    add(make_template("RRSP", 80, "savings", "Retirement"), "2024-02-05")

    stats = svc.reports.get_savings_stats(as_of="2024-03-15")
    assert stats["current_month"] == pytest.approx(100)
    assert stats["last_month"] == pytest.approx(80)
    assert stats["total"] == pytest.approx(180)
    assert stats["top_categories"] == [("Emergency Fund", 100), ("Retirement", 80)]
    assert stats["monthly"] == [0, 0, 0, 0, 80, 100]
    assert stats["progression"] == pytest.approx(25.0)
    assert stats["savings_rate"] == pytest.approx(10.0)


def test_savings_stats_empty_ledger(svc):
    stats = svc.reports.get_savings_stats(as_of="2024-03-15")
    assert stats["total"] == 0
    assert stats["progression"] == 0.0
    assert stats["savings_rate"] == 0.0


def test_savings_stats_reject_malformed_date(svc):
    with pytest.raises(ValidationError):
        svc.reports.get_savings_stats("2024/01/01")
