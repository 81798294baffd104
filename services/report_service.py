from dataclasses import dataclass, field
from datetime import date

from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from utils.date_helpers import (
    add_months, format_date, format_month, last_n_months, parse_date, today,
)
from utils.errors import ValidationError


@dataclass
class CategoryTotal:
    category: str
    total: float = 0.0
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.transactions)


class ReportService:
    """Read-only projections over the ledger. Nothing here mutates state."""

    def __init__(self, tx_dao: TransactionDAO):
        self._tx_dao = tx_dao

    def filter_transactions(
        self,
        start: str | None = None,
        end: str | None = None,
        type_: str | None = None,
    ) -> list[Transaction]:
        """Transactions in [start, end] (inclusive), optionally of one type, by date."""
        return self._tx_dao.get_by_date_range(start, end, type_)

    def group_by_category(
        self,
        start: str | None = None,
        end: str | None = None,
        type_: str | None = "expense",
    ) -> list[CategoryTotal]:
        """Per-category sums with their member transactions, largest first."""
        groups: dict[str, CategoryTotal] = {}
        for tx in self.filter_transactions(start, end, type_):
            name = tx.category or "Uncategorized"
            group = groups.setdefault(name, CategoryTotal(category=name))
            group.total += tx.amount
            group.transactions.append(tx)
        return sorted(groups.values(), key=lambda g: (-g.total, g.category))

    def get_period_summary(self, start: str | None = None, end: str | None = None) -> dict:
        totals = self._tx_dao.get_totals_for_range(start, end)
        totals["net"] = totals["income"] - totals["expense"] - totals["savings"]
        return totals

    def get_monthly_trend(self, months: int = 6, end_month: str | None = None) -> list[dict]:
        """Return [{month, income, expense, savings, net}] oldest first, zero-filled."""
        month_list = last_n_months(months, end_month)
        totals = self._tx_dao.get_monthly_totals(month_list[0], month_list[-1])
        rows = []
        for month in month_list:
            t = totals.get(month, {})
            income = t.get("income") or 0.0
            expense = t.get("expense") or 0.0
            savings = t.get("savings") or 0.0
            rows.append({
                "month": month,
                "income": income,
                "expense": expense,
                "savings": savings,
                "net": income - expense - savings,
            })
        return rows

    def get_savings_stats(self, as_of: date | str | None = None) -> dict:
        """Savings figures counting only transactions dated on or before as_of."""
        ref = parse_date(as_of) if as_of else today()
        if ref is None:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD.")
        ref_str = format_date(ref)
        current_month = format_month(ref)
        last_month = format_month(add_months(ref.replace(day=1), -1))

        savings = self._tx_dao.get_by_date_range(None, ref_str, "savings")
        income = self._tx_dao.get_by_date_range(f"{current_month}-01", ref_str, "income")

        def month_total(month: str) -> float:
            return sum(t.amount for t in savings if t.date.startswith(month))

        current_total = month_total(current_month)
        last_total = month_total(last_month)

        by_category: dict[str, float] = {}
        for t in savings:
            name = t.category or "Other"
            by_category[name] = by_category.get(name, 0.0) + t.amount
        top = sorted(by_category.items(), key=lambda kv: kv[1], reverse=True)[:3]

        month_income = sum(t.amount for t in income)
        return {
            "current_month": current_total,
            "last_month": last_total,
            "total": sum(t.amount for t in savings),
            "top_categories": top,
            "monthly": [month_total(m) for m in last_n_months(6, current_month)],
            "progression": ((current_total - last_total) / last_total * 100) if last_total > 0 else 0.0,
            "savings_rate": (current_total / month_income * 100) if month_income > 0 else 0.0,
        }
