import argparse
import os
import sys
from dataclasses import dataclass

import structlog

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.goal_dao import GoalDAO

from services.balance_reconciler import BalanceReconciler
from services.transaction_service import TransactionService
from services.recurring_service import RecurringService
from services.series_editor import SeriesEditor
from services.account_service import AccountService
from services.category_service import CategoryService
from services.goal_service import GoalService
from services.report_service import ReportService
from services.net_worth_service import NetWorthService
from services.data_service import DataService
from services.chart_service import ChartService

from utils.app_config import get_db_folder, get_log_level, set_db_folder
from utils.constants import APP_NAME, OPEN_ENDED_OCCURRENCE_CAP, SERIES_EDIT_CAP
from utils.currency import format_currency, format_signed
from utils.date_helpers import current_month_str, friendly_month, month_range, prev_month
from utils.logging_config import configure_logging

logger = structlog.get_logger(__name__)


@dataclass
class Services:
    db: DatabaseManager
    accounts: AccountService
    transactions: TransactionService
    recurring: RecurringService
    series: SeriesEditor
    categories: CategoryService
    goals: GoalService
    reports: ReportService
    net_worth: NetWorthService
    data: DataService
    charts: ChartService


def build_services(db: DatabaseManager) -> Services:
    # ── DAOs ─────────────────────────────────────────────────────────────────
    account_dao = AccountDAO(db)
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    goal_dao = GoalDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    reconciler = BalanceReconciler(account_dao)
    tx_svc = TransactionService(tx_dao, reconciler)
    account_svc = AccountService(account_dao)
    return Services(
        db=db,
        accounts=account_svc,
        transactions=tx_svc,
        recurring=RecurringService(
            tx_svc,
            open_ended_cap=db.get_int_setting("open_ended_occurrence_cap", OPEN_ENDED_OCCURRENCE_CAP),
        ),
        series=SeriesEditor(tx_dao, tx_svc, max_count=SERIES_EDIT_CAP),
        categories=CategoryService(category_dao, tx_dao, tx_svc),
        goals=GoalService(goal_dao),
        reports=ReportService(tx_dao),
        net_worth=NetWorthService(account_svc),
        data=DataService(db, tx_dao, account_dao, category_dao, goal_dao),
        charts=ChartService(currency_symbol=db.get_setting("currency_symbol", "$")),
    )


def _print_summary(svc: Services, month: str):
    symbol = svc.db.get_setting("currency_symbol", "$")
    start, end = month_range(month)
    summary = svc.reports.get_period_summary(start, end)
    previous = svc.reports.get_period_summary(*month_range(prev_month(month)))
    worth = svc.net_worth.get_breakdown()
    groups = svc.series.get_groups()

    print(f"{APP_NAME}: {friendly_month(month)}")
    for key in ("income", "expense", "savings", "net"):
        print(f"  {key.capitalize():<10}{format_currency(summary[key], symbol):>14}")
    change = format_signed(summary["net"] - previous["net"], symbol)
    print(f"  Net change vs {friendly_month(prev_month(month))}: {change}")
    print(f"  {'Assets':<10}{format_currency(worth['total_assets'], symbol):>14}")
    print(f"  {'Debts':<10}{format_currency(worth['total_liabilities'], symbol):>14}")
    print(f"  {'Net worth':<10}{format_currency(worth['net_worth'], symbol):>14}")
    print(f"  Recurring series: {len(groups)}")


def _write_charts(svc: Services, out_dir: str, month: str):
    os.makedirs(out_dir, exist_ok=True)
    start, end = month_range(month)
    trend = svc.reports.get_monthly_trend(months=6, end_month=month)
    colors = {c.name: c.color_hex for c in svc.categories.get_by_type("expense")}
    charts = {
        "monthly.png": svc.charts.monthly_bars(trend),
        "net.png": svc.charts.net_line(trend),
        "categories.png": svc.charts.category_pie(
            svc.reports.group_by_category(start, end, "expense"), colors
        ),
    }
    for name, png in charts.items():
        with open(os.path.join(out_dir, name), "wb") as f:
            f.write(png)
    logger.info("charts_written", out_dir=out_dir, charts=sorted(charts))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="budget-ledger", description=APP_NAME)
    parser.add_argument("--db-folder", default=None, help="directory holding budget.db")
    parser.add_argument("--remember-db-folder", action="store_true",
                        help="save --db-folder to the user config for later runs")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--json-logs", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_summary = sub.add_parser("summary", help="month totals and net worth")
    p_summary.add_argument("--month", default=None, help="YYYY-MM (default: current)")

    p_export = sub.add_parser("export", help="write a full snapshot")
    p_export.add_argument("path")
    p_export.add_argument("--csv", action="store_true", help="CSV-in-ZIP instead of JSON")

    p_import = sub.add_parser("import", help="replace all data from a JSON snapshot")
    p_import.add_argument("path")

    p_charts = sub.add_parser("charts", help="render report charts as PNG")
    p_charts.add_argument("out_dir")
    p_charts.add_argument("--month", default=None)

    args = parser.parse_args(argv)
    configure_logging(args.log_level or get_log_level(), json_output=args.json_logs)
    if args.remember_db_folder:
        if not args.db_folder:
            parser.error("--remember-db-folder needs --db-folder")
        set_db_folder(os.path.abspath(args.db_folder))

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=args.db_folder or get_db_folder())
    try:
        svc = build_services(db)
        if args.command == "summary":
            _print_summary(svc, args.month or current_month_str())
        elif args.command == "export":
            if args.csv:
                svc.data.export_csv_zip(args.path)
            else:
                svc.data.export_json(args.path)
        elif args.command == "import":
            stats = svc.data.import_json(args.path)
            print(", ".join(f"{k}: {v}" for k, v in stats.items()))
        elif args.command == "charts":
            _write_charts(svc, args.out_dir, args.month or current_month_str())
    except ValueError as exc:
        parser.error(str(exc))
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
